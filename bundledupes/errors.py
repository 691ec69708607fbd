"""Fatal errors raised by the analysis pipeline.

Every error aborts the run; the CLI turns them into a non-zero exit.
"""


class BundleDupesError(Exception):
    pass


class ConfigError(BundleDupesError):
    pass


class ReportFormatError(BundleDupesError):
    """The bundle report is unreadable or its embedded payload is malformed."""


class InvalidEntryError(BundleDupesError):
    """A reconciled path is empty, outside the store, or missing on disk."""


class UnresolvableEntryError(BundleDupesError):
    """A path does not match the package store layout."""


class ManifestError(BundleDupesError):
    pass


class ManifestReadError(ManifestError):
    pass


class ManifestParseError(ManifestError):
    pass
