"""Find npm packages bundled in more than one version."""

__all__: list[str] = []
