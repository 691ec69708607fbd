from __future__ import annotations

import abc
import json
import re
from typing import Any, Dict, List

from jsonschema.exceptions import ValidationError

from bundledupes.errors import ConfigError, ReportFormatError
from bundledupes.utils import check_schema, get_logger

logger = get_logger(__name__)

DEFAULT_FORMAT = "webpack-bundle-analyzer"


class ReportExtractor(abc.ABC):
    """Pulls the size-breakdown payload out of a bundle report document."""

    name: str = ""

    @abc.abstractmethod
    def extract(self, text: str) -> Any:
        ...


class WebpackBundleAnalyzerExtractor(ReportExtractor):
    """Reads ``window.chartData`` from webpack-bundle-analyzer's static HTML."""

    name = DEFAULT_FORMAT

    # chartData is followed by defaultSizes in every release that emits it
    _CHART_DATA_RE = re.compile(r"<script>\s*window\.chartData = (.*);\s*window\.defaultSizes")

    def extract(self, text: str) -> Any:
        flat = text.replace("\r", "").replace("\n", "")
        m = self._CHART_DATA_RE.search(flat)
        if not m:
            raise ReportFormatError("window.chartData assignment not found in report")
        try:
            return json.loads(m.group(1))
        except json.JSONDecodeError as e:
            raise ReportFormatError(f"window.chartData is not valid JSON: {e}") from e


_EXTRACTORS: Dict[str, ReportExtractor] = {}


def register_extractor(extractor: ReportExtractor) -> None:
    _EXTRACTORS[extractor.name] = extractor


def get_extractor(fmt: str) -> ReportExtractor:
    try:
        return _EXTRACTORS[fmt]
    except KeyError:
        known = ", ".join(sorted(_EXTRACTORS))
        raise ConfigError(f"Unknown report format: {fmt} (known: {known})") from None


register_extractor(WebpackBundleAnalyzerExtractor())


def extract_payload(text: str, fmt: str = DEFAULT_FORMAT) -> List[dict]:
    """Extract and shape-check the payload; a single root node is wrapped in a list."""
    data = get_extractor(fmt).extract(text)
    if isinstance(data, dict):
        data = [data]
    try:
        check_schema(data, "chart_data.schema.json")
    except ValidationError as e:
        raise ReportFormatError(f"Unexpected chart data shape: {e.message} at {list(e.path)}") from e
    return data


def load_report(path: str, fmt: str = DEFAULT_FORMAT) -> List[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReportFormatError(f"Cannot read report {path}: {e}") from e
    data = extract_payload(text, fmt)
    logger.info("loader: format=%s roots=%d path=%s", fmt, len(data), path)
    return data
