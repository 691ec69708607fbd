import pytest

from bundledupes.errors import ConfigError, ReportFormatError
from bundledupes.stages.loader import extract_payload, get_extractor, load_report

from conftest import REPORT_TEMPLATE, write_report


def test_extract_payload_from_multiline_html():
    html = REPORT_TEMPLATE.format(chart='[{"label": "main.js", "groups": [{"path": "./a.js", "parsedSize": 3}]}]')
    data = extract_payload(html)
    assert data == [{"label": "main.js", "groups": [{"path": "./a.js", "parsedSize": 3}]}]


def test_single_root_object_is_wrapped():
    html = REPORT_TEMPLATE.format(chart='{"groups": [{"path": "./a.js", "parsedSize": 1000}]}')
    data = extract_payload(html)
    assert isinstance(data, list) and len(data) == 1


def test_missing_marker_raises():
    with pytest.raises(ReportFormatError):
        extract_payload("<html><body><script>var x = 1;</script></body></html>")


def test_invalid_json_raises():
    html = REPORT_TEMPLATE.format(chart="[{not json}]")
    with pytest.raises(ReportFormatError):
        extract_payload(html)


def test_wrong_shape_raises():
    html = REPORT_TEMPLATE.format(chart='"just a string"')
    with pytest.raises(ReportFormatError):
        extract_payload(html)


def test_load_report_reads_file(project):
    path = write_report(project, [{"path": "./x.js", "statSize": 10}])
    assert load_report(str(path)) == [{"path": "./x.js", "statSize": 10}]


def test_load_report_missing_file(project):
    with pytest.raises(ReportFormatError):
        load_report(str(project / "nope.html"))


def test_unknown_format():
    with pytest.raises(ConfigError):
        get_extractor("rollup-visualizer")


def test_load_report_not_utf8(project):
    path = project / "client.html"
    path.write_bytes(b"<script>\xff window.chartData = [];\n window.defaultSizes")
    with pytest.raises(ReportFormatError):
        load_report(str(path))
