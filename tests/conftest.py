import json
from pathlib import Path

import pytest


REPORT_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8"/>
    <title>client [26 Oct 2026 at 10:12]</title>
  </head>
  <body>
    <div id="app"></div>
    <script>
      window.chartData = {chart};
      window.defaultSizes = "parsed";
    </script>
  </body>
</html>
"""


def store_path(key: str, name: str, rel: str = "") -> str:
    base = f"./node_modules/.pnpm/{key}/node_modules/{name}"
    return f"{base}/{rel}" if rel else base


def install(root: Path, key: str, name: str, version: str, files=("index.js",)) -> str:
    """Lay out one package copy in a fake pnpm store and return its identity."""
    pkg_dir = root / "node_modules" / ".pnpm" / key / "node_modules" / name
    pkg_dir.mkdir(parents=True, exist_ok=True)
    (pkg_dir / "package.json").write_text(json.dumps({"name": name, "version": version}), encoding="utf-8")
    for rel in files:
        target = pkg_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("module.exports = {};\n", encoding="utf-8")
    return store_path(key, name)


def write_report(root: Path, chart) -> Path:
    path = root / ".next" / "analyze" / "client.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(REPORT_TEMPLATE.format(chart=json.dumps(chart)), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "web"
    root.mkdir()
    return root
