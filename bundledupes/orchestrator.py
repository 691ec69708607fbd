import os
import time
import uuid
import yaml
from typing import Dict, Any, Optional, TextIO

from bundledupes.errors import ConfigError
from bundledupes.models import DuplicateReport
from bundledupes.rendering.console import DEFAULT_WARN_BYTES, print_report
from bundledupes.stages.aggregate import aggregate
from bundledupes.stages.flatten import flatten, parse_nodes
from bundledupes.stages.loader import DEFAULT_FORMAT, load_report
from bundledupes.stages.reconcile import reconcile
from bundledupes.stages.resolver import resolve_packages
from bundledupes.utils import write_output, validate_config, get_logger, now_utc

logger = get_logger(__name__)

DEFAULT_REPORT = os.path.join(".next", "analyze", "client.html")


def default_config() -> Dict[str, Any]:
    return {
        "root": ".",
        "report_format": DEFAULT_FORMAT,
        "warn_bytes": DEFAULT_WARN_BYTES,
        "color": True,
        "output": {},
    }


def _apply_env(cfg: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> None:
    env = os.environ if env is None else env
    if env.get("ROOT"):
        cfg["root"] = env["ROOT"]
    if env.get("REPORT_PATH"):
        cfg["report_path"] = env["REPORT_PATH"]
    # https://no-color.org: any non-empty value disables color
    if env.get("NO_COLOR"):
        cfg["color"] = False


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    if overrides.get("root") is not None:
        cfg["root"] = overrides["root"]
    if overrides.get("report_path") is not None:
        cfg["report_path"] = overrides["report_path"]
    if overrides.get("report_format") is not None:
        cfg["report_format"] = overrides["report_format"]
    if overrides.get("warn_bytes") is not None:
        cfg["warn_bytes"] = int(overrides["warn_bytes"])
    if overrides.get("color") is not None:
        cfg["color"] = bool(overrides["color"])
    if overrides.get("json_path") is not None:
        cfg.setdefault("output", {})["json"] = overrides["json_path"]


def build_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Merge defaults < YAML file < environment < CLI overrides."""
    cfg = default_config()
    if config_path:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                file_cfg = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load config {config_path}: {e}") from e
        validate_config(file_cfg)
        output = dict(cfg["output"], **file_cfg.pop("output", {}))
        cfg.update(file_cfg)
        cfg["output"] = output

    _apply_env(cfg, env)
    _apply_overrides(cfg, overrides)

    if not cfg.get("report_path"):
        cfg["report_path"] = os.path.join(cfg["root"], DEFAULT_REPORT)
    validate_config(cfg)
    return cfg


def _execute_pipeline(cfg: Dict[str, Any], stream: Optional[TextIO] = None) -> DuplicateReport:
    """Run every stage, then print; nothing is printed if a stage fails."""
    root = cfg["root"]
    report_path = cfg["report_path"]
    logger.info("config loaded root=%s report=%s format=%s", root, report_path, cfg["report_format"])

    t0 = time.monotonic()
    payload = load_report(report_path, cfg["report_format"])
    entries = flatten(parse_nodes(payload))
    logger.info("loaded entries=%d took_ms=%d", len(entries), int((time.monotonic()-t0)*1000))

    t1 = time.monotonic()
    entries = reconcile(entries, root)
    packages = resolve_packages(entries, root)
    logger.info("resolved installs=%d took_ms=%d", len(packages), int((time.monotonic()-t1)*1000))

    report = aggregate(entries, packages, report_path=report_path)

    json_path = cfg.get("output", {}).get("json")
    if json_path:
        js = report.model_dump(mode="json")
        js["generated_at"] = now_utc().isoformat().replace("+00:00", "Z")
        write_output(js, json_path)
        logger.info("json report written: %s", json_path)

    print_report(report, color=cfg["color"], warn_bytes=cfg["warn_bytes"], stream=stream)
    return report


def run_once(
    config_path: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    stream: Optional[TextIO] = None,
) -> DuplicateReport:
    """Execute the analysis once and print the report."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = build_config(config_path, overrides)
        return _execute_pipeline(cfg, stream)

    except Exception as e:
        logger.error("Analysis failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
