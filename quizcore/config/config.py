from __future__ import annotations

"""Configuration loading and validation for quizcore.

This module loads YAML configuration, applies defaults, and validates
that enumerations and paths are sane for the service and CLI.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_BACKENDS = {"memory", "parquet"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ValidationError(f"Config file not found: {path}") from None
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {path} must contain a mapping at top level")
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def _as_bool(value: Any, name: str, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    logger.warning("Config value %s=%r is not a boolean, using %r", name, value, default)
    return default


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unknown enum values fall back to defaults with a warning, mirroring
    how a hand-edited config should degrade instead of aborting.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("quiz", {})
    cfg.setdefault("storage", {})
    cfg.setdefault("logging", {})

    quiz = cfg["quiz"]
    storage = cfg["storage"]
    log_cfg = cfg["logging"]

    quiz.setdefault("catalog_path", None)
    quiz.setdefault("lock_completed", False)
    quiz.setdefault("validate_answers", True)

    storage.setdefault("backend", "memory")
    storage.setdefault("data_dir", "./quiz_data")

    log_cfg.setdefault("level", "INFO")
    log_cfg.setdefault("json", False)

    quiz["lock_completed"] = _as_bool(quiz["lock_completed"], "quiz.lock_completed", False)
    quiz["validate_answers"] = _as_bool(quiz["validate_answers"], "quiz.validate_answers", True)
    log_cfg["json"] = _as_bool(log_cfg["json"], "logging.json", False)

    catalog_path = quiz.get("catalog_path")
    if catalog_path is not None and not Path(str(catalog_path)).exists():
        raise ValidationError(f"Question catalog not found at '{catalog_path}'")

    backend = str(storage.get("backend", "")).lower()
    if backend not in ALLOWED_BACKENDS:
        logger.warning("Unsupported storage backend '%s', using 'memory'", storage.get("backend"))
        backend = "memory"
    storage["backend"] = backend

    level = str(log_cfg.get("level", "")).upper()
    if level not in ALLOWED_LOG_LEVELS:
        logger.warning("Unsupported log level '%s', using 'INFO'", log_cfg.get("level"))
        level = "INFO"
    log_cfg["level"] = level

    return cfg
