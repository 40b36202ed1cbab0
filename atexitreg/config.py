"""Configuration for atexitreg: registration policy while draining and callback failure policy."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import yaml
except ImportError:
    yaml = None  # type: ignore[assignment]

from atexitreg._registry import ON_ERROR_CHOICES, ON_ERROR_RAISE

_DEFAULT_IGNORE_DURING_DRAIN = True
_DEFAULT_ON_ERROR = ON_ERROR_RAISE

_CONFIG_DIR_NAME = ".atexitreg"
_CONFIG_FILE_NAME = "config.yaml"

ENV_IGNORE_DURING_DRAIN = "ATEXITREG_IGNORE_DURING_DRAIN"
ENV_ON_ERROR = "ATEXITREG_ON_ERROR"

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


@dataclass
class AtExitConfig:
    """Policies applied to the process-wide exit registry."""

    ignore_during_drain: bool
    on_error: str


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from path. Return {} if file missing, invalid, or yaml unavailable."""
    if yaml is None:
        return {}
    if not path.is_file():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def _parse_bool(val: Any, default: bool) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, int):
        return bool(val)
    if isinstance(val, str):
        s = val.strip().lower()
        if s in _TRUE_STRINGS:
            return True
        if s in _FALSE_STRINGS:
            return False
    return default


def _parse_on_error(val: Any, default: str) -> str:
    if isinstance(val, str) and val.strip().lower() in ON_ERROR_CHOICES:
        return val.strip().lower()
    return default


def _apply_yaml(config: dict[str, Any], key: str, default: Any) -> Any:
    """Get value from config dict if present and valid; else return default."""
    if key not in config:
        return default
    val = config[key]
    if val is None:
        return default
    if key == "ignore_during_drain":
        return _parse_bool(val, default)
    if key == "on_error":
        return _parse_on_error(val, default)
    return default


def load_config(project_root: Path | None = None) -> AtExitConfig:
    """
    Load AtExitConfig with precedence (highest first):
    1. Environment variables (only when set)
    2. .atexitreg/config.yaml in project root (if present)
    3. ~/.atexitreg/config.yaml
    """
    ignore_during_drain = _DEFAULT_IGNORE_DURING_DRAIN
    on_error = _DEFAULT_ON_ERROR

    # 3. User config
    user_cfg = _load_yaml(Path.home() / _CONFIG_DIR_NAME / _CONFIG_FILE_NAME)
    if user_cfg:
        ignore_during_drain = _apply_yaml(user_cfg, "ignore_during_drain", ignore_during_drain)
        on_error = _apply_yaml(user_cfg, "on_error", on_error)

    # 2. Project config (overrides user)
    root = project_root if project_root is not None else Path.cwd()
    proj_cfg = _load_yaml(root / _CONFIG_DIR_NAME / _CONFIG_FILE_NAME)
    if proj_cfg:
        ignore_during_drain = _apply_yaml(proj_cfg, "ignore_during_drain", ignore_during_drain)
        on_error = _apply_yaml(proj_cfg, "on_error", on_error)

    # 1. Env (overrides all)
    env_ignore = os.environ.get(ENV_IGNORE_DURING_DRAIN)
    if env_ignore is not None:
        ignore_during_drain = _parse_bool(env_ignore, ignore_during_drain)

    env_on_error = os.environ.get(ENV_ON_ERROR)
    if env_on_error is not None:
        on_error = _parse_on_error(env_on_error, on_error)

    return AtExitConfig(
        ignore_during_drain=ignore_during_drain,
        on_error=on_error,
    )
