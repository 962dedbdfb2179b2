"""Load BlinkConfig from blink.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from blink._errors import ConfigError
from blink.config import BlinkConfig

_KNOWN_KEYS = frozenset({
    "host", "port", "debounce_ms", "reload_queue_size",
    "mailbox_size", "watch", "ignore_dirs",
})


def load_config(root: Path, **overrides: object) -> BlinkConfig:
    """Load BlinkConfig from root, optionally merging blink.yaml.

    Looks for blink.yaml, blink.yml, or blink.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If a config file exists but cannot be parsed.

    """
    root = Path(root)
    file_config = _read_blink_config(root)
    merged = {**file_config, **overrides}
    if "ignore_dirs" in merged:
        merged["ignore_dirs"] = frozenset(merged["ignore_dirs"])  # type: ignore[arg-type]
    return BlinkConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_blink_config(root: Path) -> dict[str, object]:
    """Read blink config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("blink.yaml", "blink.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "blink.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Cannot read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_blink_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_blink_section(data, path)


def _flatten_blink_section(data: object, path: Path) -> dict[str, object]:
    """Extract blink.* and known top-level keys into a flat config dict."""
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)

    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _KNOWN_KEYS:
            result[k] = v
    section = data.get("blink")
    if isinstance(section, dict):
        for k, v in section.items():
            if k not in _KNOWN_KEYS:
                msg = f"Unknown setting blink.{k} in {path.name}"
                raise ConfigError(msg)
            result[k] = v
    return result
