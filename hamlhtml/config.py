from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Set

import yaml

from .compiler import TranspileOptions
from .errors import HamlConfigError


@dataclass
class HamlConfig:
    options: TranspileOptions = field(default_factory=TranspileOptions)
    watch_paths: Set[Path] = field(default_factory=set)
    write_pairs: Dict[Path, Path] = field(default_factory=dict)


def parse_options(raw: Optional[Dict[str, Any]]) -> TranspileOptions:
    """Builds TranspileOptions from the 'options' mapping of a config file."""
    if raw is None:
        return TranspileOptions()
    if not isinstance(raw, dict):
        raise HamlConfigError("'options' must be a mapping.")
    unknown = set(raw) - {'format', 'self_closing', 'indent'}
    if unknown:
        raise HamlConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}.")
    fmt = raw.get('format', True)
    if not isinstance(fmt, bool):
        raise HamlConfigError(f"'format' must be true or false, got {fmt!r}.")
    return TranspileOptions(
        format_output=fmt,
        self_closing_mode=raw.get('self_closing', 'xhtml'),
        indent_unit=raw.get('indent', 2),
    )


def load_config(config_path, base_path: Path = Path('.')) -> HamlConfig:
    """Reads a YAML config file. Globs and write pairs resolve against base_path."""
    try:
        with open(config_path, "r") as f:
            cfg = yaml.safe_load(f)
    except OSError as e:
        raise HamlConfigError(f"Cannot read config '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise HamlConfigError(f"Invalid YAML in '{config_path}': {e}") from e

    if not isinstance(cfg, dict):
        raise HamlConfigError(f"Config '{config_path}' must contain a mapping.")
    if not cfg.get('write'):
        raise HamlConfigError(f"Config '{config_path}' has no 'write' entries.")

    try:
        watch_paths = {watch_path for watch_path_str in cfg.get('watch') or [] for watch_path in base_path.glob(watch_path_str)}
        write_pairs = {base_path / to_write['src']: base_path / to_write['dst'] for to_write in cfg['write']}
    except (KeyError, TypeError, ValueError) as e:
        raise HamlConfigError(f"Malformed 'watch'/'write' section in '{config_path}': {e}") from e

    return HamlConfig(
        options=parse_options(cfg.get('options')),
        watch_paths=watch_paths,
        write_pairs=write_pairs,
    )
