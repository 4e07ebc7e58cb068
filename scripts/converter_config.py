"""
Converter settings: JSON config file plus command-line overrides.

Not meant to be called directly. The config file is optional; flags given on
the command line win over values from the file.

Example encoding_converter.json:
    {
        "concurrency": 5,
        "create_backup": true,
        "show_detailed_results": true,
        "exclude_patterns": ["*.exe", "*.min.js"],
        "auto_reopen_files": true
    }
"""

import argparse
import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from encoding_constants import DEFAULT_CONCURRENCY, DEFAULT_EXCLUDE_PATTERNS

DEFAULT_CONFIG_NAME = 'encoding_converter.json'


class ConfigError(ValueError):
    """Raised for unreadable config files or invalid setting values."""


@dataclass(frozen=True)
class ConverterConfig:
    """Settings read once per command and never changed while it runs."""
    concurrency: int = DEFAULT_CONCURRENCY
    create_backup: bool = True
    show_detailed_results: bool = True
    exclude_patterns: Tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    auto_reopen_files: bool = True

    def __post_init__(self):
        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int) or self.concurrency < 1:
            raise ConfigError(f"concurrency must be a positive integer, got {self.concurrency!r}")
        for name in ('create_backup', 'show_detailed_results', 'auto_reopen_files'):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")
        patterns = self.exclude_patterns
        if isinstance(patterns, str) or not all(isinstance(p, str) for p in patterns):
            raise ConfigError("exclude_patterns must be a list of strings")
        object.__setattr__(self, 'exclude_patterns', tuple(patterns))


def config_from_dict(data: Dict[str, Any]) -> ConverterConfig:
    """Build a config from parsed JSON, rejecting unknown keys."""
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")
    known = {f.name for f in fields(ConverterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return ConverterConfig(**data)


def load_config(path: Optional[Path]) -> ConverterConfig:
    """Load configuration from a JSON file; defaults when no path is given."""
    if not path:
        return ConverterConfig()
    try:
        with Path(path).open('r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    return config_from_dict(data)


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by every converter command."""
    parser.add_argument('--config', help=f'JSON config file (default: {DEFAULT_CONFIG_NAME} if present)')
    parser.add_argument('--no-backup', action='store_true', help='Do not create .bak files before converting')
    parser.add_argument('--exclude', action='append', metavar='PATTERN',
                        help='Extra file name pattern to skip (repeatable, * and ? wildcards)')
    parser.add_argument('--reopen-with', metavar='COMMAND',
                        help='Editor command used to reopen files after conversion or undo (e.g. "code -r")')
    parser.add_argument('--yes', '-y', action='store_true', help='Answer yes to every confirmation')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')


def resolve_config(args: argparse.Namespace) -> ConverterConfig:
    """Load the config file named on the command line and apply flag overrides."""
    if args.config:
        config_path = Path(args.config)
    else:
        default_path = Path(__file__).parent / DEFAULT_CONFIG_NAME
        config_path = default_path if default_path.exists() else None
    config = load_config(config_path)

    overrides = {}
    if getattr(args, 'no_backup', False):
        overrides['create_backup'] = False
    if getattr(args, 'concurrency', None) is not None:
        overrides['concurrency'] = args.concurrency
    if getattr(args, 'summary', False):
        overrides['show_detailed_results'] = False
    if getattr(args, 'exclude', None):
        overrides['exclude_patterns'] = tuple(config.exclude_patterns) + tuple(args.exclude)
    return replace(config, **overrides) if overrides else config
