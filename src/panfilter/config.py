#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading.

Codec options can come from, in increasing priority:

1. defaults (``CodecOptions()``)
2. a configuration file: ``.panfilter.toml``, ``.panfilter.yaml``,
   ``.panfilter.yml``, ``.panfilter.json`` or the ``[tool.panfilter]``
   table of ``pyproject.toml``, found by searching from the working
   directory up to the filesystem root
3. ``PANFILTER_*`` environment variables
4. explicit overrides (command-line arguments)

Keys may be written with underscores or dashes (``citation_mode_key`` or
``citation-mode-key``).
"""

import json
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Mapping, Optional

import yaml

from panfilter.constants import CONFIG_FILENAMES, ENV_PREFIX
from panfilter.exceptions import ValidationError
from panfilter.options import CodecOptions

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.panfilter] table from a pyproject.toml file.

    Returns an empty dict when the table is absent.
    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in {pyproject_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ValidationError(f"Error reading {pyproject_path}: {e}", original_error=e) from e

    section = data.get("tool", {}).get("panfilter")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValidationError(f"[tool.panfilter] in {pyproject_path} must be a table, got {type(section).__name__}")
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory is checked for the names in ``CONFIG_FILENAMES`` in
    order; ``pyproject.toml`` only counts when it has a ``[tool.panfilter]``
    table. Unreadable pyproject files are skipped.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if not config_path.is_file():
                continue
            if filename != "pyproject.toml":
                return config_path
            try:
                if _load_pyproject_section(config_path):
                    return config_path
            except ValidationError as e:
                logger.debug("Skipping unreadable %s: %s", config_path, e)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ValidationError
        If the file cannot be read, parsed, or does not hold a mapping

    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise ValidationError(f"Configuration file does not exist: {config_path}", parameter_name="config")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        return _load_pyproject_section(config_path)

    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ValidationError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValidationError(f"Invalid config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ValidationError(f"Error reading config file {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ValidationError(f"Config file {config_path} must contain a mapping, got {type(config).__name__}")
    logger.debug("Loaded configuration from %s", config_path)
    return config


def _option_names() -> list[str]:
    return [f.name for f in fields(CodecOptions)]


def normalize_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Map config keys onto CodecOptions field names, dropping unknown keys."""
    known = _option_names()
    normalized: Dict[str, Any] = {}
    for key, value in config.items():
        name = key.replace("-", "_")
        if name in known:
            normalized[name] = value
        else:
            logger.warning("Ignoring unknown configuration key %r", key)
    return normalized


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"{name} must be a boolean (true/false), got {raw!r}", parameter_name=name, parameter_value=raw)


def _parse_indent(name: str, raw: str) -> Optional[int]:
    if raw.strip().lower() in ("", "none"):
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(
            f"{name} must be an integer or 'none', got {raw!r}", parameter_name=name, parameter_value=raw, original_error=e
        ) from e


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read ``PANFILTER_*`` option overrides from the environment.

    Parameters
    ----------
    environ : mapping, optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    dict
        Option values keyed by CodecOptions field name

    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    key = f"{ENV_PREFIX}CITATION_MODE_KEY"
    if key in environ:
        overrides["citation_mode_key"] = environ[key]
    key = f"{ENV_PREFIX}INDENT"
    if key in environ:
        overrides["indent"] = _parse_indent(key, environ[key])
    key = f"{ENV_PREFIX}ENSURE_ASCII"
    if key in environ:
        overrides["ensure_ascii"] = _parse_bool(key, environ[key])
    return overrides


def load_codec_options(
    config_path: Path | str | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    discover: bool = True,
) -> CodecOptions:
    """Build CodecOptions from config file, environment and overrides.

    Parameters
    ----------
    config_path : Path, str or None, default = None
        Explicit configuration file. When None and ``discover`` is true, the
        working directory and its parents are searched.
    overrides : mapping, optional
        Highest-priority values; None values are ignored
    environ : mapping, optional
        Environment to read, defaults to ``os.environ``
    discover : bool, default = True
        Whether to search for a configuration file when none is given

    Returns
    -------
    CodecOptions
        The merged options

    Raises
    ------
    ValidationError
        If a source cannot be read or a merged value is invalid

    """
    values: Dict[str, Any] = {}

    if config_path is None and discover:
        config_path = find_config_in_parents()
    if config_path is not None:
        values.update(normalize_config(load_config_file(config_path)))

    values.update(env_overrides(environ))
    if overrides:
        values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return CodecOptions(**values)
    except TypeError as e:
        raise ValidationError(f"Invalid codec options: {e}", original_error=e) from e
