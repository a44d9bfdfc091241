"""Configuration loading pipeline.

Sources are merged in increasing precedence: built-in defaults, the user
config directory, ``gelfsend.{toml,yaml,yml}`` in the working directory,
``[tool.gelfsend]`` in ``pyproject.toml``, ``GELFSEND__*`` environment
variables and finally explicit overrides.
"""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Mapping, cast

from platformdirs import user_config_dir

from .schema import GelfsendConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

__all__ = ["load_configuration"]

_APP_NAME = "gelfsend"
_ENV_PREFIX = "GELFSEND__"
_CONFIG_FILENAMES = ("gelfsend.toml", "gelfsend.yaml", "gelfsend.yml")
# Keys below these paths are user data, so their case is kept.
_CASE_PRESERVING_PATHS = {("target", "additional_fields")}


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if yaml is None or not path.exists():
        return {}
    loader = getattr(yaml, "safe_load", None)
    if not callable(loader):
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = cast(Callable[[Any], Any], loader)(fh)
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return {}


def _load_file(path: Path) -> Dict[str, Any]:
    if path.suffix == ".toml":
        return _load_toml(path)
    return _load_yaml(path)


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        existing = base.get(key)
        if isinstance(value, Mapping):
            nested = dict(existing) if isinstance(existing, Mapping) else {}
            base[key] = _merge(nested, value)
        else:
            base[key] = value
    return base


def _load_directory(directory: Path) -> Dict[str, Any]:
    if not directory.is_dir():
        return {}
    data: Dict[str, Any] = {}
    for filename in _CONFIG_FILENAMES:
        payload = _load_file(directory / filename)
        if payload:
            _merge(data, payload)
    return data


def _load_user_config() -> Dict[str, Any]:
    return _load_directory(Path(user_config_dir(_APP_NAME)))


def _load_pyproject(path: Path) -> Dict[str, Any]:
    data = _load_toml(path)
    tool = data.get("tool", {})
    if not isinstance(tool, Mapping):
        return {}
    section = tool.get(_APP_NAME, {})
    if isinstance(section, Mapping):
        return {str(key): value for key, value in section.items()}
    return {}


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        pass
    if stripped.startswith("[") or stripped.startswith("{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    for env_key, raw_value in env.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        segments = [segment for segment in env_key[len(_ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        target: Dict[str, Any] = data
        path: tuple[str, ...] = ()
        for segment in segments[:-1]:
            key = segment if path in _CASE_PRESERVING_PATHS else segment.lower()
            path = path + (key,)
            target = cast(Dict[str, Any], target.setdefault(key, {}))
        leaf = segments[-1] if path in _CASE_PRESERVING_PATHS else segments[-1].lower()
        target[leaf] = _coerce_value(raw_value)
    return data


def load_configuration(overrides: Mapping[str, Any] | None = None) -> GelfsendConfig:
    """Load configuration from supported sources in precedence order."""

    cwd = Path.cwd()
    merged: Dict[str, Any] = default_config()
    for source in (
        _load_user_config(),
        _load_directory(cwd),
        _load_pyproject(cwd / "pyproject.toml"),
        _env_config(),
        overrides or {},
    ):
        if source:
            _merge(merged, source)
    return build_config(merged)
