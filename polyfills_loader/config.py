"""Configuration loading for polyfills-loader (.polyfills.yml and build manifests)."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .errors import ConfigError
from .models import (
    LegacyEntry,
    ManifestFile,
    ModernEntry,
    PolyfillRequest,
    PolyfillsConfig,
    PolyfillsLoaderConfig,
    source_from,
)

CONFIG_FILENAME = ".polyfills.yml"


def load_config(config_path: Path, *, manifest_path: Path | None = None) -> PolyfillsLoaderConfig:
    """Load configuration from disk, optionally merging a build manifest."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    cfg = config_from_mapping(data, root=root)
    if manifest_path is not None:
        cfg = with_build_manifest(cfg, load_build_manifest(manifest_path))
    return cfg


def config_from_mapping(data: Mapping[str, Any], *, root: Path) -> PolyfillsLoaderConfig:
    """Build a loader configuration from parsed YAML/JSON data.

    Relative ``node_modules`` and custom polyfill paths resolve against ``root``.
    Build manifest keys (``modern``/``legacy``) are honoured when present.
    """
    polyfills_data = _as_dict(data.get("polyfills"))
    polyfills = PolyfillsConfig(
        core_js=_as_bool(polyfills_data.get("core_js")) or False,
        regenerator_runtime=_as_regenerator_mode(polyfills_data.get("regenerator_runtime")),
        fetch=_as_bool(polyfills_data.get("fetch")) or False,
        systemjs_extended=_as_bool(polyfills_data.get("systemjs_extended")) or False,
        dynamic_import=_as_bool(polyfills_data.get("dynamic_import")) or False,
        es_module_shims=_as_bool(polyfills_data.get("es_module_shims")) or False,
        intersection_observer=_as_bool(polyfills_data.get("intersection_observer")) or False,
        webcomponents=_as_bool(polyfills_data.get("webcomponents")) or False,
        shady_css_custom_style=_as_bool(polyfills_data.get("shady_css_custom_style")) or False,
        hash=_as_bool(polyfills_data.get("hash")) is not False,
        custom=_parse_custom(polyfills_data.get("custom"), root),
    )

    node_modules_str = _as_str(data.get("node_modules"))
    node_modules = root / node_modules_str if node_modules_str else root / "node_modules"

    cfg = PolyfillsLoaderConfig(
        polyfills=polyfills,
        polyfills_dir=_as_str(data.get("polyfills_dir")),
        node_modules=node_modules,
    )
    if "modern" in data or "legacy" in data:
        cfg = with_build_manifest(cfg, data)
    return cfg


def load_build_manifest(path: Path) -> Dict[str, Any]:
    """Read a build manifest JSON file describing the modern and legacy outputs."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read build manifest {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain an object at the root")
    return data


def with_build_manifest(
    cfg: PolyfillsLoaderConfig, manifest: Mapping[str, Any]
) -> PolyfillsLoaderConfig:
    """Return ``cfg`` with ``modern``/``legacy``/``polyfills_dir`` taken from ``manifest``."""
    modern_data = _as_dict(manifest.get("modern"))
    modern = ModernEntry(files=_parse_files(modern_data.get("files")))

    legacy: Optional[Tuple[LegacyEntry, ...]] = None
    legacy_data = manifest.get("legacy")
    if isinstance(legacy_data, list):
        legacy = _parse_legacy(legacy_data)

    polyfills_dir = _as_str(manifest.get("polyfills_dir")) or cfg.polyfills_dir
    return replace(cfg, modern=modern, legacy=legacy, polyfills_dir=polyfills_dir)


def _parse_legacy(entries: List[Any]) -> Tuple[LegacyEntry, ...]:
    legacy: List[LegacyEntry] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"Legacy entry #{index + 1} must be a mapping")
        test = _as_str(entry.get("test"))
        if not test or not test.strip():
            raise ConfigError(f"Legacy entry #{index + 1} has no feature test")
        legacy.append(LegacyEntry(test=test, files=_parse_files(entry.get("files"))))
    return tuple(legacy)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_custom(value: Any, root: Path) -> Tuple[PolyfillRequest, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError("polyfills.custom must be a list of polyfill entries")
    requests: List[PolyfillRequest] = []
    for entry in value:
        if not isinstance(entry, dict):
            raise ConfigError("Each custom polyfill must be a mapping")
        name = _as_str(entry.get("name"))
        requests.append(
            PolyfillRequest(
                name=name,
                source=source_from(_rooted_paths(entry.get("path"), root, name)),
                test=_as_str(entry.get("test")),
                initializer=_as_str(entry.get("initializer")),
                file_type=_as_str(entry.get("file_type")),
                minify=_as_bool(entry.get("minify")) or False,
            )
        )
    return tuple(requests)


def _rooted_paths(value: Any, root: Path, name: Optional[str]) -> Union[str, List[str], None]:
    if isinstance(value, str):
        return str(root / value) if value else None
    if isinstance(value, list):
        invalid = [item for item in value if not isinstance(item, str) or not item]
        if invalid:
            raise ConfigError(
                f"Polyfill {name or '(unnamed)'} has invalid path entries: {invalid!r}"
            )
        return [str(root / item) for item in value]
    return None


def _parse_files(value: Any) -> Tuple[ManifestFile, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return ()
    files: List[ManifestFile] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        file_type = _as_str(item.get("type"))
        if not file_type:
            continue
        files.append(ManifestFile(type=file_type, path=_as_str(item.get("path"))))
    return tuple(files)


def _as_regenerator_mode(value: Any) -> Union[bool, str]:
    if isinstance(value, str) and value.strip().lower() == "always":
        return "always"
    return _as_bool(value) or False


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "config_from_mapping",
    "load_build_manifest",
    "load_config",
    "with_build_manifest",
]
