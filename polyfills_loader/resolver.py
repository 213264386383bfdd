"""Resolve configured polyfills into hashed, loader-ready files."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Optional, Sequence, Set

from .errors import PolyfillConfigError, PolyfillFileError
from .logging import get_logger
from .minify import minify_or_raise
from .models import PolyfillFile, PolyfillRequest, PolyfillsData, PolyfillsLoaderConfig
from .packages import PackageLocator
from .rules import derive_requests
from .utils import FileType, create_content_hash

CORE_JS_NAME = "core-js"
DEFAULT_POLYFILLS_DIR = "polyfills"

_logger = get_logger("resolver")


def resolve_polyfills(
    cfg: PolyfillsLoaderConfig, *, locator: PackageLocator | None = None
) -> PolyfillsData:
    """Build the polyfill files for ``cfg``.

    Every request is validated before any file is read, so an invalid request
    aborts resolution without touching the filesystem. Files are returned in
    request order, with ``core-js`` split out into ``PolyfillsData.core_js``.
    """
    requests = derive_requests(cfg, locator)
    validate_requests(requests)

    files = [
        (request.name, build_polyfill_file(request, cfg))
        for request in requests
    ]

    core_js = next((f for name, f in files if name == CORE_JS_NAME), None)
    polyfill_files = tuple(f for name, f in files if name != CORE_JS_NAME)
    _logger.info(
        "Resolved %d polyfill(s)%s",
        len(polyfill_files),
        " plus core-js" if core_js is not None else "",
    )
    return PolyfillsData(core_js=core_js, polyfill_files=polyfill_files)


def validate_requests(requests: Sequence[PolyfillRequest]) -> None:
    """Validate every request and reject polyfill names that occur more than once."""
    seen: Set[str] = set()
    for index, request in enumerate(requests):
        validate_request(request, index=index)
        name = str(request.name)
        if name in seen:
            raise PolyfillConfigError(
                f"Polyfill {name} is configured more than once. Polyfill names must be unique."
            )
        seen.add(name)


def validate_request(request: PolyfillRequest, *, index: int = 0) -> None:
    """Raise :class:`PolyfillConfigError` when a request lacks a name or source."""
    if not request.name:
        raise PolyfillConfigError(
            f"Polyfill #{index + 1} has no name. A polyfill should have a name and a path property."
        )
    if request.source is None:
        if request.package:
            raise PolyfillConfigError(
                f"configured to polyfill {request.name}, but no polyfills found. "
                f'Install with "npm i -D {request.package}"'
            )
        raise PolyfillConfigError(
            f"Polyfill {request.name} has no path. A polyfill should have a name and a path property."
        )


def build_polyfill_file(request: PolyfillRequest, cfg: PolyfillsLoaderConfig) -> PolyfillFile:
    """Read, optionally minify and hash one request into a :class:`PolyfillFile`."""
    validate_request(request)
    name = str(request.name)
    content = read_sources(request.source.paths())  # type: ignore[union-attr]
    if request.minify:
        content = minify_or_raise(content, name=name)

    file_hash = create_content_hash(content) if cfg.polyfills.hash else None
    path = polyfill_path(name, file_hash, polyfills_dir=cfg.polyfills_dir)
    _logger.debug("Polyfill %s -> %s (%d bytes)", name, path, len(content))
    return PolyfillFile(
        type=request.file_type or FileType.SCRIPT,
        path=path,
        content=content,
        test=request.test,
        initializer=request.initializer,
    )


def polyfill_path(
    name: str, file_hash: Optional[str], *, polyfills_dir: Optional[str] = None
) -> str:
    """Return the web path ``<dir>/<name>[.<hash>].js``, always with forward slashes."""
    stem = f"{name}.{file_hash}" if file_hash else name
    return f"{posixpath.join(polyfills_dir or DEFAULT_POLYFILLS_DIR, stem)}.js"


def read_sources(paths: Sequence[str]) -> str:
    """Concatenate the contents of ``paths`` in order, without separators."""
    return "".join(read_polyfill_file(path) for path in paths)


def read_polyfill_file(file_path: str) -> str:
    code_path = Path(file_path).resolve()
    if not code_path.exists() or not code_path.is_file():
        raise PolyfillFileError(f"Could not find a file at {file_path}")
    try:
        return code_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PolyfillFileError(f"Could not read {file_path}: {exc}") from exc


__all__ = [
    "CORE_JS_NAME",
    "build_polyfill_file",
    "polyfill_path",
    "read_polyfill_file",
    "read_sources",
    "resolve_polyfills",
    "validate_request",
    "validate_requests",
]
