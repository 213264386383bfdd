"""Shared helpers: file-type tags, feature tests and content hashing."""

from __future__ import annotations

import hashlib

from .models import PolyfillsLoaderConfig


class FileType:
    """Output kinds understood by the loader script."""

    SCRIPT = "script"
    MODULE = "module"
    SYSTEMJS = "systemjs"
    ES_MODULE_SHIMS = "es-module-shims"


NO_MODULE_SUPPORT_TEST = "!('noModule' in HTMLScriptElement.prototype)"


def create_content_hash(content: str) -> str:
    """Return a hex fingerprint of ``content`` for cache-busting file names."""
    return hashlib.md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()


def has_file_of_type(cfg: PolyfillsLoaderConfig, file_type: str) -> bool:
    """Return True when any modern or legacy artifact has ``file_type``."""
    if any(f.type == file_type for f in cfg.modern.files):
        return True
    if cfg.legacy:
        return any(f.type == file_type for entry in cfg.legacy for f in entry.files)
    return False


__all__ = [
    "FileType",
    "NO_MODULE_SUPPORT_TEST",
    "create_content_hash",
    "has_file_of_type",
]
