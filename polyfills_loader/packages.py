"""Locate built-in polyfill sources inside an installed ``node_modules`` tree."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


def package_name(specifier: str) -> str:
    """Return the npm package a module specifier belongs to.

    ``@webcomponents/shadycss/custom-style-interface.min.js`` belongs to
    ``@webcomponents/shadycss``; ``whatwg-fetch/dist/fetch.umd.js`` to
    ``whatwg-fetch``.
    """
    parts = specifier.strip("/").split("/")
    if parts[0].startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


class PackageLocator:
    """Resolves module specifiers to files below a ``node_modules`` root."""

    def __init__(self, node_modules: Path) -> None:
        self.root = node_modules

    def locate(self, specifier: str) -> Optional[str]:
        """Return the file a specifier points at, or None when it is not installed."""
        candidate = self.root / specifier
        if candidate.is_file():
            return str(candidate)
        with_suffix = candidate.with_name(candidate.name + ".js")
        if with_suffix.is_file():
            return str(with_suffix)
        return None


__all__ = ["PackageLocator", "package_name"]
