"""Helper utilities for constructing temporary node_modules trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping

BUILTIN_MODULES = (
    "core-js-bundle/minified.js",
    "regenerator-runtime/runtime.js",
    "whatwg-fetch/dist/fetch.umd.js",
    "systemjs/dist/system.min.js",
    "systemjs/dist/s.min.js",
    "dynamic-import-polyfill/dist/dynamic-import-polyfill.umd.js",
    "es-module-shims/dist/es-module-shims.min.js",
    "intersection-observer/intersection-observer.js",
    "@webcomponents/webcomponentsjs/webcomponents-bundle.js",
    "@webcomponents/webcomponentsjs/custom-elements-es5-adapter.js",
    "@webcomponents/shadycss/custom-style-interface.min.js",
    "shady-css-scoped-element/shady-css-scoped-element.min.js",
)


def module_stub(module: str) -> str:
    """Return the placeholder source written for ``module``."""
    return f"/* {module} */\n"


class NodeModulesBuilder:
    """Utility for writing polyfill packages into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.node_modules = self.root / "node_modules"
        self.node_modules.mkdir(parents=True)

    def install(self, modules: Iterable[str] = BUILTIN_MODULES) -> None:
        """Write a placeholder source file for each module specifier."""
        self.write({module: module_stub(module) for module in modules})

    def write(self, files: Mapping[str, str]) -> None:
        """Write `specifier -> contents` entries below node_modules."""
        for relative, content in files.items():
            path = self.node_modules / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    def write_project(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries relative to the project root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")


__all__ = ["BUILTIN_MODULES", "NodeModulesBuilder", "module_stub"]
