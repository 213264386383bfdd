"""Ordered rules deriving polyfill requests from the loader configuration.

Each rule pairs a predicate over the configuration with a builder producing
zero or more requests. Rules are evaluated once, in declaration order, and
their requests are appended after any custom polyfills. Order is load order:
the loader injects polyfills in the sequence produced here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from .models import PolyfillRequest, PolyfillsLoaderConfig, SingleSource, SourceList
from .packages import PackageLocator, package_name
from .utils import NO_MODULE_SUPPORT_TEST, FileType, has_file_of_type

FETCH_TEST = "!('fetch' in window)"

# Dynamic import is syntax, so it can only be detected by compiling a function
# that uses it. Any failure, including CSP blocking Function(), counts as
# unsupported and loads the polyfill.
DYNAMIC_IMPORT_TEST = (
    "'noModule' in HTMLScriptElement.prototype && "
    "(function () { try { Function('window.importShim = s => import(s);').call(); "
    "return true; } catch (_) { return false } })()"
)
DYNAMIC_IMPORT_INITIALIZER = (
    "window.dynamicImportPolyfill.initialize({ importFunctionName: 'importShim' });"
)

ES_MODULE_SHIMS_TEST = "'noModule' in HTMLScriptElement.prototype"

INTERSECTION_OBSERVER_TEST = (
    "!('IntersectionObserver' in window && 'IntersectionObserverEntry' in window && "
    "'intersectionRatio' in window.IntersectionObserverEntry.prototype)"
)

WEBCOMPONENTS_TEST = (
    "!('attachShadow' in Element.prototype) || !('getRootNode' in Element.prototype)"
)

# Safari 10.1 supports custom elements but not nomodule and needs the ES5 adapter.
CUSTOM_ELEMENTS_ES5_ADAPTER_TEST = (
    "!('noModule' in HTMLScriptElement.prototype) && 'getRootNode' in Element.prototype"
)

# The custom-style interface relies on globals from the webcomponents bundle,
# so the three files are concatenated in exactly this order.
SHADY_CSS_CUSTOM_STYLE_MODULES = (
    "@webcomponents/webcomponentsjs/webcomponents-bundle.js",
    "@webcomponents/shadycss/custom-style-interface.min.js",
    "shady-css-scoped-element/shady-css-scoped-element.min.js",
)

RequestBuilder = Callable[[PolyfillsLoaderConfig, PackageLocator], Tuple[PolyfillRequest, ...]]


@dataclass(frozen=True)
class PolyfillRule:
    """A named predicate/builder pair in the rule table."""

    name: str
    applies: Callable[[PolyfillsLoaderConfig], bool]
    build: RequestBuilder


def _builtin(
    locator: PackageLocator,
    name: str,
    module: str,
    *,
    test: Optional[str] = None,
    initializer: Optional[str] = None,
    file_type: Optional[str] = None,
    minify: bool = False,
) -> PolyfillRequest:
    located = locator.locate(module)
    return PolyfillRequest(
        name=name,
        source=SingleSource(located) if located else None,
        test=test,
        initializer=initializer,
        file_type=file_type,
        minify=minify,
        package=package_name(module),
    )


def _builtin_concat(
    locator: PackageLocator,
    name: str,
    modules: Sequence[str],
    *,
    test: Optional[str] = None,
) -> PolyfillRequest:
    located = [locator.locate(module) for module in modules]
    missing = [module for module, path in zip(modules, located) if path is None]
    if missing:
        return PolyfillRequest(name=name, source=None, test=test, package=package_name(missing[0]))
    return PolyfillRequest(
        name=name,
        source=SourceList(tuple(path for path in located if path is not None)),
        test=test,
        package=package_name(modules[0]),
    )


def has_custom_polyfill(cfg: PolyfillsLoaderConfig, name: str) -> bool:
    return any(request.name == name for request in cfg.polyfills.custom)


def _needs_systemjs(cfg: PolyfillsLoaderConfig) -> bool:
    if has_custom_polyfill(cfg, "systemjs"):
        return False
    return has_file_of_type(cfg, FileType.SYSTEMJS)


def systemjs_test(cfg: PolyfillsLoaderConfig) -> Optional[str]:
    """Return the systemjs feature test, or None when it must always load."""
    always_load = any(f.type == FileType.SYSTEMJS for f in cfg.modern.files)
    if always_load or not cfg.legacy:
        return None
    return " || ".join(entry.test for entry in cfg.legacy)


def _core_js(cfg: PolyfillsLoaderConfig, locator: PackageLocator) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin(locator, "core-js", "core-js-bundle/minified.js", test=NO_MODULE_SUPPORT_TEST),
    )


def _regenerator_runtime(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    always = cfg.polyfills.regenerator_runtime == "always"
    return (
        _builtin(
            locator,
            "regenerator-runtime",
            "regenerator-runtime/runtime",
            test=None if always else NO_MODULE_SUPPORT_TEST,
        ),
    )


def _fetch(cfg: PolyfillsLoaderConfig, locator: PackageLocator) -> Tuple[PolyfillRequest, ...]:
    return (_builtin(locator, "fetch", "whatwg-fetch/dist/fetch.umd.js", test=FETCH_TEST),)


def _systemjs(cfg: PolyfillsLoaderConfig, locator: PackageLocator) -> Tuple[PolyfillRequest, ...]:
    # The extended build includes the import maps polyfill.
    module = (
        "systemjs/dist/system.min.js"
        if cfg.polyfills.systemjs_extended
        else "systemjs/dist/s.min.js"
    )
    return (_builtin(locator, "systemjs", module, test=systemjs_test(cfg)),)


def _dynamic_import(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin(
            locator,
            "dynamic-import",
            "dynamic-import-polyfill/dist/dynamic-import-polyfill.umd.js",
            test=DYNAMIC_IMPORT_TEST,
            initializer=DYNAMIC_IMPORT_INITIALIZER,
        ),
    )


def _es_module_shims(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin(
            locator,
            "es-module-shims",
            "es-module-shims/dist/es-module-shims.min.js",
            test=ES_MODULE_SHIMS_TEST,
            file_type=FileType.MODULE,
        ),
    )


def _intersection_observer(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin(
            locator,
            "intersection-observer",
            "intersection-observer/intersection-observer.js",
            test=INTERSECTION_OBSERVER_TEST,
            minify=True,
        ),
    )


def _webcomponents(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin(
            locator,
            "webcomponents",
            "@webcomponents/webcomponentsjs/webcomponents-bundle.js",
            test=WEBCOMPONENTS_TEST,
        ),
        _builtin(
            locator,
            "custom-elements-es5-adapter",
            "@webcomponents/webcomponentsjs/custom-elements-es5-adapter.js",
            test=CUSTOM_ELEMENTS_ES5_ADAPTER_TEST,
        ),
    )


def _webcomponents_shady_css(
    cfg: PolyfillsLoaderConfig, locator: PackageLocator
) -> Tuple[PolyfillRequest, ...]:
    return (
        _builtin_concat(
            locator,
            "webcomponents-shady-css-custom-style",
            SHADY_CSS_CUSTOM_STYLE_MODULES,
            test=WEBCOMPONENTS_TEST,
        ),
    )


POLYFILL_RULES: Tuple[PolyfillRule, ...] = (
    PolyfillRule("core-js", lambda cfg: bool(cfg.polyfills.core_js), _core_js),
    PolyfillRule(
        "regenerator-runtime",
        lambda cfg: bool(cfg.polyfills.regenerator_runtime),
        _regenerator_runtime,
    ),
    PolyfillRule("fetch", lambda cfg: bool(cfg.polyfills.fetch), _fetch),
    PolyfillRule("systemjs", _needs_systemjs, _systemjs),
    PolyfillRule("dynamic-import", lambda cfg: bool(cfg.polyfills.dynamic_import), _dynamic_import),
    PolyfillRule(
        "es-module-shims", lambda cfg: bool(cfg.polyfills.es_module_shims), _es_module_shims
    ),
    PolyfillRule(
        "intersection-observer",
        lambda cfg: bool(cfg.polyfills.intersection_observer),
        _intersection_observer,
    ),
    PolyfillRule(
        "webcomponents",
        lambda cfg: cfg.polyfills.webcomponents and not cfg.polyfills.shady_css_custom_style,
        _webcomponents,
    ),
    PolyfillRule(
        "webcomponents-shady-css-custom-style",
        lambda cfg: cfg.polyfills.webcomponents and cfg.polyfills.shady_css_custom_style,
        _webcomponents_shady_css,
    ),
)


def derive_requests(
    cfg: PolyfillsLoaderConfig,
    locator: PackageLocator | None = None,
    rules: Sequence[PolyfillRule] = POLYFILL_RULES,
) -> Tuple[PolyfillRequest, ...]:
    """Return custom requests followed by the built-in ones enabled in ``cfg``."""
    locator = locator or PackageLocator(cfg.node_modules)
    builtins = tuple(
        request
        for rule in rules
        if rule.applies(cfg)
        for request in rule.build(cfg, locator)
    )
    return tuple(cfg.polyfills.custom) + builtins


__all__ = [
    "POLYFILL_RULES",
    "PolyfillRule",
    "derive_requests",
    "has_custom_polyfill",
    "systemjs_test",
]
