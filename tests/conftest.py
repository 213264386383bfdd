from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.node_modules_builder import NodeModulesBuilder


@pytest.fixture
def node_modules(tmp_path: Path) -> NodeModulesBuilder:
    """Provide a project with every built-in polyfill package installed."""
    builder = NodeModulesBuilder(tmp_path)
    builder.install()
    return builder


@pytest.fixture
def empty_node_modules(tmp_path: Path) -> NodeModulesBuilder:
    """Provide a project with an empty node_modules directory."""
    return NodeModulesBuilder(tmp_path)
