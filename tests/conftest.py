"""Shared fixtures for Rearrange Toolkit tests.

Provides sample documents, a fake tree model implementing the collaborator
protocol, and an isolated user configuration directory.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rearrange_toolkit.config import ConfigManager
from rearrange_toolkit.core.document import TextDocument
from rearrange_toolkit.core.path_config import PathConfigStore

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


ARTICLE_XML = (
    '<?xml version="1.0"?>\n'
    '<!DOCTYPE article SYSTEM "article.dtd">\n'
    '<article>\n'
    '<sect1 id="a"><title>A</title></sect1>\n'
    '<sect1 id="b"><title>B</title></sect1>\n'
    '<para>text</para>\n'
    '<sect1 id="c"/>\n'
    '</article>\n'
)


class FakeNode:
    """Minimal node for the fake tree: a tag, attributes and a span."""

    def __init__(self, tag: str, attrib: Optional[Dict[str, str]] = None,
                 span: Tuple[int, int] = (0, 0)) -> None:
        self.tag = tag
        self.attrib = dict(attrib or {})
        self.span = span
        self.children: List["FakeNode"] = []

    def __repr__(self) -> str:
        return f"FakeNode({self.tag!r}, {self.attrib!r}, {self.span!r})"


class FakeTree:
    """Tree model over hand-built FakeNode objects."""

    def __init__(self, root: FakeNode) -> None:
        self.root = root

    def find_enclosing_node(self, pos: int) -> FakeNode:
        return self.root

    def element_type(self, node: FakeNode) -> str:
        return node.tag

    def children(self, node: FakeNode) -> List[FakeNode]:
        return list(node.children)

    def attribute(self, node: FakeNode, name: str) -> Optional[str]:
        return node.attrib.get(name)

    def text_span(self, node: FakeNode) -> Tuple[int, int]:
        return node.span


def build_fake_tree(text: str, items: List[Tuple[str, Dict[str, str], str]]) -> FakeTree:
    """Build a flat FakeTree whose children are located by their exact text."""
    root = FakeNode("root", span=(0, len(text)))
    search_from = 0
    for tag, attrib, snippet in items:
        start = text.index(snippet, search_from)
        end = start + len(snippet)
        root.children.append(FakeNode(tag, attrib, (start, end)))
        search_from = end
    return FakeTree(root)


@pytest.fixture
def make_fake_tree():
    return build_fake_tree


@pytest.fixture
def article_xml() -> str:
    return ARTICLE_XML


@pytest.fixture
def article_document() -> TextDocument:
    return TextDocument(ARTICLE_XML)


@pytest.fixture
def article_names() -> PathConfigStore:
    return PathConfigStore().set_path(["article", "sect1"], "id")


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config manager at an empty per-test directory."""
    directory = tmp_path / "config"
    monkeypatch.setenv("REARRANGE_CONFIG_DIR", str(directory))
    ConfigManager.reset()
    yield directory
    ConfigManager.reset()
