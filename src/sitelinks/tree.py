"""Minimal HTML document tree: ``Root``, ``Element`` and ``Text`` nodes.

Rendered pages are parsed into this tree with BeautifulSoup, mutated in place
by the link transformer, and serialised back with :func:`to_html`. The
property renderer builds its fragments from the same node types.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction
from markupsafe import escape

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
_RAW_TEXT_ELEMENTS = frozenset({"script", "style"})
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


@dataclass
class Text:
    value: str

    type: ClassVar[str] = "text"


@dataclass
class Element:
    tag: str
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    type: ClassVar[str] = "element"

    @property
    def classes(self) -> list[str]:
        """The ``class`` attribute as a list, stored back on first access."""
        value = self.properties.get("class")
        if value is None:
            value = []
        elif isinstance(value, str):
            value = value.split()
        else:
            value = list(value)
        self.properties["class"] = value
        return value

    def add_class(self, name: str) -> None:
        classes = self.classes
        if name not in classes:
            classes.append(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def only_text_child(self) -> Text | None:
        """The single child when it is a text node, otherwise ``None``."""
        if len(self.children) == 1 and isinstance(self.children[0], Text):
            return self.children[0]
        return None


@dataclass
class Root:
    children: list[Node] = field(default_factory=list)
    doctype: str | None = None  # e.g. "html", written back first by to_html

    type: ClassVar[str] = "root"


Node = Union[Root, Element, Text]


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order iteration over ``node`` and its descendants."""
    yield node
    if isinstance(node, (Root, Element)):
        # snapshot, callbacks may append children while we iterate
        for child in list(node.children):
            yield from walk(child)


def visit(tree: Node, callback: Callable[[Any], None], kind: str = "element") -> None:
    """Call ``callback`` on every node of the given ``type`` in document order."""
    for node in walk(tree):
        if node.type == kind:
            callback(node)


def text_content(node: Node) -> str:
    return "".join(n.value for n in walk(node) if isinstance(n, Text))


def _convert(source: Tag) -> list[Node]:
    children: list[Node] = []
    for child in source.children:
        if isinstance(child, Tag):
            children.append(Element(child.name, dict(child.attrs), _convert(child)))
        elif isinstance(child, NavigableString) and not isinstance(child, _SKIPPED_STRINGS):
            children.append(Text(str(child)))
    return children


def from_html(html: str) -> Root:
    soup = BeautifulSoup(html, "html.parser")
    doctype = next((str(child) for child in soup.children if isinstance(child, Doctype)), None)
    return Root(_convert(soup), doctype=doctype)


def _attribute(name: str, value: Any) -> str:
    if value is True:
        return f" {name}"
    if isinstance(value, (list, tuple)):
        value = " ".join(str(v) for v in value)
    return f' {name}="{escape(str(value))}"'


def _render(node: Node, raw: bool, out: list[str]) -> None:
    if isinstance(node, Text):
        out.append(node.value if raw else str(escape(node.value)))
        return
    if isinstance(node, Root):
        if node.doctype is not None:
            out.append(f"<!DOCTYPE {node.doctype}>")
        for child in node.children:
            _render(child, raw, out)
        return

    attrs = "".join(
        _attribute(name, value)
        for name, value in node.properties.items()
        if value is not None and value is not False and value != []
    )
    out.append(f"<{node.tag}{attrs}>")
    if node.tag in VOID_ELEMENTS and not node.children:
        return
    child_raw = node.tag in _RAW_TEXT_ELEMENTS
    for child in node.children:
        _render(child, child_raw, out)
    out.append(f"</{node.tag}>")


def to_html(node: Node) -> str:
    out: list[str] = []
    _render(node, False, out)
    return "".join(out)
