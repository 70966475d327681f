# SPDX-License-Identifier: MIT
"""Parsed-document abstraction used by the extraction rules.

Rules only depend on the :class:`DocumentNode` protocol, so the markup
library behind it can be swapped without touching them. The package ships a
BeautifulSoup implementation.
"""

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup
from bs4.element import Tag


@runtime_checkable
class DocumentNode(Protocol):
    """A node of a parsed markup tree that supports CSS selection."""

    def select(self, selector: str) -> list["DocumentNode"]:
        """Return all descendants matching a CSS selector, in document order."""
        ...

    def select_one(self, selector: str) -> "DocumentNode | None":
        """Return the first descendant matching a CSS selector, or None."""
        ...

    def text(self) -> str:
        """Return the concatenated text content of the node."""
        ...


class SoupNode:
    """:class:`DocumentNode` backed by a BeautifulSoup tag."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag | BeautifulSoup):
        self._tag = tag

    def select(self, selector: str) -> list[DocumentNode]:
        return [SoupNode(tag) for tag in self._tag.select(selector)]

    def select_one(self, selector: str) -> DocumentNode | None:
        tag = self._tag.select_one(selector)
        return SoupNode(tag) if tag is not None else None

    def text(self) -> str:
        return str(self._tag.get_text())

    def __repr__(self) -> str:
        return f"SoupNode({self._tag.name!r})"


def parse_html(html: str | None) -> DocumentNode:
    """Parse markup into a document tree.

    Empty or missing markup yields an empty document on which every rule
    falls back to its default.
    """
    return SoupNode(BeautifulSoup(html or "", "html.parser"))
