# SPDX-License-Identifier: MIT
"""Declarative extraction rules.

Each rule knows how to locate one value on a parsed page and what to return
when it is missing. Rules never raise for absent markup; the page parser
additionally guards every rule so one broken field cannot abort a page.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from .coercion import clean_text, join_items, parse_leading_float, parse_price
from .document import DocumentNode


class ExtractionRule(Protocol):
    """Interface shared by all rules."""

    @property
    def default(self) -> Any:
        """Value used when the rule cannot produce one."""
        ...

    def extract(self, document: DocumentNode) -> Any:
        """Return the extracted value or :attr:`default`."""
        ...


@dataclass(frozen=True)
class MetricBoxRule:
    """Numeric statistic inside a labeled metric box.

    The first box whose text contains ``label`` wins; its emphasized value
    element is parsed as a number.
    """

    label: str
    box_selector: str = ".metric-box"
    value_selector: str = ".text-xl"
    default: Any = None

    def extract(self, document: DocumentNode) -> float | None:
        for box in document.select(self.box_selector):
            if self.label in box.text():
                value = box.select_one(self.value_selector)
                if value is None:
                    return self.default
                parsed = parse_leading_float(value.text())
                return parsed if parsed is not None else self.default
        return self.default


@dataclass(frozen=True)
class SelectorTextRule:
    """Trimmed text of the first element matching a selector."""

    selector: str
    default: Any = None

    def extract(self, document: DocumentNode) -> str | None:
        node = document.select_one(self.selector)
        if node is None:
            return self.default
        return clean_text(node.text())


@dataclass(frozen=True)
class LabeledRowRule:
    """Value cell of the row whose heading equals ``heading`` exactly.

    ``not_found`` is returned when no row carries the heading; a row without
    a value cell yields None.
    """

    heading: str
    row_selector: str
    heading_selector: str
    value_selector: str
    not_found: Any = None

    @property
    def default(self) -> Any:
        return self.not_found

    def extract(self, document: DocumentNode) -> str | None:
        for row in document.select(self.row_selector):
            heading = row.select_one(self.heading_selector)
            if heading is not None and heading.text().strip() == self.heading:
                value = row.select_one(self.value_selector)
                return clean_text(value.text()) if value is not None else None
        return self.not_found


@dataclass(frozen=True)
class PriceRule:
    """Price element parsed into a number, currency formatting removed."""

    selector: str
    default: Any = None

    def extract(self, document: DocumentNode) -> float | None:
        node = document.select_one(self.selector)
        if node is None:
            return self.default
        parsed = parse_price(node.text())
        return parsed if parsed is not None else self.default


@dataclass(frozen=True)
class JoinedListRule:
    """Texts of all matching list items joined into one string."""

    selector: str
    default: Any = ""

    def extract(self, document: DocumentNode) -> str:
        items = [node.text() for node in document.select(self.selector)]
        if not items:
            return self.default
        return join_items(items)
