# SPDX-License-Identifier: MIT
"""Markup parsing and field extraction for journal sub-pages."""

from .document import DocumentNode, SoupNode, parse_html
from .pages import INSIGHTS_RULES, parse_aims_and_scope, parse_insights
from .rules import (
    ExtractionRule,
    JoinedListRule,
    LabeledRowRule,
    MetricBoxRule,
    PriceRule,
    SelectorTextRule,
)


__all__ = [
    "DocumentNode",
    "ExtractionRule",
    "INSIGHTS_RULES",
    "JoinedListRule",
    "LabeledRowRule",
    "MetricBoxRule",
    "PriceRule",
    "SelectorTextRule",
    "SoupNode",
    "parse_aims_and_scope",
    "parse_html",
    "parse_insights",
]
