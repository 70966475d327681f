# SPDX-License-Identifier: MIT
"""Page parsers for the ScienceDirect journal sub-pages."""

from ..constants import SUBJECT_AREAS_NOT_FOUND
from ..logging_config import get_detail_logger
from ..models import InsightsData
from .document import DocumentNode
from .rules import (
    ExtractionRule,
    JoinedListRule,
    LabeledRowRule,
    MetricBoxRule,
    PriceRule,
    SelectorTextRule,
)


detail_logger = get_detail_logger()

AIMS_AND_SCOPE_RULE = SelectorTextRule(".js-aims-and-scope")

# Field name -> rule for the insights page
INSIGHTS_RULES: dict[str, ExtractionRule] = {
    "issn": SelectorTextRule(".col-lg-17.col-xs-24 .u-display-inline"),
    "subject_areas": LabeledRowRule(
        heading="Subject areas",
        row_selector=".row.gutters.hor-line.u-padding-l-ver",
        heading_selector="h3",
        value_selector=".col-lg-17.col-xs-24.text-s",
        not_found=SUBJECT_AREAS_NOT_FOUND,
    ),
    "cite_score": MetricBoxRule("CiteScore"),
    "apc": PriceRule(".list-price-without-waiver .text-xl"),
    "time_to_first_decision": MetricBoxRule("Time to first decision"),
    "review_time": MetricBoxRule("Review time"),
    "submission_to_acceptance": MetricBoxRule("Submission to acceptance"),
    "acceptance_to_publication": MetricBoxRule("Acceptance to publication"),
    "impact_factor": MetricBoxRule("Impact Factor"),
    "acceptance_rate": MetricBoxRule("Acceptance Rate"),
    "abstracting_indexing": JoinedListRule(".abstracts-and-indexing li"),
}


def apply_rules(
    document: DocumentNode, rules: dict[str, ExtractionRule]
) -> dict[str, object]:
    """Evaluate every rule independently against a document.

    A rule that fails unexpectedly contributes its default and is logged;
    the remaining fields are still extracted.
    """
    values: dict[str, object] = {}
    for field_name, rule in rules.items():
        try:
            values[field_name] = rule.extract(document)
        except (AttributeError, TypeError, ValueError) as e:
            detail_logger.debug(f"Extraction of '{field_name}' failed: {e}")
            values[field_name] = rule.default
    return values


def parse_insights(document: DocumentNode) -> InsightsData:
    """Extract the bibliometric fields of an insights page."""
    values = apply_rules(document, INSIGHTS_RULES)
    missing = [name for name, value in values.items() if value is None]
    if missing:
        detail_logger.debug(f"Insights fields not found: {', '.join(missing)}")
    return InsightsData(**values)  # type: ignore[arg-type]


def parse_aims_and_scope(document: DocumentNode) -> str | None:
    """Return the aims and scope text, or None when the section is absent."""
    try:
        text = AIMS_AND_SCOPE_RULE.extract(document)
    except (AttributeError, TypeError, ValueError) as e:
        detail_logger.debug(f"Extraction of aims and scope failed: {e}")
        return None
    return text
