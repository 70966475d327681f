# SPDX-License-Identifier: MIT
"""Tests for markup parsing and field extraction."""

import pytest

from journal_harvester.extraction import (
    INSIGHTS_RULES,
    DocumentNode,
    JoinedListRule,
    LabeledRowRule,
    MetricBoxRule,
    PriceRule,
    SelectorTextRule,
    parse_aims_and_scope,
    parse_html,
    parse_insights,
)
from journal_harvester.extraction.coercion import (
    clean_text,
    join_items,
    parse_leading_float,
    parse_price,
)
from journal_harvester.extraction.pages import apply_rules


class TestCoercion:
    """Test cases for value coercion helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("3.2", 3.2),
            ("  12 days", 12.0),
            ("38%", 38.0),
            ("-1.5e2x", -150.0),
            (".5", 0.5),
            ("N/A", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_leading_float(self, text, expected):
        assert parse_leading_float(text) == expected

    def test_parse_price_strips_currency_and_separator(self):
        assert parse_price("$1,234.50") == 1234.5

    def test_parse_price_large_amount(self):
        assert parse_price("$12,345,678") == 12345678.0

    def test_parse_price_unparseable(self):
        assert parse_price("N/A") is None

    def test_clean_text(self):
        assert clean_text("  Lancet \n") == "Lancet"
        assert clean_text(None) is None

    def test_join_items(self):
        assert join_items([" Scopus ", "", "PubMed"]) == "Scopus, PubMed"


class TestDocument:
    """Test cases for the parsed document wrapper."""

    def test_parse_html_satisfies_protocol(self):
        document = parse_html("<p class='a'>hi</p>")
        assert isinstance(document, DocumentNode)
        node = document.select_one(".a")
        assert node is not None
        assert node.text() == "hi"

    def test_empty_markup_gives_empty_document(self):
        document = parse_html("")
        assert document.select(".metric-box") == []
        assert document.select_one("h3") is None

    def test_none_markup(self):
        assert parse_html(None).text() == ""


class TestRules:
    """Test cases for individual extraction rules."""

    def test_metric_box_found(self):
        document = parse_html(
            '<div class="metric-box">CiteScore <b class="text-xl">7.1</b></div>'
        )
        assert MetricBoxRule("CiteScore").extract(document) == 7.1

    def test_metric_box_absent_label_returns_none(self):
        document = parse_html(
            '<div class="metric-box">CiteScore <b class="text-xl">7.1</b></div>'
        )
        assert MetricBoxRule("Impact Factor").extract(document) is None

    def test_metric_box_without_value_element(self):
        document = parse_html('<div class="metric-box">CiteScore</div>')
        assert MetricBoxRule("CiteScore").extract(document) is None

    def test_metric_box_unparseable_value(self):
        document = parse_html(
            '<div class="metric-box">Review time <b class="text-xl">N/A</b></div>'
        )
        assert MetricBoxRule("Review time").extract(document) is None

    def test_metric_box_first_match_wins(self):
        document = parse_html(
            '<div class="metric-box">Impact Factor <b class="text-xl">2.0</b></div>'
            '<div class="metric-box">5-year Impact Factor <b class="text-xl">3.0</b></div>'
        )
        assert MetricBoxRule("Impact Factor").extract(document) == 2.0

    def test_selector_text_rule(self):
        document = parse_html('<div class="x"> value </div>')
        assert SelectorTextRule(".x").extract(document) == "value"
        assert SelectorTextRule(".missing").extract(document) is None

    def test_labeled_row_exact_heading(self):
        rule = LabeledRowRule(
            heading="Subject areas",
            row_selector=".row",
            heading_selector="h3",
            value_selector=".value",
            not_found="N/A",
        )
        document = parse_html(
            '<div class="row"><h3>Subject areas covered</h3><p class="value">no</p></div>'
            '<div class="row"><h3>Subject areas</h3><p class="value"> Chemistry </p></div>'
        )
        assert rule.extract(document) == "Chemistry"

    def test_labeled_row_not_found_placeholder(self):
        rule = LabeledRowRule("Subject areas", ".row", "h3", ".value", not_found="N/A")
        assert rule.extract(parse_html("<div class='row'><h3>ISSN</h3></div>")) == "N/A"
        assert rule.default == "N/A"

    def test_labeled_row_without_value_cell(self):
        rule = LabeledRowRule("Subject areas", ".row", "h3", ".value", not_found="N/A")
        document = parse_html("<div class='row'><h3>Subject areas</h3></div>")
        assert rule.extract(document) is None

    def test_price_rule(self):
        rule = PriceRule(".price .text-xl")
        document = parse_html('<div class="price"><span class="text-xl">$3,150</span></div>')
        assert rule.extract(document) == 3150.0
        assert rule.extract(parse_html("")) is None

    def test_joined_list_rule_empty_is_empty_string(self):
        rule = JoinedListRule(".abstracts-and-indexing li")
        assert rule.extract(parse_html("")) == ""


class TestParseInsights:
    """Test cases for parse_insights."""

    def test_full_page(self, insights_html):
        data = parse_insights(parse_html(insights_html))

        assert data.issn == "0140-6736"
        assert data.subject_areas == "Medicine, General Medicine"
        assert data.cite_score == 3.2
        assert data.impact_factor == 98.4
        assert data.time_to_first_decision == 12
        assert isinstance(data.time_to_first_decision, int)
        assert data.review_time == 45
        assert data.submission_to_acceptance == 90
        assert data.acceptance_to_publication == 7
        assert data.acceptance_rate == 5.0
        assert data.apc == 1234.5
        assert data.abstracting_indexing == "Scopus, PubMed/Medline, Web of Science"

    def test_empty_page_degrades_to_defaults(self):
        data = parse_insights(parse_html(""))

        assert data.issn is None
        assert data.cite_score is None
        assert data.apc is None
        assert data.review_time is None
        assert data.subject_areas == "N/A"
        assert data.abstracting_indexing == ""

    def test_one_failing_rule_does_not_abort_page(self, insights_html):
        class BrokenRule:
            default = None

            def extract(self, document):
                raise AttributeError("markup changed")

        rules = dict(INSIGHTS_RULES, issn=BrokenRule())
        values = apply_rules(parse_html(insights_html), rules)

        assert values["issn"] is None
        assert values["cite_score"] == 3.2

    def test_fractional_day_count_kept(self):
        document = parse_html(
            '<div class="metric-box">Review time <b class="text-xl">4.5 weeks</b></div>'
        )
        assert parse_insights(document).review_time == 4.5


class TestParseAimsAndScope:
    """Test cases for parse_aims_and_scope."""

    def test_section_text_trimmed(self, aims_html):
        text = parse_aims_and_scope(parse_html(aims_html))
        assert text == "The journal publishes original research in general medicine."

    def test_missing_section(self):
        assert parse_aims_and_scope(parse_html("<html></html>")) is None
