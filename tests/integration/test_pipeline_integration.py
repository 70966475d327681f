# SPDX-License-Identifier: MIT
"""End-to-end tests: catalog page -> proxied fetches -> extraction -> SQLite."""

from unittest.mock import MagicMock

import pytest

from journal_harvester.assembler import RecordAssembler
from journal_harvester.catalog import CatalogClient
from journal_harvester.credentials import KeyRotator
from journal_harvester.fetcher import ResilientFetcher
from journal_harvester.harvester import JournalHarvester
from journal_harvester.store import JournalStore


SD = "https://www.sciencedirect.com/journal"


def _catalog_payload(*titles: str) -> dict:
    return {
        "searchResponse": {
            "items": [
                {
                    "journalLinks": {
                        "productDetailPageURL": f"https://shop.elsevier.com/journals/{t}/0000-0000"
                    },
                    "titles": {"primary": t.replace("-", " ").title()},
                }
                for t in titles
            ]
        }
    }


def _proxy_session(make_response, pages: dict[str, tuple[int, str]]) -> MagicMock:
    """Session whose proxied GETs answer by target URL; unknown URLs get 404."""

    def get(proxy_url, params):
        status, body = pages.get(params["url"], (404, ""))
        return make_response(status, body)

    session = MagicMock()
    session.get.side_effect = get
    return session


class TestPipelineIntegration:
    """Integration tests for the full crawl."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_crawl_stores_new_journals_once(
        self, make_response, sleep_recorder, db_path, insights_html, aims_html
    ):
        minimal_insights = (
            '<div class="metric-box">CiteScore <span class="text-xl">3.2</span></div>'
        )
        proxy = _proxy_session(
            make_response,
            {
                f"{SD}/the-lancet/about/insights": (200, insights_html),
                f"{SD}/the-lancet/about/aims-and-scope": (200, aims_html),
                f"{SD}/foo-journal/about/insights": (200, minimal_insights),
            },
        )
        catalog_session = MagicMock()
        catalog_session.post.side_effect = [
            make_response(200, json_data=_catalog_payload("the-lancet", "foo-journal")),
            make_response(200, json_data=_catalog_payload("the-lancet")),
        ]

        fetcher = ResilientFetcher(
            KeyRotator(["key-one-0001"]), session=proxy, retries=1, sleep=sleep_recorder
        )
        with JournalStore(db_path) as store:
            harvester = JournalHarvester(
                RecordAssembler(fetcher),
                store,
                CatalogClient(session=catalog_session),
                page_delay=1.0,
                sleep=sleep_recorder,
            )
            summary = await harvester.harvest(1, 2)

            assert summary.journals_inserted == 2
            assert summary.journals_skipped == 1
            assert store.count() == 2

            lancet = store.get_by_title("the-lancet")
            assert lancet["issn"] == "0140-6736"
            assert lancet["apc"] == 1234.5
            assert lancet["abstracting_indexing"] == "Scopus, PubMed/Medline, Web of Science"
            assert lancet["aims_and_scope"].startswith("The journal publishes")

            foo = store.get_by_title("foo-journal")
            assert foo["cite_score"] == 3.2
            assert foo["issn"] is None
            assert foo["aims_and_scope"] is None
            assert foo["sciencedirect_url"] == f"{SD}/foo-journal/about/insights"

        assert sleep_recorder.delays == [1.0]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_rejected_keys_stop_crawl(self, make_response, sleep_recorder, db_path):
        proxy = MagicMock()
        proxy.get.side_effect = lambda proxy_url, params: make_response(403, "")
        catalog_session = MagicMock()
        catalog_session.post.side_effect = [
            make_response(200, json_data=_catalog_payload("alpha", "beta")),
        ]

        fetcher = ResilientFetcher(
            KeyRotator(["key-one-0001", "key-two-0002"]),
            session=proxy,
            sleep=sleep_recorder,
        )
        with JournalStore(db_path) as store:
            harvester = JournalHarvester(
                RecordAssembler(fetcher),
                store,
                CatalogClient(session=catalog_session),
                sleep=sleep_recorder,
            )
            summary = await harvester.harvest(1, 3)

            assert summary.stopped_early
            assert catalog_session.post.call_count == 1
            assert store.count() == 1
            assert store.get_by_title("alpha")["cite_score"] is None
