# SPDX-License-Identifier: MIT
"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from journal_harvester.config import reset_config_manager
from journal_harvester.models import JournalRecord
from journal_harvester.store import JournalStore


INSIGHTS_HTML = """
<html><body>
  <div class="row gutters hor-line u-padding-l-ver">
    <div class="col-lg-7"><h3>ISSN</h3></div>
    <div class="col-lg-17 col-xs-24"><span class="u-display-inline"> 0140-6736 </span></div>
  </div>
  <div class="row gutters hor-line u-padding-l-ver">
    <div class="col-lg-7"><h3> Subject areas </h3></div>
    <div class="col-lg-17 col-xs-24 text-s">
      Medicine, General Medicine
    </div>
  </div>
  <div class="metric-box"><span>CiteScore</span><span class="text-xl">3.2</span></div>
  <div class="metric-box"><span>Impact Factor</span><span class="text-xl">98.4</span></div>
  <div class="metric-box"><span>Time to first decision</span><span class="text-xl">12 days</span></div>
  <div class="metric-box"><span>Review time</span><span class="text-xl">45</span></div>
  <div class="metric-box"><span>Submission to acceptance</span><span class="text-xl">90</span></div>
  <div class="metric-box"><span>Acceptance to publication</span><span class="text-xl">7</span></div>
  <div class="metric-box"><span>Acceptance Rate</span><span class="text-xl">5%</span></div>
  <div class="list-price-without-waiver"><span class="text-xl">$1,234.50</span></div>
  <ul class="abstracts-and-indexing">
    <li> Scopus </li>
    <li>PubMed/Medline</li>
    <li>Web of Science</li>
  </ul>
</body></html>
"""

AIMS_HTML = """
<html><body>
  <div class="js-aims-and-scope">
    <p>The journal publishes original research in general medicine.</p>
  </div>
</body></html>
"""


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _response_context(status: int, text: str = "", json_data=None) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    response.json = AsyncMock(return_value=json_data)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep the global config manager and key env var out of every test."""
    monkeypatch.delenv("SCRAPERAPI_KEYS", raising=False)
    monkeypatch.delenv("JOURNAL_HARVESTER_DB_PATH", raising=False)
    monkeypatch.delenv("JOURNAL_HARVESTER_FETCH_RETRIES", raising=False)
    reset_config_manager()
    yield
    reset_config_manager()


@pytest.fixture
def make_response():
    """Factory for mocked ``async with session.get(...)`` contexts."""
    return _response_context


@pytest.fixture
def network_error():
    """An aiohttp connection failure to put in a session side effect."""
    return aiohttp.ClientConnectionError("connection reset")


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def insights_html() -> str:
    return INSIGHTS_HTML


@pytest.fixture
def aims_html() -> str:
    return AIMS_HTML


@pytest.fixture
def db_path(tmp_path):
    """Temporary database file path for each test."""
    return tmp_path / "journals.db"


@pytest.fixture
def store(db_path):
    """Open journal store on a temporary database."""
    with JournalStore(db_path) as journal_store:
        yield journal_store


@pytest.fixture
def sample_record() -> JournalRecord:
    """A fully populated journal record."""
    return JournalRecord(
        journal_title="the-lancet",
        aims_and_scope="General medicine.",
        issn="0140-6736",
        subject_areas="Medicine",
        impact_factor=98.4,
        cite_score=3.2,
        apc=1234.5,
        time_to_first_decision=12,
        review_time=45,
        submission_to_acceptance=90,
        acceptance_to_publication=7,
        acceptance_rate=5.0,
        abstracting_indexing="Scopus, PubMed/Medline",
        shop_url="https://shop.elsevier.com/journals/the-lancet/0140-6736",
        sciencedirect_url="https://www.sciencedirect.com/journal/the-lancet/about/insights",
    )
