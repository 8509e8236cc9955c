# File: tests/conftest.py
import pytest

from lesson_scout.config import ScraperConfig
from lesson_scout.crawler.fetcher import PageFetcher
from tests.fakes import ROOT_URL, FakeBrowserProvider, FakeSite, MemoryStore, RecordingNotifier


@pytest.fixture()
def config(tmp_path) -> ScraperConfig:
    """
    Return a basic valid ScraperConfig for crawler tests.
    """
    return ScraperConfig(
        rabbi_url=ROOT_URL,
        retries=3,
        subject_key="rabbi_test",
        storage_dir=tmp_path / "snapshots",
    )


@pytest.fixture()
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture()
def browser(site) -> FakeBrowserProvider:
    return FakeBrowserProvider(site)


@pytest.fixture()
def fetcher(browser, config) -> PageFetcher:
    return PageFetcher.from_config(browser, config)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()
