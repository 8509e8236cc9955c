# === FILE: lesson_scout/runner.py ===
"""
Wiring of the collaborators for one crawl run.
"""
from lesson_scout.browser import BrowserProvider
from lesson_scout.config import ScraperConfig
from lesson_scout.crawler.fetcher import PageFetcher
from lesson_scout.engine import CrawlEngine, CrawlResult
from lesson_scout.notifications import build_notifier
from lesson_scout.storage import LocalSnapshotStore


def build_engine(cfg: ScraperConfig) -> CrawlEngine:
    browser = BrowserProvider(headless=cfg.headless)
    return CrawlEngine(
        cfg,
        browser=browser,
        fetcher=PageFetcher.from_config(browser, cfg),
        store=LocalSnapshotStore(cfg.storage_dir),
        notifier=build_notifier(cfg),
    )


async def start_crawl(cfg: ScraperConfig) -> CrawlResult:
    """
    Run one incremental crawl and return its summary.

    Parameters
    ----------
    cfg : ScraperConfig
        Crawl configuration.

    Returns
    -------
    CrawlResult
        Final state, stored snapshot and per-run counters.
    """
    return await build_engine(cfg).run()

__all__ = ["build_engine", "start_crawl"]
