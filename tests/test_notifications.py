# File: tests/test_notifications.py
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from lesson_scout.config import ScraperConfig, TelegramConfig
from lesson_scout.errors import NotificationError
from lesson_scout.notifications import LogNotifier, TelegramNotifier, build_notifier


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def bot_api(unused_tcp_port: int):
    received = []
    app = web.Application()

    async def send_message(request: web.Request):
        if request.match_info["token"] != "bot123:abc":
            return web.json_response({"ok": False, "description": "Unauthorized"}, status=401)
        received.append(await request.json())
        return web.json_response({"ok": True})

    app.router.add_post("/{token}/sendMessage", send_message)

    async for url in _serve_app(app, unused_tcp_port):
        yield url, received


@pytest.mark.asyncio()
async def test_telegram_send_message(bot_api):
    base, received = bot_api
    notifier = TelegramNotifier(TelegramConfig(token="123:abc", chat_id=-100, api_base=base))

    await notifier.send_message("start scraping")

    assert received == [{"chat_id": "-100", "text": "start scraping"}]


@pytest.mark.asyncio()
async def test_telegram_rejection_raises(bot_api):
    base, received = bot_api
    notifier = TelegramNotifier(TelegramConfig(token="wrong", chat_id="1", api_base=base))

    with pytest.raises(NotificationError):
        await notifier.send_message("hello")
    assert received == []


@pytest.mark.asyncio()
async def test_telegram_unreachable_raises(unused_tcp_port):
    cfg = TelegramConfig(token="123:abc", chat_id="1", api_base=f"http://localhost:{unused_tcp_port}", timeout=2)

    with pytest.raises(NotificationError):
        await TelegramNotifier(cfg).send_message("hello")


def test_build_notifier_defaults_to_log(config):
    assert isinstance(build_notifier(config), LogNotifier)
    with_bot = ScraperConfig(
        rabbi_url=config.root_url, telegram={"token": "123:abc", "chat_id": "1"}
    )
    notifier = build_notifier(with_bot)
    assert isinstance(notifier, TelegramNotifier)
    assert notifier.endpoint == "https://api.telegram.org/bot123:abc/sendMessage"
