"""Unit tests for the headless-browser fetcher and HTML → text conversion."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from motogpt.ingestion.fetcher import fetch_page, html_to_text, normalise_text


# ──────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────


def _fake_playwright(html: str | None = "", *, goto_error: Exception | None = None, launch_error: Exception | None = None):
    """Build a stand-in for ``async_playwright`` and return (factory, browser, page)."""
    page = MagicMock()
    page.goto = AsyncMock(side_effect=goto_error)
    page.evaluate = AsyncMock(return_value=html)

    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()

    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser, side_effect=launch_error)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=pw)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=ctx), browser, page


# ──────────────────────────────────────────────────────────────────────
# html_to_text
# ──────────────────────────────────────────────────────────────────────


class TestHtmlToText:
    def test_strips_markup(self) -> None:
        html = "<div><h2>Riders</h2><p>Francesco <b>Bagnaia</b></p></div>"
        text = html_to_text(html)
        assert "<" not in text
        assert "Riders" in text
        assert "Bagnaia" in text

    def test_drops_scripts_and_styles(self) -> None:
        html = "<p>Visible</p><script>var x = 1;</script><style>p {color: red}</style>"
        assert html_to_text(html) == "Visible"

    def test_empty_html(self) -> None:
        assert html_to_text("") == ""

    def test_normalises_whitespace_and_control_chars(self) -> None:
        text = normalise_text("Hello   \t  world\x00\x01\n\n\n\n\nNext")
        assert text == "Hello world\n\nNext"


# ──────────────────────────────────────────────────────────────────────
# fetch_page
# ──────────────────────────────────────────────────────────────────────


class TestFetchPage:
    def test_returns_page_text(self) -> None:
        factory, browser, page = _fake_playwright("<h1>2025 MotoGP</h1><p>22 rounds</p>")

        with patch("motogpt.ingestion.fetcher.async_playwright", factory):
            result = asyncio.run(fetch_page("https://example.com/motogp", timeout_ms=5000))

        assert result.url == "https://example.com/motogp"
        assert "2025 MotoGP" in result.text
        assert "22 rounds" in result.text
        page.goto.assert_awaited_once_with(
            "https://example.com/motogp", wait_until="domcontentloaded", timeout=5000
        )
        browser.close.assert_awaited_once()

    def test_launches_headless_by_default(self) -> None:
        factory, _, _ = _fake_playwright("<p>x</p>")
        with patch("motogpt.ingestion.fetcher.async_playwright", factory):
            asyncio.run(fetch_page("https://example.com"))
        pw = factory.return_value.__aenter__.return_value
        pw.chromium.launch.assert_awaited_once_with(headless=True)

    def test_navigation_failure_returns_empty_page(self) -> None:
        factory, browser, _ = _fake_playwright(goto_error=TimeoutError("navigation timed out"))

        with patch("motogpt.ingestion.fetcher.async_playwright", factory):
            result = asyncio.run(fetch_page("https://unreachable.invalid"))

        assert result.text == ""
        assert result.is_empty
        browser.close.assert_awaited_once()

    def test_launch_failure_returns_empty_page(self) -> None:
        factory, browser, _ = _fake_playwright(launch_error=RuntimeError("no chromium"))

        with patch("motogpt.ingestion.fetcher.async_playwright", factory):
            result = asyncio.run(fetch_page("https://example.com"))

        assert result.is_empty
        browser.close.assert_not_awaited()

    def test_missing_body_gives_empty_page(self) -> None:
        factory, browser, _ = _fake_playwright(None)
        with patch("motogpt.ingestion.fetcher.async_playwright", factory):
            result = asyncio.run(fetch_page("https://example.com"))
        assert result.is_empty
        browser.close.assert_awaited_once()
