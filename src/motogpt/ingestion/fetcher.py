"""Page fetching through a headless browser.

Pages are rendered by Chromium (via Playwright) so that content injected
by scripts before ``DOMContentLoaded`` is captured.  The body markup is
then reduced to plain text with BeautifulSoup.
"""

from __future__ import annotations

import logging
import re
import unicodedata

from bs4 import BeautifulSoup
from playwright.async_api import async_playwright

from motogpt.ingestion.models import Page

logger = logging.getLogger(__name__)

_BOILERPLATE_TAGS = ["script", "style", "noscript", "iframe", "svg", "template"]


def normalise_text(text: str) -> str:
    """Unicode NFC, collapse whitespace, strip control chars."""
    text = unicodedata.normalize("NFC", text)
    text = re.sub(r"[^\S\n]+", " ", text)  # collapse spaces (keep \n)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)  # max two consecutive newlines
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    return text.strip()


def html_to_text(html: str) -> str:
    """Strip markup from *html* and return normalised plain text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_BOILERPLATE_TAGS):
        tag.decompose()
    return normalise_text(soup.get_text(separator="\n"))


async def fetch_page(
    url: str,
    *,
    headless: bool = True,
    timeout_ms: int = 30_000,
) -> Page:
    """Render *url* and return its text content.

    Navigation only waits for ``domcontentloaded``, not network idle.
    The browser is closed whether or not extraction succeeds.

    Any failure is logged and produces a :class:`Page` with empty text;
    it is never raised.
    """
    logger.info("Fetching %s", url)
    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=headless)
            try:
                page = await browser.new_page()
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                html = await page.evaluate("() => document.body ? document.body.innerHTML : ''")
            finally:
                await browser.close()
    except Exception as exc:
        logger.warning("Fetch failed for %s: %s", url, exc)
        return Page(url=url, text="")

    text = html_to_text(html or "")
    if not text:
        logger.warning("No text extracted from %s", url)
    else:
        logger.info("Fetched %s (%d chars)", url, len(text))
    return Page(url=url, text=text)
