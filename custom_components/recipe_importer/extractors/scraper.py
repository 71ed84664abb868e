"""
Web page fetching for recipe import.

This module fetches recipe pages through a cloudscraper session (for sites
with anti-bot protection), re-checking every redirect hop against the URL
guard, and pulls the visible text and preview image out of the HTML.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urljoin

import cloudscraper
import requests
from bs4 import BeautifulSoup

from ..const import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE,
    MAX_PAGE_TEXT_LENGTH,
)
from ..exceptions import FetchError, UnsafeUrlError
from .url_guard import UrlValidation, validate_url

_LOGGER = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("text/html", "application/xhtml")

_REDIRECT_STATUSES = (301, 302, 303, 307, 308)

# Meta tags that commonly carry the recipe's preview image, most reliable first
_IMAGE_META_SELECTORS = (
    'meta[property="og:image"]',
    'meta[property="og:image:url"]',
    'meta[property="og:image:secure_url"]',
    'meta[name="twitter:image"]',
    'meta[name="twitter:image:src"]',
    'meta[itemprop="image"]',
    'link[rel="image_src"]',
)


@dataclass(frozen=True)
class FetchedPage:
    """An HTML page as served after following redirects."""

    url: str
    html: str
    content_type: str

    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, features="html.parser")


def create_session() -> requests.Session:
    """Create a cloudscraper session that looks like a desktop browser."""
    return cloudscraper.create_scraper(
        browser={
            'browser': 'chrome',
            'platform': 'windows',
            'desktop': True
        }
    )


class PageFetcher:
    """Fetches HTML pages with SSRF-checked redirects and a size cap.

    Args:
        session_factory: Creates the HTTP session for each fetch
        url_guard: Validates the initial URL and every redirect target
        timeout: Total time allowed for a fetch in seconds, redirects and
            body download included
        max_redirects: Maximum number of redirects to follow
        max_response_size: Maximum body size in bytes
    """

    def __init__(
        self,
        session_factory: Callable[[], requests.Session] = create_session,
        url_guard: Callable[[str], UrlValidation] = validate_url,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE,
    ) -> None:
        self._session_factory = session_factory
        self._url_guard = url_guard
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._max_response_size = max_response_size

    def _check(self, url: str) -> str:
        validation = self._url_guard(url)
        if not validation.valid:
            raise UnsafeUrlError(url, validation.reason or "rejected")
        return validation.url or url

    def fetch(self, url: str) -> FetchedPage:
        """Fetch an HTML page.

        Redirects are followed by hand so each target passes the URL guard
        before it is requested. The whole fetch shares one deadline.

        Args:
            url: The page URL

        Returns:
            The fetched page

        Raises:
            UnsafeUrlError: If the URL or a redirect target is not allowed
            FetchError: If the request fails or runs past the deadline,
                redirects too often, or the response is not an HTML page
                within the size limit
        """
        current_url = self._check(url)
        _LOGGER.info("Fetching recipe page %s", current_url)

        deadline = time.monotonic() + self._timeout
        session = self._session_factory()
        try:
            for _ in range(self._max_redirects + 1):
                remaining = self._remaining(deadline, current_url)
                try:
                    response = session.get(
                        current_url,
                        timeout=remaining,
                        allow_redirects=False,
                        stream=True,
                    )
                except requests.exceptions.Timeout as e:
                    raise FetchError(
                        f"Timed out fetching {current_url}") from e
                except requests.exceptions.RequestException as e:
                    raise FetchError(
                        f"Failed to fetch {current_url}: {e}") from e

                try:
                    location = response.headers.get("location")
                    if response.status_code in _REDIRECT_STATUSES and location:
                        next_url = urljoin(current_url, location)
                        _LOGGER.debug("Redirect %d from %s to %s",
                                      response.status_code, current_url, next_url)
                        current_url = self._check(next_url)
                        continue

                    return self._read_page(response, current_url, deadline)
                finally:
                    response.close()
        finally:
            session.close()

        raise FetchError(
            f"Too many redirects fetching {url} (max {self._max_redirects})")

    def _remaining(self, deadline: float, url: str) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FetchError(f"Timed out fetching {url}")
        return remaining

    def _read_page(
        self, response: requests.Response, url: str, deadline: float
    ) -> FetchedPage:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise FetchError(
                f"Failed to fetch {url}: HTTP {response.status_code}") from e

        # Validate Content-Type before downloading
        content_type = response.headers.get('content-type', '').lower()
        if not any(allowed in content_type for allowed in ALLOWED_CONTENT_TYPES):
            _LOGGER.warning("Invalid content type for %s: %s", url, content_type)
            raise FetchError(
                f"Invalid content type: {content_type or 'unknown'}. "
                "Only HTML/XHTML content is allowed.")

        content_length = response.headers.get('content-length')
        if content_length and content_length.isdigit():
            if int(content_length) > self._max_response_size:
                raise FetchError(
                    f"Response size ({content_length} bytes) exceeds maximum "
                    f"allowed size ({self._max_response_size} bytes)")

        # Download content with size limit enforcement
        content = b''
        try:
            for chunk in response.iter_content(chunk_size=8192):
                content += chunk
                self._remaining(deadline, url)
                if len(content) > self._max_response_size:
                    _LOGGER.warning(
                        "Response exceeded size limit while downloading from %s", url)
                    raise FetchError(
                        f"Response size exceeds maximum allowed size "
                        f"({self._max_response_size} bytes)")
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Failed to read {url}: {e}") from e

        encoding = response.encoding or 'utf-8'
        html = content.decode(encoding, errors='replace')
        _LOGGER.debug("Successfully fetched %d bytes from %s", len(content), url)
        return FetchedPage(url=url, html=html, content_type=content_type)


def extract_image_from_meta(soup: BeautifulSoup) -> str | None:
    """Find the page's preview image in its meta tags.

    Only absolute http(s) URLs are accepted; protocol-relative URLs get
    an https scheme.
    """
    for selector in _IMAGE_META_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        content = (element.get('content') or element.get('href') or '').strip()
        if content.startswith('//'):
            return f'https:{content}'
        if content.startswith('http'):
            return content
    return None


def extract_page_text(soup: BeautifulSoup, max_length: int = MAX_PAGE_TEXT_LENGTH) -> str:
    """Extract the visible body text of a page, whitespace-collapsed.

    Args:
        soup: Parsed page; scripts and styles are removed from it
        max_length: Truncate the text to this many characters

    Returns:
        The page text
    """
    for element in soup(["script", "style", "noscript"]):
        element.extract()

    root = soup.body or soup
    text = ' '.join(root.get_text(separator=' ').split())

    if len(text) > max_length:
        _LOGGER.debug("Truncating text from %d to %d characters",
                      len(text), max_length)
        text = text[:max_length]
    return text
