"""Oh My Zsh wiki discovery - lists plugin/theme names beyond the built-in menu."""

from __future__ import annotations

import html
import re

import httpx
import structlog

logger = structlog.get_logger()

PLUGINS_WIKI_URL = "https://github.com/ohmyzsh/ohmyzsh/wiki/Plugins"
THEMES_WIKI_URL = "https://github.com/ohmyzsh/ohmyzsh/wiki/Themes"

_TREE_MARKER = "/ohmyzsh/ohmyzsh/tree/master/"
_ANCHOR = re.compile(r"<a\s[^>]*href=\"(?P<href>[^\"]*)\"[^>]*>(?P<text>.*?)</a>", re.IGNORECASE | re.DOTALL)
_TAGS = re.compile(r"<[^>]+>")


def extract_options(page: str) -> list[str]:
    """Anchor texts linking into the Oh My Zsh source tree, deduplicated and sorted."""
    names: set[str] = set()
    for match in _ANCHOR.finditer(page):
        if _TREE_MARKER not in match.group("href"):
            continue
        text = html.unescape(_TAGS.sub("", match.group("text"))).strip()
        if text:
            names.add(text)
    return sorted(names)


class WikiDiscovery:
    """Fetches option lists from the Oh My Zsh wiki. Errors yield an empty list."""

    def __init__(self, client: httpx.Client | None = None, timeout: float = 15.0) -> None:
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self, url: str) -> list[str]:
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("discovery_http_error", url=url, status=e.response.status_code)
            return []
        except httpx.HTTPError as e:
            logger.warning("discovery_failed", url=url, error=str(e))
            return []

        options = extract_options(resp.text)
        logger.info("discovery_complete", url=url, options=len(options))
        return options

    def plugins(self) -> list[str]:
        return self.fetch(PLUGINS_WIKI_URL)

    def themes(self) -> list[str]:
        return self.fetch(THEMES_WIKI_URL)

    def close(self) -> None:
        self._client.close()
