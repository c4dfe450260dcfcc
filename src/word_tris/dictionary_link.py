"""Definition pages for formed words (Standard Korean Language Dictionary)."""

from __future__ import annotations

import logging
import webbrowser
from urllib.parse import quote

log = logging.getLogger("word_tris.dictionary_link")

STDICT_SEARCH_URL = "https://stdict.korean.go.kr/search/searchResult.do?searchKeyword={}"


def definition_url(word: str) -> str:
    return STDICT_SEARCH_URL.format(quote(word.strip()))


def open_definition(word: str) -> bool:
    """Open the dictionary page for ``word`` in the default browser."""
    url = definition_url(word)
    opened = webbrowser.open(url)
    if not opened:
        log.warning("Could not open a browser for %s", url)
    return opened
