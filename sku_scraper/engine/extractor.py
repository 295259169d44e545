"""Pull SKU tokens out of catalog page markup."""

from __future__ import annotations

import re

from selectolax.parser import HTMLParser

from ..config import ExtractSettings


class Extractor:
    """Return SKU-looking node texts found under the configured selector."""

    def __init__(self, settings: ExtractSettings | None = None) -> None:
        self.settings = settings or ExtractSettings()
        self._pattern = re.compile(self.settings.sku_pattern)

    def extract(self, html: str) -> list[str]:
        parser = HTMLParser(html)
        skus: list[str] = []
        for node in parser.css(self.settings.selector):
            text = node.text(strip=True)
            if self._pattern.fullmatch(text):
                skus.append(text)
        return skus


__all__ = ["Extractor"]
