"""Error taxonomy shared across catalog, fetch and record layers."""

from __future__ import annotations

from pathlib import Path


class ScraperError(Exception):
    """Base class for all SKU scraper failures."""


class FetchError(ScraperError):
    """Network or HTTP failure while retrieving one filter page."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


class FormatError(ScraperError):
    """Filter-site input is missing or does not carry the expected header."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{message} ({path})")
        self.path = Path(path)


class SchemaError(ScraperError):
    """Master record header is malformed or has no identifier column."""

    def __init__(self, path: Path | str | None, message: str) -> None:
        suffix = f" ({path})" if path is not None else ""
        super().__init__(f"{message}{suffix}")
        self.path = Path(path) if path is not None else None


class BackupError(ScraperError, OSError):
    """Copying the master record to its backup path failed."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{message} ({path})")
        self.path = Path(path)


__all__ = ["BackupError", "FetchError", "FormatError", "SchemaError", "ScraperError"]
