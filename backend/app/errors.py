from __future__ import annotations
from typing import Optional


class ExplorerError(Exception):
    """Base class for token explorer failures."""


class ClientInputError(ExplorerError):
    """A required request parameter is missing or blank."""


class UpstreamError(ExplorerError):
    """A third-party API failed: transport error, non-2xx status or unusable body."""

    def __init__(self, upstream: str, message: str, status_code: Optional[int] = None):
        self.upstream = upstream
        self.status_code = status_code
        super().__init__(f"{upstream}: {message}")


class StoreQueryError(ExplorerError):
    """A count or page query against the token store failed."""


class LoadInProgressError(ExplorerError):
    """A load was requested while another load for the same view is running."""
