"""Client for the CVM open-data daily report archives (``inf_diario_fi``).

The portal publishes one zip per month. A month that has not been published
yet answers 404 and the portal occasionally blocks crawlers with 403; both are
surfaced as outcomes instead of exceptions so the import job can decide what
to do with each month.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import httpx

from carteira.config import get_settings

logger = logging.getLogger(__name__)

FILE_TEMPLATE = "inf_diario_fi_{year:04d}{month:02d}.zip"


@dataclass(frozen=True)
class Fetched:
    url: str
    content: bytes


@dataclass(frozen=True)
class NotFound:
    url: str


@dataclass(frozen=True)
class Forbidden:
    url: str


@dataclass(frozen=True)
class Failed:
    url: str
    cause: Exception

    @property
    def reason(self) -> str:
        return str(self.cause) or type(self.cause).__name__


FetchResult = Union[Fetched, NotFound, Forbidden, Failed]


class UnexpectedStatusError(RuntimeError):
    """Carried inside ``Failed`` when the portal answers an unexpected status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"unexpected HTTP status {status_code}")
        self.status_code = status_code


def archive_name(year: int, month: int) -> str:
    return FILE_TEMPLATE.format(year=year, month=month)


class CvmArchiveClient:
    """Downloads monthly daily-report archives."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.cvm_base_url).rstrip("/")
        headers = {
            "User-Agent": user_agent or settings.cvm_user_agent,
            "Accept": "application/zip,application/octet-stream;q=0.9,*/*;q=0.8",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.cvm_http_timeout_seconds),
            headers=headers,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "CvmArchiveClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def archive_url(self, year: int, month: int) -> str:
        return f"{self.base_url}/{archive_name(year, month)}"

    async def fetch(self, year: int, month: int) -> FetchResult:
        url = self.archive_url(year, month)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.debug("Transport error fetching %s: %s", url, exc)
            return Failed(url, exc)

        if response.status_code == httpx.codes.OK:
            return Fetched(url, response.content)
        if response.status_code == httpx.codes.NOT_FOUND:
            return NotFound(url)
        if response.status_code == httpx.codes.FORBIDDEN:
            return Forbidden(url)
        return Failed(url, UnexpectedStatusError(response.status_code))


__all__ = [
    "CvmArchiveClient",
    "Failed",
    "FetchResult",
    "Fetched",
    "Forbidden",
    "NotFound",
    "UnexpectedStatusError",
    "archive_name",
]
