"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import AsyncIterator

from carteira.providers.cvm import CvmArchiveClient


async def get_archive_client() -> AsyncIterator[CvmArchiveClient]:
    async with CvmArchiveClient() as client:
        yield client


__all__ = ["get_archive_client"]
