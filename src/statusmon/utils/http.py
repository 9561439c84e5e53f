"""Shared httpx client handling."""

from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx


@asynccontextmanager
async def use_client(client: Optional[httpx.AsyncClient] = None, **client_options: Any):
    """Yield ``client`` untouched, or a short-lived client closed on exit."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(**client_options) as owned:
        yield owned
