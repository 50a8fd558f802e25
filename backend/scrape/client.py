import logging
from typing import Optional

import httpx

from backend.scrape.config import HTTP_DEBUG, SCRAPE_PROXY


def new_client(
    timeout: float = 15.0,
    max_redirects: int = 5,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create a configured AsyncClient for listing pages with optional proxy and debug logging.
    Headers are left to the caller; the fetcher rotates them per attempt.
    """
    if HTTP_DEBUG:
        logging.getLogger("httpx").setLevel(logging.DEBUG)

    if transport is None:
        # retries live in ResilientFetcher
        transport = httpx.AsyncHTTPTransport(
            retries=0,
            proxy=SCRAPE_PROXY or None,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=max_redirects,
        http2=False,
        transport=transport,
    )
