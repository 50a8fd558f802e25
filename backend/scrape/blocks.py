from typing import Optional

from backend.scrape.config import BLOCK_MARKERS, BLOCK_STATUSES


def is_blocked(body: Optional[str], status: int) -> bool:
    """
    Classify a fetched page as a block/challenge page.
    Heuristic only: soft blocks that look like normal pages slip through and are
    caught later when extraction finds no price/address.
    """
    if status in BLOCK_STATUSES:
        return True
    if not body:
        return True
    low = body.lower()
    return any(marker in low for marker in BLOCK_MARKERS)
