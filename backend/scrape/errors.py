from typing import Optional, Sequence


class ScrapeError(Exception):
    """Base class for every failure the acquisition pipeline reports."""

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message)
        self.platform = platform


class FetchError(ScrapeError):
    pass


class FetchBlocked(FetchError):
    """A response came back but it was a block/challenge page or unusable."""

    def __init__(self, message: str, status: Optional[int] = None, platform: Optional[str] = None):
        super().__init__(message, platform)
        self.status = status


class FetchTimeout(FetchError):
    pass


class FetchExhausted(FetchError):
    def __init__(self, url: str, attempts: int, reason: str = "", platform: Optional[str] = None):
        msg = f"gave up on {url} after {attempts} attempt(s)"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, platform)
        self.url = url
        self.attempts = attempts


class InsufficientData(ScrapeError):
    pass


class RenderFailed(ScrapeError):
    pass


class UnsupportedSource(ScrapeError):
    pass


class MalformedUrl(ScrapeError):
    """The URL cannot be requested at all (bad scheme, host or port)."""


class ExtractionFailed(ScrapeError):
    def __init__(self, message: str, platform: str, tiers: Sequence[str] = ()):
        super().__init__(message, platform)
        self.tiers = list(tiers)


# Tier-level failures the orchestrator turns into "try the next tier".
TIER_ERRORS = (FetchError, InsufficientData, RenderFailed)
