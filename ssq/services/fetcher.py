"""HTTP retrieval of raw source documents.

Failures are reported as outcomes, never raised: one unreachable source must
not stop the fallback chain.
"""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    OK = "OK"
    EMPTY = "EMPTY"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


@dataclass(frozen=True)
class HeaderProfile:
    user_agent: str
    referer: str
    accept_language: str = "zh-CN,zh;q=0.9,en;q=0.8"

    def headers(self, referer: str | None = None) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Referer": referer or self.referer,
            "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
        }


DEFAULT_PROFILES: tuple[HeaderProfile, ...] = (
    HeaderProfile(
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
        referer="https://www.baidu.com/",
    ),
    HeaderProfile(
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Safari/605.1.15"
        ),
        referer="https://www.google.com/",
    ),
    HeaderProfile(
        user_agent="Mozilla/5.0 (X11; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
        referer="https://cn.bing.com/",
    ),
    HeaderProfile(
        user_agent=(
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1"
        ),
        referer="https://m.baidu.com/",
        accept_language="zh-CN,zh-Hans;q=0.9",
    ),
)


@dataclass(frozen=True)
class SourceEndpoint:
    """One named external document."""

    name: str
    url: str
    referer: str | None = None
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FetchOutcome:
    status: FetchStatus
    endpoint: str
    text: str = ""
    status_code: int | None = None
    delay: float = 0.0
    error: str | None = None
    profile: HeaderProfile | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


def build_http_session(retries: int, backoff_factor: float) -> requests.Session:
    """Create a requests session with retry/backoff for transient network errors."""

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)

    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class SourceFetcher:
    """Fetch raw text with browser-like headers and a randomized pause first.

    Header profiles rotate round-robin per endpoint, so two consecutive
    fetches of the same endpoint never send the same profile while more than
    one is configured.
    """

    def __init__(
        self,
        http: requests.Session | None = None,
        *,
        timeout_seconds: float = 10.0,
        delay_range: tuple[float, float] = (0.5, 1.5),
        profiles: tuple[HeaderProfile, ...] = DEFAULT_PROFILES,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        low, high = delay_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid delay range: {delay_range}")
        if not profiles:
            raise ValueError("At least one header profile is required")

        self._http = http or build_http_session(retries=2, backoff_factor=0.3)
        self._timeout = timeout_seconds
        self._delay_range = (float(low), float(high))
        self._profiles = profiles
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._next_profile: dict[str, int] = {}

    def close(self) -> None:
        self._http.close()

    @property
    def delay_range(self) -> tuple[float, float]:
        return self._delay_range

    def _pick_profile(self, endpoint: SourceEndpoint) -> HeaderProfile:
        if endpoint.name not in self._next_profile:
            self._next_profile[endpoint.name] = self._rng.randrange(len(self._profiles))
        idx = self._next_profile[endpoint.name]
        self._next_profile[endpoint.name] = (idx + 1) % len(self._profiles)
        return self._profiles[idx]

    def fetch(self, endpoint: SourceEndpoint) -> FetchOutcome:
        profile = self._pick_profile(endpoint)
        delay = self._rng.uniform(*self._delay_range)
        self._sleep(delay)
        outcome = functools.partial(FetchOutcome, endpoint=endpoint.name, delay=delay, profile=profile)

        try:
            resp = self._http.get(
                endpoint.url,
                params=endpoint.params or None,
                headers=profile.headers(endpoint.referer),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Fetch %s failed: %s", endpoint.name, exc)
            return outcome(FetchStatus.TRANSPORT_FAILURE, error=str(exc))

        if not 200 <= resp.status_code < 300:
            logger.warning("Fetch %s returned HTTP %s", endpoint.name, resp.status_code)
            return outcome(FetchStatus.TRANSPORT_FAILURE, status_code=resp.status_code, error=f"HTTP {resp.status_code}")

        # Chinese lottery sites often omit the charset header.
        if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
            resp.encoding = resp.apparent_encoding
        text = resp.text or ""
        if not text.strip():
            logger.info("Fetch %s returned an empty body", endpoint.name)
            return outcome(FetchStatus.EMPTY, status_code=resp.status_code)

        logger.info("Fetched %s (%s chars)", endpoint.name, len(text))
        return outcome(FetchStatus.OK, text=text, status_code=resp.status_code)
