"""Remote Course Search - httpx client for a golf-course API, with retry and an injected cache.

Invariants:
    - Rate limits (429): backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection): max_retries retries with exponential backoff
    - Client errors (4xx except 429) and timeouts: immediate failure, no retry
    - All failures mapped to CourseLookupError (core/errors.py)
    - Only courses with an 18-hole tee are returned; others are skipped

Design Decisions:
    - CourseSearchCache is an explicit object handed to the client; its lifetime
      is owned by whoever builds the client (app lifespan, or a test)
    - Responses mapped to core Course values here; the core never sees raw API JSON
"""

import asyncio
import logging
import random
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from tour_scorecard.core.domain_types import HOLES_PER_ROUND
from tour_scorecard.core.errors import CourseLookupError, ErrorContext
from tour_scorecard.core.game_state import Course, CourseHole

logger = logging.getLogger(__name__)


# ─── Cache ───────────────────────────────────────────────────────

@dataclass
class CacheEntry:
    value: list[Course]
    expires_at: float


class CourseSearchCache:
    """Bounded TTL cache of search results keyed by normalized query."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @staticmethod
    def key(query: str) -> str:
        return " ".join(query.lower().split())

    def get(self, query: str) -> list[Course] | None:
        k = self.key(query)
        entry = self._entries.get(k)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[k]
            return None
        self._entries.move_to_end(k)
        return entry.value

    def put(self, query: str, courses: list[Course]) -> None:
        k = self.key(query)
        self._entries[k] = CacheEntry(courses, self._clock() + self._ttl)
        self._entries.move_to_end(k)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# ─── Response mapping ────────────────────────────────────────────

def _pick_tee(tees: dict) -> dict | None:
    """First full-round tee, men's tees preferred."""
    for group in ("male", "female"):
        for tee in tees.get(group) or []:
            if len(tee.get("holes") or []) == HOLES_PER_ROUND:
                return tee
    return None


def course_from_api(payload: dict) -> Course | None:
    """Map one API course record to a Course, or None when no 18-hole tee exists."""
    tee = _pick_tee(payload.get("tees") or {})
    if tee is None:
        return None
    holes = tuple(
        CourseHole(
            hole_number=i,
            par=int(h.get("par") or 4),
            handicap=int(h.get("handicap") or i),
            distance=h.get("yardage"),
        )
        for i, h in enumerate(tee["holes"], start=1)
    )
    location = payload.get("location") or {}
    place = ", ".join(p for p in (location.get("city"), location.get("state")) if p)
    club = payload.get("club_name") or ""
    name = payload.get("course_name") or club
    if club and name != club:
        name = f"{club} - {name}"
    return Course(
        id=f"remote-{payload.get('id')}",
        name=name,
        location=place or None,
        holes=holes,
        total_par=sum(h.par for h in holes),
        total_distance=tee.get("total_yards"),
    )


# ─── Client ──────────────────────────────────────────────────────

class CourseSearchClient:
    """Wraps httpx.AsyncClient with retry, backoff, error mapping and caching."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        cache: CourseSearchCache,
        max_retries: int = 2,
        base_delay_ms: int = 500,
        max_delay_ms: int = 8_000,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Key {api_key}"},
            timeout=timeout_seconds,
            transport=transport,
        )
        self.cache = cache
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def aclose(self) -> None:
        await self.client.aclose()

    async def search(self, query: str) -> list[Course]:
        """Courses matching `query`; cached per normalized query."""
        cached = self.cache.get(query)
        if cached is not None:
            logger.info("Course search served from cache", extra={"query": query, "cache_hit": True})
            return cached
        context = ErrorContext(operation="course_search")
        data = await self._get_json("/search", {"search_query": query}, context)
        courses = [
            c for c in (course_from_api(item) for item in data.get("courses") or [])
            if c is not None
        ]
        self.cache.put(query, courses)
        return courses

    async def get(self, course_id: str) -> Course | None:
        """Fetch one remote course by its id (with or without the remote- prefix)."""
        raw_id = course_id.removeprefix("remote-")
        context = ErrorContext(operation="course_get")
        data = await self._get_json(f"/courses/{raw_id}", None, context)
        payload = data.get("course") or data
        return course_from_api(payload) if payload else None

    async def _get_json(
        self, path: str, params: dict | None, context: ErrorContext,
    ) -> dict:
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.get(path, params=params)
            except httpx.TimeoutException:
                raise CourseLookupError("Course API timeout", "timeout", context=context)
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            if response.status_code == 429:
                await self._handle_rate_limit(response, attempt, context)
                continue
            if response.status_code >= 500:
                await self._handle_transient_error(
                    f"HTTP {response.status_code}", attempt, context,
                )
                continue
            if response.status_code == 404:
                return {}
            if response.status_code >= 400:
                raise CourseLookupError(
                    f"HTTP {response.status_code}", "client_error", context=context,
                )
            logger.info(
                "Course API success", extra={"attempt": attempt + 1, "path": path},
            )
            return response.json()
        raise CourseLookupError("Retries exhausted", "connection_error", context=context)

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, context: ErrorContext,
    ) -> None:
        retry_after_ms = self._extract_retry_after(response)
        if attempt >= self.max_retries:
            raise CourseLookupError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(f"Course API rate limit, retry after {delay}ms (attempt {attempt + 1})")
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: object, attempt: int, context: ErrorContext,
    ) -> None:
        if attempt >= self.max_retries:
            raise CourseLookupError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(f"Course API transient error, retry after {delay}ms: {e}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with +/-25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Retry-After header in milliseconds."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None


# Singleton (initialized on startup when an API key is configured)
search_client: CourseSearchClient | None = None


def init_course_search(
    base_url: str, api_key: str, cache: CourseSearchCache, **kwargs,
) -> CourseSearchClient:
    global search_client
    search_client = CourseSearchClient(base_url, api_key, cache, **kwargs)
    return search_client


async def close_course_search() -> None:
    global search_client
    if search_client is not None:
        await search_client.aclose()
        search_client = None


def get_course_search_client() -> CourseSearchClient:
    """FastAPI dependency for the remote course search client."""
    if search_client is None:
        raise CourseLookupError(
            "Remote course search is not configured",
            "not_configured",
            context=ErrorContext(operation="course_search"),
        )
    return search_client
