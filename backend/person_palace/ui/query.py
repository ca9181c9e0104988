"""
Cached queries and single-flight mutations.

A Query owns the locally held copy of one server resource under a stable key.
It is only ever refreshed by full replacement: invalidate, then re-fetch.
Blocking fetchers run through asyncio.to_thread so the event loop stays free.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Literal, TypeVar

from person_palace.services.person_service import RequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryStatus = Literal["pending", "error", "success"]
ErrorTypes = tuple[type[Exception], ...]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Query(Generic[T]):
    """One cached resource. Overlapping fetches resolve last-fetch-wins."""

    def __init__(
        self,
        key: str,
        fetcher: Callable[[], T],
        catch: ErrorTypes = (RequestError,),
    ) -> None:
        self.key = key
        self._fetcher = fetcher
        self._catch = catch
        self._fetch_seq = 0
        self.data: T | None = None
        self.error: Exception | None = None
        self.is_fetching = False
        self.is_stale = True

    @property
    def status(self) -> QueryStatus:
        if self.data is not None:
            return "success"
        if self.error is not None:
            return "error"
        return "pending"

    @property
    def is_loading(self) -> bool:
        """True while the first fetch runs and nothing has been loaded yet."""
        return self.is_fetching and self.data is None

    async def fetch(self) -> T | None:
        """Run the fetcher. Failures are recorded on ``error``, not raised."""
        self._fetch_seq += 1
        seq = self._fetch_seq
        self.is_fetching = True
        try:
            data = await asyncio.to_thread(self._fetcher)
        except self._catch as e:
            if seq != self._fetch_seq:
                return None
            logger.warning("Query %r failed: %s", self.key, e)
            self.error = e
            return None
        finally:
            if seq == self._fetch_seq:
                self.is_fetching = False
        if seq != self._fetch_seq:
            # A newer fetch started while this one was in flight.
            logger.debug("Discarding superseded result for query %r", self.key)
            return None
        self.data = data
        self.error = None
        self.is_stale = False
        return data


class QueryClient:
    """Registry of cached queries keyed by a stable string key."""

    def __init__(self) -> None:
        self._queries: dict[str, Query[Any]] = {}

    def query(
        self,
        key: str,
        fetcher: Callable[[], T],
        catch: ErrorTypes = (RequestError,),
    ) -> Query[T]:
        """Return the query registered under ``key``, registering it on first use."""
        existing = self._queries.get(key)
        if existing is not None:
            return existing
        q: Query[T] = Query(key, fetcher, catch=catch)
        self._queries[key] = q
        return q

    def get_query_data(self, key: str) -> Any:
        q = self._queries.get(key)
        return q.data if q is not None else None

    async def invalidate(self, key: str) -> None:
        """Mark the cached data stale and re-fetch it from the server."""
        q = self._queries.get(key)
        if q is None:
            return
        q.is_stale = True
        await q.fetch()


class Mutation(Generic[T]):
    """
    A side-effecting call with a busy flag. Only one request may be in flight:
    a call made while pending is dropped. Errors of the ``catch`` types go to
    ``on_error``. Callbacks receive the call arguments after the result
    (or error) and run before the busy flag clears.
    """

    def __init__(
        self,
        fn: Callable[..., T],
        *,
        on_success: Callable[..., Awaitable[None] | None] | None = None,
        on_error: Callable[..., Awaitable[None] | None] | None = None,
        catch: ErrorTypes = (RequestError,),
        name: str = "mutation",
    ) -> None:
        self._fn = fn
        self._on_success = on_success
        self._on_error = on_error
        self._catch = catch
        self.name = name
        self.is_pending = False
        self.error: Exception | None = None

    async def mutate(self, *args: Any) -> T | None:
        if self.is_pending:
            logger.warning("%s already in flight; ignoring duplicate submission", self.name)
            return None
        self.is_pending = True
        self.error = None
        try:
            try:
                result = await asyncio.to_thread(self._fn, *args)
            except self._catch as e:
                self.error = e
                if self._on_error is not None:
                    await _maybe_await(self._on_error(e, *args))
                return None
            if self._on_success is not None:
                await _maybe_await(self._on_success(result, *args))
            return result
        finally:
            self.is_pending = False
