import asyncio
import logging
from typing import Protocol

from lessonbook.application.catalog import LessonCatalog
from lessonbook.domain.exceptions import SearchFailureError
from lessonbook.domain.models import Lesson
from lessonbook.domain.state_machine import SearchStateMachine, SearchStatus


logger = logging.getLogger(__name__)


class LessonSearcher(Protocol):
    async def search_lessons(self, query: str) -> list[Lesson]: ...


class SearchDebouncer:
    """
    Turns keystrokes into search requests.

    Each keystroke re-arms a timer; only a pause of ``delay`` seconds sends
    a request. Requests are stamped with a generation number and only the
    response to the latest dispatched request is applied to the catalog.
    In-flight requests are never cancelled.
    """

    def __init__(
        self,
        catalog: LessonCatalog,
        searcher: LessonSearcher,
        delay: float = 0.25,
    ):
        self._catalog = catalog
        self._searcher = searcher
        self.delay = delay
        self.status = SearchStatus.IDLE
        self.generation = 0
        self._pending_query: str | None = None
        self._latest_query: str | None = None
        self._timer: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    def on_query_changed(self, text: str) -> None:
        """Must be called from within a running event loop."""
        self._cancel_timer()
        query = text.strip()

        if not query:
            # Anything still in flight is now stale.
            self.generation += 1
            self._pending_query = None
            self._latest_query = None
            self._catalog.clear_search()
            self._transition(SearchStatus.IDLE)
            return

        self._pending_query = query
        self._transition(SearchStatus.PENDING)
        self._timer = asyncio.create_task(self._fire_after_delay())

    def flush(self) -> asyncio.Task | None:
        """Dispatch the pending query now instead of waiting for the timer."""
        if self._pending_query is None:
            return None

        self._cancel_timer()
        return self._dispatch()

    def resubmit(self) -> asyncio.Task | None:
        """Search again for the last query sent, e.g. after a catalog refetch."""
        query = self._latest_query
        if query is None or self._pending_query is not None:
            return None

        self._pending_query = query
        self._transition(SearchStatus.PENDING)
        return self._dispatch()

    async def settle(self) -> None:
        """Wait for the pending timer and every in-flight request to finish."""
        while self._timer is not None or self._in_flight:
            if self._timer is not None:
                await asyncio.gather(self._timer, return_exceptions=True)
            if self._in_flight:
                await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _fire_after_delay(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._dispatch()

    def _dispatch(self) -> asyncio.Task:
        query = self._pending_query
        self._pending_query = None
        self._latest_query = query
        self.generation += 1
        self._transition(SearchStatus.FETCHING)

        task = asyncio.create_task(self._run(self.generation, query))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _run(self, generation: int, query: str) -> None:
        try:
            lessons = await self._searcher.search_lessons(query)
        except SearchFailureError as exc:
            if generation != self.generation:
                return
            logger.warning("%s; showing the full catalog", exc)
            self._latest_query = None
            self._catalog.clear_search()
            self._settle_status()
            return

        if generation != self.generation:
            logger.debug(
                "Discarding stale results for %r (generation %s, latest %s)",
                query,
                generation,
                self.generation,
            )
            return

        self._catalog.apply_search_results(query, lessons)
        self._settle_status()

    def _settle_status(self) -> None:
        if self.status is SearchStatus.FETCHING:
            self._transition(SearchStatus.IDLE)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _transition(self, to_status: SearchStatus) -> None:
        SearchStateMachine.validate_transition(self.status, to_status)
        self.status = to_status
