import asyncio
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from lessonbook.api.schemas.schemas import OrderConfirmation, OrderRequest
from lessonbook.api.store import LessonStore
from lessonbook.application.booking_session import BookingSession
from lessonbook.domain.exceptions import (
    FetchFailureError,
    LessonUpdateError,
    OrderCreateError,
    SearchFailureError,
)
from lessonbook.domain.models import Lesson
from lessonbook.main import create_app


def make_lessons() -> list[Lesson]:
    return [
        Lesson(id="A", subject="Math", location="Hendon", price=100, spaces=3),
        Lesson(id="B", subject="Music", location="Colindale", price=80, spaces=2),
        Lesson(id="C", subject="Art", location="Mill Hill", price=70, spaces=0),
        Lesson(id="D", subject="Maths Club", location="Edgware", price=60, spaces=4),
    ]


class FakeLessonApi:
    """Stands in for LessonApiClient; holds server-side lesson state."""

    def __init__(self, lessons: list[Lesson]):
        self.server = {lesson.id: lesson for lesson in lessons}
        self.search_results: dict[str, list[str]] = {}
        self.search_gates: dict[str, asyncio.Event] = {}
        self.release_on_return: dict[str, str] = {}
        self.failing_searches: set[str] = set()
        self.failing_updates: set[str] = set()
        self.fail_fetch = False
        self.fail_order = False
        self.order_gate: asyncio.Event | None = None
        self.fetch_calls = 0
        self.search_calls: list[str] = []
        self.orders: list[OrderRequest] = []
        self.updates: dict[str, int] = {}

    async def fetch_lessons(self) -> list[Lesson]:
        self.fetch_calls += 1
        if self.fail_fetch:
            raise FetchFailureError("backend unavailable")
        return [replace(lesson) for lesson in self.server.values()]

    async def search_lessons(self, query: str) -> list[Lesson]:
        self.search_calls.append(query)

        gate = self.search_gates.get(query)
        if gate is not None:
            await gate.wait()

        if query in self.failing_searches:
            raise SearchFailureError(query, "500 Internal Server Error")

        released = self.release_on_return.get(query)
        if released is not None:
            self.search_gates[released].set()

        return [
            replace(self.server[lesson_id])
            for lesson_id in self.search_results.get(query, [])
        ]

    async def create_order(self, order: OrderRequest) -> OrderConfirmation:
        if self.order_gate is not None:
            await self.order_gate.wait()
        if self.fail_order:
            raise OrderCreateError("503 Service Unavailable")
        self.orders.append(order)
        return OrderConfirmation(order_id=f"order-{len(self.orders)}")

    async def update_lesson_spaces(self, lesson_id: str, spaces: int) -> None:
        await asyncio.sleep(0)
        if lesson_id in self.failing_updates:
            raise LessonUpdateError(lesson_id, "500 Internal Server Error")
        self.updates[lesson_id] = spaces
        self.server[lesson_id].spaces = spaces

    async def aclose(self) -> None:
        pass


@pytest.fixture
def fake_api() -> FakeLessonApi:
    return FakeLessonApi(make_lessons())


@pytest.fixture
def session(fake_api) -> BookingSession:
    return BookingSession(fake_api, search_delay=0.01)


@pytest.fixture
def loaded_session(session) -> BookingSession:
    asyncio.run(session.start())
    return session


@pytest.fixture
def store() -> LessonStore:
    return LessonStore.with_demo_data()


@pytest.fixture
def client(store) -> TestClient:
    return TestClient(create_app(store))
