# lessonbook/infrastructure/http/lesson_api.py

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from lessonbook.api.schemas.schemas import (
    LessonSchema,
    OrderConfirmation,
    OrderRequest,
    SpacesUpdateRequest,
)
from lessonbook.domain.exceptions import (
    FetchFailureError,
    LessonUpdateError,
    OrderCreateError,
    SearchFailureError,
)
from lessonbook.domain.models import Lesson
from lessonbook.infrastructure.settings import Settings


logger = logging.getLogger(__name__)

_lesson_list = TypeAdapter(list[LessonSchema])


class LessonApiClient:
    """Async adapter for the lessons backend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LessonApiClient":
        return cls(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
        )

    async def __aenter__(self) -> "LessonApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_lessons(self) -> list[Lesson]:
        try:
            response = await self._http.get("/lessons")
            response.raise_for_status()
            records = _lesson_list.validate_python(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            logger.warning("Lesson fetch failed: %s", exc)
            raise FetchFailureError(f"Could not load lessons: {exc}") from exc

        return [record.to_domain() for record in records]

    async def search_lessons(self, query: str) -> list[Lesson]:
        try:
            response = await self._http.get("/search", params={"q": query})
            response.raise_for_status()
            records = _lesson_list.validate_python(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise SearchFailureError(query, str(exc)) from exc

        return [record.to_domain() for record in records]

    async def create_order(self, order: OrderRequest) -> OrderConfirmation:
        try:
            response = await self._http.post(
                "/order",
                json=order.model_dump(by_alias=True),
            )
            response.raise_for_status()
            body = response.json() if response.content else {}
            confirmation = OrderConfirmation.model_validate(body)
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise OrderCreateError(f"Order was not created: {exc}") from exc

        logger.info("Order %s created for lessons %s", confirmation.order_id, order.lesson_ids)
        return confirmation

    async def update_lesson_spaces(self, lesson_id: str, spaces: int) -> None:
        payload = SpacesUpdateRequest(spaces=spaces)
        try:
            response = await self._http.put(
                f"/lessons/{lesson_id}",
                json=payload.model_dump(),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise LessonUpdateError(lesson_id, str(exc)) from exc
