import logging

from lessonbook.application.cart import CartLedger
from lessonbook.application.catalog import LessonCatalog
from lessonbook.application.notices import NoticeBoard, NoticeLevel
from lessonbook.application.order_pipeline import OrderSubmissionPipeline
from lessonbook.application.search_debouncer import SearchDebouncer
from lessonbook.domain.exceptions import CapacityUpdateError, FetchFailureError
from lessonbook.domain.models import Lesson, OrderReceipt
from lessonbook.infrastructure.http.lesson_api import LessonApiClient
from lessonbook.infrastructure.repositories.lesson_repository import LessonRepository
from lessonbook.infrastructure.settings import Settings


logger = logging.getLogger(__name__)


class BookingSession:
    """Application service wiring the booking engine for one browser session."""

    def __init__(self, client: LessonApiClient, search_delay: float = 0.25):
        self.client = client
        self.notices = NoticeBoard()
        self.repository = LessonRepository()
        self.catalog = LessonCatalog(self.repository, client)
        self.cart = CartLedger(self.catalog, self.notices)
        self.search = SearchDebouncer(self.catalog, client, delay=search_delay)
        self.orders = OrderSubmissionPipeline(
            self.catalog,
            self.cart,
            client,
            self.notices,
        )
        self.load_error: FetchFailureError | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookingSession":
        return cls(
            LessonApiClient.from_settings(settings),
            search_delay=settings.search_debounce_seconds,
        )

    async def start(self) -> bool:
        """Load the catalog. On failure the error is kept for a retry panel."""
        try:
            await self.catalog.load(held=self.cart.quantities())
        except FetchFailureError as exc:
            self.load_error = exc
            logger.warning("Catalog unavailable, waiting for retry: %s", exc)
            self.notices.publish(NoticeLevel.ERROR, "Lessons could not be loaded.")
            return False

        self.load_error = None
        return True

    async def close(self) -> None:
        await self.search.settle()
        await self.client.aclose()

    def visible_lessons(self) -> list[Lesson]:
        return self.catalog.visible_lessons()

    def add_to_cart(self, lesson_id: str) -> bool:
        return self.cart.add_to_cart(lesson_id)

    def remove_from_cart(self, lesson_id: str) -> int:
        return self.cart.remove_from_cart(lesson_id)

    def on_search_input(self, text: str) -> None:
        self.search.on_query_changed(text)

    async def checkout(self, name: str, phone: str) -> OrderReceipt:
        """
        Submit the cart. The catalog is refetched once the order exists,
        so an active search is re-run against the fresh records.
        """
        try:
            receipt = await self.orders.submit(name, phone)
        except CapacityUpdateError:
            self.search.resubmit()
            raise

        self.search.resubmit()
        return receipt
