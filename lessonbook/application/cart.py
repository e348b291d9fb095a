import logging

from lessonbook.application.catalog import LessonCatalog
from lessonbook.application.notices import NoticeBoard, NoticeLevel
from lessonbook.domain.exceptions import CapacityExhaustedError, LessonNotFoundError
from lessonbook.domain.models import CartLine


logger = logging.getLogger(__name__)


class CartLedger:
    """
    The user's pending lesson selection.

    The ledger is the only writer of lesson capacity: adding takes one
    space from the shared repository, removing gives the whole line back.
    """

    def __init__(self, catalog: LessonCatalog, notices: NoticeBoard):
        self._catalog = catalog
        self._notices = notices
        self._lines: dict[str, CartLine] = {}

    def add_to_cart(self, lesson_id: str) -> bool:
        """
        Take one space for the lesson.
        Returns False, with a blocking notice, when the lesson is full.
        Raises LessonNotFoundError for ids the catalog never held.
        """
        lesson = self._catalog.find(lesson_id)

        try:
            self._catalog.reserve(lesson_id)
        except CapacityExhaustedError:
            self._notices.publish(
                NoticeLevel.BLOCKING,
                f"Sorry, there are no spaces left for {lesson.subject}.",
            )
            return False

        line = self._lines.get(lesson_id)
        if line is None:
            self._lines[lesson_id] = CartLine(lesson_id=lesson_id)
        else:
            line.quantity += 1

        logger.debug("Added lesson %s, %s spaces left", lesson_id, lesson.spaces)
        return True

    def remove_from_cart(self, lesson_id: str) -> int:
        """Drop the whole line and return its quantity. Unknown ids are a no-op."""
        line = self._lines.pop(lesson_id, None)

        if line is None:
            return 0

        try:
            self._catalog.release(lesson_id, line.quantity)
        except LessonNotFoundError:
            logger.warning(
                "Removed lesson %s is no longer in the catalog; %s spaces not restored",
                lesson_id,
                line.quantity,
            )

        return line.quantity

    def clear(self) -> None:
        """Forget every line without restoring capacity."""
        self._lines.clear()

    def settle(self, submitted: dict[str, int]) -> None:
        """
        Take ordered quantities off the ledger without restoring capacity.
        Anything added after the order was built stays in the cart.
        """
        for lesson_id, quantity in submitted.items():
            line = self._lines.get(lesson_id)
            if line is None:
                continue
            if line.quantity <= quantity:
                del self._lines[lesson_id]
            else:
                line.quantity -= quantity

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def quantity(self, lesson_id: str) -> int:
        line = self._lines.get(lesson_id)
        return line.quantity if line else 0

    def quantities(self) -> dict[str, int]:
        return {line.lesson_id: line.quantity for line in self._lines.values()}

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def total_price(self) -> float:
        total = 0.0
        for line in self._lines.values():
            lesson = self._catalog.repository.get_by_id(line.lesson_id)
            if lesson is not None:
                total += lesson.price * line.quantity
        return total
