

class LessonBookError(Exception):
    """
    Base exception for all domain-level errors
    inside the LessonBook engine.
    """


class InvalidStateTransitionError(LessonBookError):
    """
    Raised when an illegal search or order state transition is attempted.
    """

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        super().__init__(message)


class LessonNotFoundError(LessonBookError):
    """Raised when a lesson id is not held by the repository."""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson not found: {lesson_id}")


class CapacityExhaustedError(LessonBookError):
    """Raised when a lesson has no spaces left to take."""

    def __init__(self, lesson_id: str, available: int, requested: int = 1):
        self.lesson_id = lesson_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Lesson {lesson_id} has {available} spaces, {requested} requested"
        )


class FetchFailureError(LessonBookError):
    """Raised when the lesson catalog cannot be loaded."""


class SearchFailureError(LessonBookError):
    """Raised when a search request fails."""

    def __init__(self, query: str, reason: str):
        self.query = query
        super().__init__(f"Search for {query!r} failed: {reason}")


class EmptyCartError(LessonBookError):
    """Raised when checkout is attempted with nothing in the cart."""


class InvalidCheckoutError(LessonBookError):
    """Raised when checkout details fail validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid checkout details ({details})")


class OrderCreateError(LessonBookError):
    """Raised when the backend does not accept the order."""


class LessonUpdateError(LessonBookError):
    """Raised when a single capacity update is rejected."""

    def __init__(self, lesson_id: str, reason: str):
        self.lesson_id = lesson_id
        super().__init__(f"Capacity update for lesson {lesson_id} failed: {reason}")


class CapacityUpdateError(LessonBookError):
    """
    Raised after an order was created but one or more capacity
    updates failed. Updates that succeeded are not rolled back.
    """

    def __init__(
        self,
        order_id: str | None,
        updated_ids: list[str],
        failed_ids: list[str],
    ):
        self.order_id = order_id
        self.updated_ids = updated_ids
        self.failed_ids = failed_ids
        super().__init__(
            f"Order {order_id} created but capacity updates failed for: "
            f"{', '.join(failed_ids)}"
        )
