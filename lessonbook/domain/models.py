"""Domain models held in memory by the booking engine.

Lessons are mutable: cart operations adjust ``spaces`` in place so every
view that projects over the shared repository sees the same value.
Wire schemas live in lessonbook/api/schemas/schemas.py.
"""

from dataclasses import dataclass
from enum import Enum


class SortKey(str, Enum):
    SUBJECT = "subject"
    LOCATION = "location"
    PRICE = "price"
    SPACES = "spaces"


@dataclass
class Lesson:
    """A bookable lesson with a finite number of spaces."""

    id: str
    subject: str
    location: str
    price: float
    spaces: int
    description: str = ""
    image: str | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("Lesson price cannot be negative")
        if self.spaces < 0:
            raise ValueError("Lesson spaces cannot be negative")


@dataclass
class CartLine:
    """One lesson held in the cart."""

    lesson_id: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("Cart line quantity must be at least 1")


@dataclass(frozen=True)
class OrderReceipt:
    """Outcome of a fully successful order submission."""

    order_id: str | None
    lesson_ids: tuple[str, ...]
    quantities: dict[str, int]
