import asyncio
import logging
from typing import Protocol

from pydantic import ValidationError

from lessonbook.api.schemas.schemas import CheckoutDetails, OrderConfirmation, OrderRequest
from lessonbook.application.cart import CartLedger
from lessonbook.application.catalog import LessonCatalog
from lessonbook.application.notices import NoticeBoard, NoticeLevel
from lessonbook.domain.exceptions import (
    CapacityUpdateError,
    EmptyCartError,
    FetchFailureError,
    InvalidCheckoutError,
    LessonUpdateError,
    OrderCreateError,
)
from lessonbook.domain.models import OrderReceipt
from lessonbook.domain.state_machine import OrderStateMachine, OrderStatus


logger = logging.getLogger(__name__)


class OrderGateway(Protocol):
    async def create_order(self, order: OrderRequest) -> OrderConfirmation: ...

    async def update_lesson_spaces(self, lesson_id: str, spaces: int) -> None: ...


def validate_checkout(name: str, phone: str) -> CheckoutDetails:
    try:
        return CheckoutDetails(name=name, phone=phone)
    except ValidationError as exc:
        errors = {
            ".".join(str(part) for part in error["loc"]): error["msg"]
            for error in exc.errors()
        }
        raise InvalidCheckoutError(errors) from exc


class OrderSubmissionPipeline:
    """
    Creates the order, then pushes the new capacity of every booked lesson.

    The capacity pushed is the lesson's current local value, which already
    has the ordered quantity taken off. Lines added while the order is in
    flight stay in the cart and are not counted against the pushed value.
    Capacity updates that succeed are never compensated when a sibling
    update fails.
    """

    def __init__(
        self,
        catalog: LessonCatalog,
        cart: CartLedger,
        gateway: OrderGateway,
        notices: NoticeBoard,
    ):
        self._catalog = catalog
        self._cart = cart
        self._gateway = gateway
        self._notices = notices
        self.status = OrderStatus.IDLE

    async def submit(self, name: str, phone: str) -> OrderReceipt:
        details = validate_checkout(name, phone)

        if self._cart.is_empty:
            raise EmptyCartError("Cannot submit an order with an empty cart")

        self._transition(OrderStatus.SUBMITTING)

        quantities = self._cart.quantities()
        order = OrderRequest(
            name=details.name,
            phone=details.phone,
            lesson_ids=list(quantities),
            spaces=quantities,
        )

        try:
            confirmation = await self._gateway.create_order(order)
        except OrderCreateError:
            self._transition(OrderStatus.FAILED)
            self._notices.publish(
                NoticeLevel.ERROR,
                "Your order could not be placed. Please try again.",
            )
            raise

        outcomes = await asyncio.gather(
            *(
                self._push_capacity(lesson_id, quantity)
                for lesson_id, quantity in quantities.items()
            )
        )
        updated_ids = [lesson_id for lesson_id, ok in outcomes if ok]
        failed_ids = [lesson_id for lesson_id, ok in outcomes if not ok]

        # The order exists server-side from here on, whatever the updates did.
        self._cart.settle(quantities)
        await self._refresh_catalog()

        if failed_ids:
            self._transition(OrderStatus.FAILED)
            self._notices.publish(
                NoticeLevel.ERROR,
                "Your order was placed but some lesson spaces could not be updated.",
            )
            raise CapacityUpdateError(
                order_id=confirmation.order_id,
                updated_ids=updated_ids,
                failed_ids=failed_ids,
            )

        self._transition(OrderStatus.SUCCEEDED)
        self._notices.publish(
            NoticeLevel.SUCCESS,
            f"Thank you {details.name}, your order has been placed.",
        )
        return OrderReceipt(
            order_id=confirmation.order_id,
            lesson_ids=tuple(quantities),
            quantities=quantities,
        )

    async def _push_capacity(self, lesson_id: str, ordered: int) -> tuple[str, bool]:
        lesson = self._catalog.repository.get_by_id(lesson_id)
        if lesson is None:
            logger.warning("Lesson %s vanished before its capacity update", lesson_id)
            return lesson_id, False

        # Spaces added to the cart after the order was built are not sold yet.
        unordered = max(self._cart.quantity(lesson_id) - ordered, 0)

        try:
            await self._gateway.update_lesson_spaces(lesson_id, lesson.spaces + unordered)
        except LessonUpdateError as exc:
            logger.warning("%s", exc)
            return lesson_id, False

        return lesson_id, True

    async def _refresh_catalog(self) -> None:
        try:
            await self._catalog.load(held=self._cart.quantities())
        except FetchFailureError:
            logger.exception("Catalog refresh after order submission failed")
            self._notices.publish(
                NoticeLevel.ERROR,
                "Lessons could not be refreshed. Please reload.",
            )

    def _transition(self, to_status: OrderStatus) -> None:
        OrderStateMachine.validate_transition(self.status, to_status)
        self.status = to_status
