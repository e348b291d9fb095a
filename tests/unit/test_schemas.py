# tests/unit/test_schemas.py

import pytest
from pydantic import ValidationError

from lessonbook.api.schemas.schemas import (
    CheckoutDetails,
    LessonSchema,
    OrderConfirmation,
    OrderRequest,
)


def test_lesson_accepts_document_store_id():
    record = LessonSchema.model_validate(
        {"_id": "65f0", "subject": "Math", "location": "Hendon", "price": 100, "spaces": 5}
    )

    lesson = record.to_domain()

    assert lesson.id == "65f0"
    assert lesson.description == ""
    assert lesson.image is None


def test_lesson_rejects_negative_spaces():
    with pytest.raises(ValidationError):
        LessonSchema.model_validate(
            {"id": "1", "subject": "Math", "location": "Hendon", "price": 100, "spaces": -1}
        )


def test_order_request_serializes_wire_names():
    order = OrderRequest(
        name="Ada Lovelace",
        phone="07123456789",
        lesson_ids=["1", "2"],
        spaces={"1": 2, "2": 1},
    )

    assert order.model_dump(by_alias=True) == {
        "name": "Ada Lovelace",
        "phone": "07123456789",
        "lessonIds": ["1", "2"],
        "spaces": {"1": 2, "2": 1},
    }


def test_checkout_accepts_boundary_values():
    CheckoutDetails(name="Al", phone="0" * 10)
    CheckoutDetails(name="Mary Jane Watson", phone="0" * 15)


def test_order_confirmation_reads_numeric_inserted_id():
    confirmation = OrderConfirmation.model_validate({"insertedId": 42, "acknowledged": True})

    assert confirmation.order_id == "42"


@pytest.mark.parametrize("name", ["  ", "A ", " B  "])
def test_checkout_rejects_names_without_two_letters(name):
    with pytest.raises(ValidationError):
        CheckoutDetails(name=name, phone="07123456789")
