import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from lessonbook.api.schemas.schemas import (
    LessonSchema,
    OrderConfirmation,
    OrderRequest,
    SpacesUpdateRequest,
)
from lessonbook.api.store import LessonStore
from lessonbook.domain.exceptions import LessonNotFoundError


router = APIRouter()
logger = logging.getLogger(__name__)


def get_store(request: Request) -> LessonStore:
    return request.app.state.store


@router.get("/lessons", response_model=list[LessonSchema])
def list_lessons(store: LessonStore = Depends(get_store)):
    return [LessonSchema.from_domain(lesson) for lesson in store.list_lessons()]


@router.get("/search", response_model=list[LessonSchema])
def search_lessons(q: str = "", store: LessonStore = Depends(get_store)):
    return [LessonSchema.from_domain(lesson) for lesson in store.search(q)]


@router.post(
    "/order",
    response_model=OrderConfirmation,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_order(order: OrderRequest, store: LessonStore = Depends(get_store)):
    try:
        order_id = store.create_order(order.model_dump(by_alias=True))
    except LessonNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    logger.info("Order %s stored for %s", order_id, order.name)
    return OrderConfirmation(order_id=order_id, message="Order created")


@router.put("/lessons/{lesson_id}", response_model=LessonSchema)
def update_lesson(
    lesson_id: str,
    request: SpacesUpdateRequest,
    store: LessonStore = Depends(get_store),
):
    try:
        lesson = store.set_spaces(lesson_id, request.spaces)
    except LessonNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        ) from exc

    return LessonSchema.from_domain(lesson)
