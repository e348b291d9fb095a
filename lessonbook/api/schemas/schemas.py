from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from lessonbook.domain.models import Lesson


NAME_PATTERN = r"^[A-Za-z ]+$"
PHONE_PATTERN = r"^[0-9]{10,15}$"


class LessonSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    subject: str
    location: str
    price: float = Field(ge=0)
    spaces: int = Field(ge=0)
    description: str = ""
    image: str | None = None

    def to_domain(self) -> Lesson:
        return Lesson(
            id=self.id,
            subject=self.subject,
            location=self.location,
            price=self.price,
            spaces=self.spaces,
            description=self.description,
            image=self.image,
        )

    @classmethod
    def from_domain(cls, lesson: Lesson) -> "LessonSchema":
        return cls(
            id=lesson.id,
            subject=lesson.subject,
            location=lesson.location,
            price=lesson.price,
            spaces=lesson.spaces,
            description=lesson.description,
            image=lesson.image,
        )


class CheckoutDetails(BaseModel):
    name: str = Field(pattern=NAME_PATTERN)
    phone: str = Field(pattern=PHONE_PATTERN)

    @field_validator("name")
    @classmethod
    def name_has_two_letters(cls, value: str) -> str:
        if len(value.replace(" ", "")) < 2:
            raise ValueError("Name must contain at least 2 letters")
        return value


class OrderRequest(CheckoutDetails):
    model_config = ConfigDict(populate_by_name=True)

    lesson_ids: list[str] = Field(alias="lessonIds", min_length=1)
    spaces: dict[str, int]


class OrderConfirmation(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    order_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("orderId", "insertedId", "id", "_id"),
        serialization_alias="orderId",
    )
    message: str | None = None


class SpacesUpdateRequest(BaseModel):
    spaces: int = Field(ge=0)
