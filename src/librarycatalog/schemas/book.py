"""
Pydantic schemas for the Book entity.
Defines the editable form model bound from submitted form data, the structural
binding errors produced while binding it, and a few read-side projections.
"""

from typing import Any, List, Mapping, Optional, Tuple

from pydantic import (BaseModel, ConfigDict, Field, ValidationError,
                      ValidationInfo, field_validator)
from pydantic_core import PydanticCustomError

from librarycatalog.core.locale import Locale
from librarycatalog.core.messages import Message, get_message

# Error types raised by our own validators; their messages are already user-facing.
PAGE_COUNT_MIN = "page_count_min"
BOOK_NAME_EMPTY = "book_name_empty"
BINDING_MESSAGE_TYPES = {PAGE_COUNT_MIN, BOOK_NAME_EMPTY}


def _context_locale(info: ValidationInfo) -> Locale:
    context = info.context or {}
    return context.get("locale", Locale.EN)


class BookEditModel(BaseModel):
    """
    Book as submitted from the edit form (or prepared for it).

    Attributes:
        id (Optional[int]): None for a book that has not been stored yet.
        name (str): Title, must not be empty.
        page_count (Optional[int]): Must be at least 1 once bound.
        isbn (Optional[str]): Raw ISBN as typed, hyphens included.
        genre_id, author_id, publisher_id (Optional[int]): Reference ids chosen in the form.
        publish_year (Optional[int]): Blank input binds to None.
        description (Optional[str]): Free text.
        image (Optional[bytes]): Cover currently attached to the model.
        content (Optional[bytes]): PDF currently attached to the model.
        genre_name, author_name, publisher_name (Optional[str]): Localized names for display only.
        avg_rating, total_vote_count, total_rating, view_count (int): Read-only statistics for display.
    """
    id: Optional[int] = None
    name: str = ""
    page_count: Optional[int] = None
    isbn: Optional[str] = None
    genre_id: Optional[int] = None
    author_id: Optional[int] = None
    publisher_id: Optional[int] = None
    publish_year: Optional[int] = None
    description: Optional[str] = None

    image: Optional[bytes] = Field(default=None, repr=False)
    content: Optional[bytes] = Field(default=None, repr=False)

    genre_name: Optional[str] = None
    author_name: Optional[str] = None
    publisher_name: Optional[str] = None
    avg_rating: int = 0
    total_vote_count: int = 0
    total_rating: int = 0
    view_count: int = 0

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("id", "genre_id", "author_id", "publisher_id", "publish_year", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise PydanticCustomError(BOOK_NAME_EMPTY, get_message(Message.FILL_IN_NAME, _context_locale(info)))
        return value

    @field_validator("page_count")
    @classmethod
    def at_least_one_page(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is not None and value < 1:
            raise PydanticCustomError(PAGE_COUNT_MIN, get_message(Message.AT_LEAST_ONE_PAGE, _context_locale(info)))
        return value

    @property
    def is_new(self) -> bool:
        return self.id is None

    @classmethod
    def from_book(cls, book, locale: Locale) -> "BookEditModel":
        """Builds an editable model from a stored book, with localized reference names."""
        return cls.model_construct(
            id=book.id,
            name=book.name,
            page_count=book.page_count,
            isbn=book.isbn,
            genre_id=book.genre_id,
            author_id=book.author_id,
            publisher_id=book.publisher_id,
            publish_year=book.publish_year or None,
            description=book.description,
            image=book.image,
            content=None,
            genre_name=book.genre.localized_name(locale) if book.genre else None,
            author_name=book.author.localized_fio(locale) if book.author else None,
            publisher_name=book.publisher.localized_name(locale) if book.publisher else None,
            avg_rating=book.avg_rating or 0,
            total_vote_count=book.total_vote_count or 0,
            total_rating=book.total_rating or 0,
            view_count=book.view_count or 0,
        )


class BindingError(BaseModel):
    """A structural error found while binding raw form data to `BookEditModel`."""
    field: Optional[str] = None
    type: str
    message: str

    @classmethod
    def from_pydantic(cls, error: Mapping[str, Any]) -> "BindingError":
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else None
        message = error["msg"]
        if error["type"] not in BINDING_MESSAGE_TYPES and field:
            message = f"{field}: {message}"
        return cls(field=field, type=error["type"], message=message)


def bind_book_form(form_data: Mapping[str, Any],
                   locale: Locale = Locale.EN) -> Tuple[BookEditModel, List[BindingError]]:
    """
    Binds raw form data (usually strings) to a `BookEditModel`.

    Fields that fail to bind are reported as `BindingError`s and left out of the
    returned model, so the model can always be echoed back to the form.

    Args:
        form_data (Mapping[str, Any]): Submitted form fields.
        locale (Locale): Language of the messages raised by our own validators.

    Returns:
        Tuple[BookEditModel, List[BindingError]]: The bound model and the binding errors.
    """
    data = dict(form_data)
    context = {"locale": locale}
    errors: List[BindingError] = []
    try:
        model = BookEditModel.model_validate(data, context=context)
    except ValidationError as exc:
        failed = set()
        for error in exc.errors():
            binding_error = BindingError.from_pydantic(error)
            errors.append(binding_error)
            failed.add(binding_error.field)
        cleaned = {key: value for key, value in data.items() if key not in failed}
        model = BookEditModel.model_validate(cleaned, context=context)
    return model, errors


class RatingCreate(BaseModel):
    """
    Score given to a book by a reader.

    Attributes:
        score (int): Between 1 and 5.
    """
    score: int = Field(..., ge=1, le=5)


class BookCover(BaseModel):
    """Lightweight projection used by the "popular books" strip: id and cover only."""
    id: int
    image: Optional[bytes] = Field(default=None, repr=False)

    model_config = ConfigDict(from_attributes=True)
