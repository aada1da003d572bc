"""
Book editing workflow: validation of a submitted book and its save.

A submission (bound form model, uploaded cover/PDF, binding errors) goes through
the following steps, in order:

1. Uploaded blobs of at least 200 bytes replace the model's image/content; a new
   book without an uploaded cover gets the placeholder cover.
2. Binding errors become messages; parse failures of the page count and the
   publish year are replaced by friendly prompts.
3. The cover must be present and at least 200 bytes.
4. ISBN: present, digits and hyphens only, at most 4 hyphens, 10 to 13 digits,
   not used by another book (hyphens ignored). Only the first failing rule
   of this list is reported.
5. The publish year, when given, must be between 400 and the current year.
6. Without errors the book is saved; otherwise nothing is written and the result
   carries everything needed to show the edit form again.

Validation failures are never raised: they are returned as a list of messages.
"""

import datetime
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from librarycatalog import crud
from librarycatalog.core.config import settings
from librarycatalog.core.locale import Locale
from librarycatalog.core.messages import Message, get_message
from librarycatalog.models.author import Author
from librarycatalog.models.book import Book
from librarycatalog.models.genre import Genre
from librarycatalog.models.publisher import Publisher
from librarycatalog.schemas.book import BindingError, BookEditModel, bind_book_form
from librarycatalog.services.book_service import BookService

logger = logging.getLogger(__name__)

MIN_BINARY_SIZE = 200
MAX_ISBN_HYPHENS = 4
MIN_ISBN_DIGITS = 10
MAX_ISBN_DIGITS = 13
MIN_PUBLISH_YEAR = 400

NON_DIGIT = re.compile(r"[^0-9]")

# Binding error types that mean "this is not a number" (or nothing was sent).
PARSE_ERROR_TYPES = {"int_parsing", "int_type", "int_from_float", "missing"}
PARSE_ERROR_PROMPTS = {
    "page_count": Message.ENTER_PAGE_COUNT,
    "publish_year": Message.ENTER_PUBLISH_YEAR,
}


@dataclass
class BookEditResult:
    """
    Outcome of a form preparation or a submission.

    On success `book` is the persisted book and `errors` is empty. On failure
    `book` is None and the remaining fields describe the edit form to show again.
    """
    book: Optional[Book] = None
    errors: List[str] = field(default_factory=list)
    editable_book: Optional[BookEditModel] = None
    show_edit_form: bool = False
    all_authors: List[Author] = field(default_factory=list)
    all_publishers: List[Publisher] = field(default_factory=list)
    all_genres: List[Genre] = field(default_factory=list)

    @property
    def saved(self) -> bool:
        return self.book is not None and not self.errors


def load_default_cover(path: Optional[str] = None) -> Optional[bytes]:
    """Reads the placeholder cover. Read failures are logged and give None."""
    cover_path = Path(path or settings.DEFAULT_COVER_PATH)
    try:
        return cover_path.read_bytes()
    except OSError as e:
        logger.exception(f"Could not read the default cover from {cover_path}: {e}")
        return None


def strip_isbn(isbn: str) -> str:
    return isbn.replace("-", "")


class BookEditor:
    def __init__(self, db: Session, locale: Locale,
                 default_cover_path: Optional[str] = None,
                 today: Optional[datetime.date] = None):
        self.db = db
        self.locale = locale
        self.service = BookService(db)
        self.default_cover_path = default_cover_path
        self.today = today

    def _message(self, message: Message) -> str:
        return get_message(message, self.locale)

    def _current_year(self) -> int:
        return (self.today or datetime.date.today()).year

    # --- Form preparation ---

    def new_book_form(self) -> BookEditResult:
        return self._edit_form(BookEditModel())

    def edit_book_form(self, book_id: int) -> BookEditResult:
        """Opens the edit form for a stored book. Raises BookNotFoundError for unknown ids."""
        book = self.service.get(book_id)
        return self._edit_form(BookEditModel.from_book(book, self.locale))

    def _edit_form(self, model: BookEditModel, errors: Optional[List[str]] = None) -> BookEditResult:
        return BookEditResult(
            errors=errors or [],
            editable_book=model,
            show_edit_form=True,
            all_authors=crud.get_authors(self.db, self.locale),
            all_publishers=crud.get_publishers(self.db, self.locale),
            all_genres=crud.get_genres(self.db, self.locale),
        )

    # --- Submission ---

    def submit_form(self, form_data: Mapping[str, Any],
                    uploaded_image: Optional[bytes] = None,
                    uploaded_content: Optional[bytes] = None) -> BookEditResult:
        """Binds raw form data and runs `process` on the result."""
        model, binding_errors = bind_book_form(form_data, self.locale)
        return self.process(model, binding_errors, uploaded_image, uploaded_content)

    def process(self, model: BookEditModel,
                binding_errors: Iterable[BindingError] = (),
                uploaded_image: Optional[bytes] = None,
                uploaded_content: Optional[bytes] = None) -> BookEditResult:
        """
        Validates a submitted book and saves it when it is valid.

        Args:
            model (BookEditModel): The bound submission.
            binding_errors (Iterable[BindingError]): Errors found while binding the form.
            uploaded_image (Optional[bytes]): Uploaded cover, if any.
            uploaded_content (Optional[bytes]): Uploaded PDF, if any.

        Returns:
            BookEditResult: The saved book, or the errors and the form to show again.
        """
        binding_errors = list(binding_errors)
        self._apply_uploads(model, uploaded_image, uploaded_content)

        errors = self._binding_messages(model, binding_errors)
        self._check_image(model, errors)
        self._check_isbn(model, errors)
        self._check_publish_year(model, errors)

        if errors:
            logger.info(f"Book submission rejected (id={model.id}): {len(errors)} error(s).")
            return self._edit_form(model, errors)

        book = self.service.save(self._to_book(model))
        return BookEditResult(book=book)

    def _apply_uploads(self, model: BookEditModel, uploaded_image: Optional[bytes],
                       uploaded_content: Optional[bytes]) -> None:
        if uploaded_image is not None and len(uploaded_image) >= MIN_BINARY_SIZE:
            model.image = uploaded_image
        elif model.is_new and uploaded_image is None:
            model.image = load_default_cover(self.default_cover_path)
        if uploaded_content is not None and len(uploaded_content) >= MIN_BINARY_SIZE:
            model.content = uploaded_content

    def _binding_messages(self, model: BookEditModel, binding_errors: List[BindingError]) -> List[str]:
        messages = []
        for error in binding_errors:
            prompt = PARSE_ERROR_PROMPTS.get(error.field)
            if prompt is not None and error.type in PARSE_ERROR_TYPES:
                messages.append(self._message(prompt))
            else:
                messages.append(error.message)

        failed_fields = {error.field for error in binding_errors}
        if not model.name and "name" not in failed_fields:
            messages.append(self._message(Message.FILL_IN_NAME))
        if model.page_count is None and "page_count" not in failed_fields:
            messages.append(self._message(Message.ENTER_PAGE_COUNT))
        return messages

    def _check_image(self, model: BookEditModel, errors: List[str]) -> None:
        if model.image is None or len(model.image) < MIN_BINARY_SIZE:
            errors.append(self._message(Message.UPLOAD_COVER))

    def _check_isbn(self, model: BookEditModel, errors: List[str]) -> None:
        isbn = model.isbn
        if not isbn:
            errors.append(self._message(Message.FILL_IN_ISBN))
            return

        digits = strip_isbn(isbn)
        if NON_DIGIT.search(digits):
            errors.append(self._message(Message.ISBN_DIGITS_AND_HYPHENS))
        elif len(isbn) - len(digits) > MAX_ISBN_HYPHENS:
            errors.append(self._message(Message.ISBN_TOO_MANY_HYPHENS))
        elif not MIN_ISBN_DIGITS <= len(digits) <= MAX_ISBN_DIGITS:
            errors.append(self._message(Message.ISBN_LENGTH))
        elif any(strip_isbn(existing) == digits for existing in self.service.get_all_isbn(model.id)):
            errors.append(self._message(Message.ISBN_DUPLICATE))

    def _check_publish_year(self, model: BookEditModel, errors: List[str]) -> None:
        year = model.publish_year
        if year is not None and (year < MIN_PUBLISH_YEAR or year > self._current_year()):
            errors.append(self._message(Message.CHECK_PUBLISH_YEAR))

    def _to_book(self, model: BookEditModel) -> Book:
        book = Book() if model.is_new else self.service.get(model.id)
        book.name = model.name
        book.page_count = model.page_count
        book.isbn = model.isbn
        book.publish_year = model.publish_year or 0
        book.description = model.description
        book.genre = crud.get_genre(self.db, model.genre_id) if model.genre_id is not None else None
        book.author = crud.get_author(self.db, model.author_id) if model.author_id is not None else None
        book.publisher = (crud.get_publisher(self.db, model.publisher_id)
                          if model.publisher_id is not None else None)
        book.image = model.image
        if model.content is not None:
            book.content = model.content
        return book
