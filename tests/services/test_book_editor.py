# tests/services/test_book_editor.py
import datetime
import os

import pytest

from librarycatalog.core.locale import Locale
from librarycatalog.core.messages import Message, get_message
from librarycatalog.models.book import Book
from librarycatalog.schemas.book import BookEditModel, bind_book_form
from librarycatalog.services.book_editor import BookEditor, load_default_cover

THIS_YEAR = datetime.date.today().year

UPLOAD_COVER = get_message(Message.UPLOAD_COVER, Locale.EN)
FILL_IN_ISBN = get_message(Message.FILL_IN_ISBN, Locale.EN)
ISBN_DIGITS = get_message(Message.ISBN_DIGITS_AND_HYPHENS, Locale.EN)
ISBN_HYPHENS = get_message(Message.ISBN_TOO_MANY_HYPHENS, Locale.EN)
ISBN_LENGTH = get_message(Message.ISBN_LENGTH, Locale.EN)
ISBN_DUPLICATE = get_message(Message.ISBN_DUPLICATE, Locale.EN)
CHECK_YEAR = get_message(Message.CHECK_PUBLISH_YEAR, Locale.EN)
ISBN_MESSAGES = {FILL_IN_ISBN, ISBN_DIGITS, ISBN_HYPHENS, ISBN_LENGTH, ISBN_DUPLICATE}

# --- Helper Fixtures ---
@pytest.fixture
def editor(db_session):
    return BookEditor(db_session, Locale.EN)

@pytest.fixture
def form(tolstoy, novel_genre, publisher):
    """A complete, valid form submission as posted by a browser (strings only)."""
    return {
        "name": "War and Peace",
        "page_count": "1225",
        "isbn": "978-3-16-148410-0",
        "publish_year": "1869",
        "genre_id": str(novel_genre.id),
        "author_id": str(tolstoy.id),
        "publisher_id": str(publisher.id),
        "description": "Epic novel",
    }
# --------------------------------------------------------------------------------

def test_new_book_scenario(db_session, editor, cover_bytes):
    """New book with a 250 byte cover and no content is saved with zero views."""
    result = editor.submit_form(
        {"name": "Sample", "isbn": "978-3-16-148410-0", "page_count": "10", "publish_year": "2020"},
        uploaded_image=cover_bytes,
    )

    assert result.saved
    assert result.errors == []
    assert result.show_edit_form is False
    book = db_session.get(Book, result.book.id)
    assert book.view_count == 0
    assert book.image == cover_bytes
    assert book.content is None

def test_save_then_read_back(db_session, editor, form, cover_bytes, tolstoy, novel_genre, publisher):
    result = editor.submit_form(form, uploaded_image=cover_bytes)
    assert result.saved

    db_session.expire_all()
    stored = db_session.get(Book, result.book.id)
    assert stored.name == "War and Peace"
    assert stored.isbn == "978-3-16-148410-0"
    assert stored.page_count == 1225
    assert stored.publish_year == 1869
    assert stored.description == "Epic novel"
    assert stored.author_id == tolstoy.id
    assert stored.genre_id == novel_genre.id
    assert stored.publisher_id == publisher.id

def test_new_book_without_cover_gets_default(db_session, editor, form):
    result = editor.submit_form(form)

    assert result.saved
    assert result.book.image == load_default_cover()
    assert len(result.book.image) >= 200

def test_default_cover_read_failure_becomes_validation_error(db_session, form, tmp_path):
    editor = BookEditor(db_session, Locale.EN, default_cover_path=str(tmp_path / "missing.jpg"))

    result = editor.submit_form(form)

    assert not result.saved
    assert result.errors == [UPLOAD_COVER]

def test_small_cover_on_new_book_is_rejected(db_session, editor, form):
    result = editor.submit_form(form, uploaded_image=os.urandom(199))

    assert UPLOAD_COVER in result.errors
    assert db_session.query(Book).count() == 0

def test_small_content_is_ignored(editor, form, cover_bytes):
    result = editor.submit_form(form, uploaded_image=cover_bytes, uploaded_content=b"%PDF" * 10)

    assert result.saved
    assert result.book.content is None

def test_edit_keeps_existing_content(db_session, editor, make_book, pdf_bytes):
    book = make_book(content=pdf_bytes)
    model = BookEditModel.from_book(book, Locale.EN)
    model.name = "Renamed"

    result = editor.process(model)

    assert result.saved
    db_session.expire_all()
    stored = db_session.get(Book, book.id)
    assert stored.name == "Renamed"
    assert stored.content == pdf_bytes

def test_edit_replaces_content_with_upload(db_session, editor, make_book, pdf_bytes):
    book = make_book(content=pdf_bytes)
    new_pdf = b"%PDF-1.7\n" + b"1" * 400

    result = editor.process(BookEditModel.from_book(book, Locale.EN), uploaded_content=new_pdf)

    assert result.saved
    assert result.book.content == new_pdf

def test_edit_without_image_is_rejected(editor, make_book):
    book = make_book()
    model = BookEditModel.from_book(book, Locale.EN)
    model.image = None

    result = editor.process(model)

    assert result.errors == [UPLOAD_COVER]

def test_edit_page_count_zero_leaves_record_unchanged(db_session, editor, make_book):
    book = make_book(page_count=320)
    form = {"id": str(book.id), "name": book.name, "isbn": book.isbn, "page_count": "0"}

    model, binding_errors = bind_book_form(form, Locale.EN)
    model.image = book.image
    result = editor.process(model, binding_errors)

    assert not result.saved
    assert get_message(Message.AT_LEAST_ONE_PAGE, Locale.EN) in result.errors
    db_session.expire_all()
    assert db_session.get(Book, book.id).page_count == 320

def test_unparseable_numbers_become_prompts(editor, form, cover_bytes):
    form.update(page_count="many", publish_year="long ago")

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert result.errors == ["Enter the page count", "Enter the publish year"]

def test_blank_page_count_prompts(editor, form, cover_bytes):
    form["page_count"] = ""

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert result.errors == ["Enter the page count"]

def test_missing_page_count_prompts(editor, cover_bytes):
    result = editor.process(BookEditModel(name="No pages", isbn="0306406152"), uploaded_image=cover_bytes)

    assert result.errors == ["Enter the page count"]

def test_other_binding_errors_pass_through(editor, form, cover_bytes):
    form["author_id"] = "tolstoy"

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert len(result.errors) == 1
    assert result.errors[0].startswith("author_id: ")

def test_blank_publish_year_is_optional(db_session, editor, form, cover_bytes):
    form["publish_year"] = ""

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert result.saved
    assert result.book.publish_year == 0

@pytest.mark.parametrize("isbn, expected", [
    ("", FILL_IN_ISBN),
    ("978-3-16-14841O-0", ISBN_DIGITS),
    ("978 3 16 148410 0", ISBN_DIGITS),
    ("97-8-3-16-148410-0", ISBN_HYPHENS),
    ("030640615", ISBN_LENGTH),
    ("97831614841001", ISBN_LENGTH),
])
def test_isbn_format_errors(editor, form, cover_bytes, isbn, expected):
    form["isbn"] = isbn

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert not result.saved
    # Exactly one ISBN message per submission
    assert [e for e in result.errors if e in ISBN_MESSAGES] == [expected]

@pytest.mark.parametrize("isbn", ["0306406152", "0-306-40615-2", "978-3-16-148410-0", "9783161484100"])
def test_valid_isbn_formats(editor, form, cover_bytes, isbn):
    form["isbn"] = isbn
    assert editor.submit_form(form, uploaded_image=cover_bytes).saved

def test_duplicate_isbn_ignores_hyphens(editor, form, make_book, cover_bytes):
    make_book(isbn="9783161484100")

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert result.errors == [ISBN_DUPLICATE]

def test_edit_keeps_own_isbn(editor, make_book):
    book = make_book(isbn="978-3-16-148410-0")
    model = BookEditModel.from_book(book, Locale.EN)
    model.isbn = "9783161484100"

    assert editor.process(model).saved

def test_edit_to_other_books_isbn_is_rejected(editor, make_book):
    make_book(isbn="0306406152")
    book = make_book(isbn="978-3-16-148410-0")
    model = BookEditModel.from_book(book, Locale.EN)
    model.isbn = "0-306-40615-2"

    assert editor.process(model).errors == [ISBN_DUPLICATE]

@pytest.mark.parametrize("year, valid", [
    (399, False),
    (400, True),
    (1869, True),
    (THIS_YEAR, True),
    (THIS_YEAR + 1, False),
])
def test_publish_year_bounds(editor, form, cover_bytes, year, valid):
    form["publish_year"] = str(year)

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert (CHECK_YEAR not in result.errors) is valid
    assert result.saved is valid

def test_publish_year_uses_given_date(db_session, form, cover_bytes):
    editor = BookEditor(db_session, Locale.EN, today=datetime.date(1850, 1, 1))

    result = editor.submit_form(form, uploaded_image=cover_bytes)

    assert result.errors == [CHECK_YEAR]

def test_failure_prepares_edit_form(editor, form, tolstoy, dostoevsky, publisher):
    form["isbn"] = ""

    result = editor.submit_form(form)

    assert result.book is None
    assert result.show_edit_form is True
    assert result.editable_book.name == "War and Peace"
    assert result.editable_book.image is not None
    assert {a.id for a in result.all_authors} == {tolstoy.id, dostoevsky.id}
    assert [p.id for p in result.all_publishers] == [publisher.id]

def test_errors_are_reported_in_order(editor):
    result = editor.submit_form({"name": "Bad", "page_count": "x", "isbn": "abc", "publish_year": "100"},
                                uploaded_image=b"tiny")

    assert result.errors == [
        "Enter the page count",
        UPLOAD_COVER,
        ISBN_DIGITS,
        CHECK_YEAR,
    ]

def test_messages_follow_locale(db_session):
    editor = BookEditor(db_session, Locale.RU)

    result = editor.submit_form({"name": "Книга", "page_count": "0", "isbn": ""}, uploaded_image=b"")

    assert result.errors == [
        "В книге должна быть хотя бы одна страница!",
        "Загрузите обложку книги (jpg, png или gif не менее 200 байт)",
        "Заполните ISBN",
    ]

def test_new_and_edit_forms(editor, make_book, tolstoy, publisher):
    new_form = editor.new_book_form()
    assert new_form.show_edit_form is True
    assert new_form.editable_book.is_new
    assert new_form.errors == []
    assert [a.id for a in new_form.all_authors] == [tolstoy.id]

    book = make_book(name="Resurrection", author=tolstoy, publisher=publisher)
    edit_form = editor.edit_book_form(book.id)
    assert edit_form.editable_book.id == book.id
    assert edit_form.editable_book.author_name == "Leo Tolstoy"
    assert edit_form.editable_book.publisher_name == "Eksmo"
