# tests/schemas/test_book_schema.py
from librarycatalog.core.locale import Locale
from librarycatalog.schemas.book import (BOOK_NAME_EMPTY, PAGE_COUNT_MIN, BookEditModel,
                                         bind_book_form)

def test_bind_valid_form():
    model, errors = bind_book_form({
        "id": "12",
        "name": "  Dead Souls ",
        "page_count": "352",
        "isbn": "978-5-17-090468-1",
        "publish_year": "1842",
        "author_id": "3",
        "genre_id": "",
    })

    assert errors == []
    assert model.id == 12
    assert model.name == "Dead Souls"
    assert model.page_count == 352
    assert model.publish_year == 1842
    assert model.author_id == 3
    assert model.genre_id is None
    assert model.is_new is False

def test_bind_reports_parse_errors_and_drops_fields():
    model, errors = bind_book_form({"name": "Book", "page_count": "ten", "publish_year": "MMXX"})

    assert [(e.field, e.type) for e in errors] == [("page_count", "int_parsing"), ("publish_year", "int_parsing")]
    assert model.name == "Book"
    assert model.page_count is None
    assert model.publish_year is None

def test_bind_page_count_minimum():
    model, errors = bind_book_form({"name": "Book", "page_count": "0"})

    assert len(errors) == 1
    assert errors[0].type == PAGE_COUNT_MIN
    assert errors[0].message == "The book must have at least one page"

def test_bind_messages_in_russian():
    _, errors = bind_book_form({"name": "", "page_count": "-3"}, Locale.RU)

    assert {e.type: e.message for e in errors} == {
        BOOK_NAME_EMPTY: "Заполните название книги",
        PAGE_COUNT_MIN: "В книге должна быть хотя бы одна страница!",
    }

def test_bind_ignores_unknown_fields():
    model, errors = bind_book_form({"name": "Book", "page_count": "1", "csrf_token": "x"})

    assert errors == []
    assert not hasattr(model, "csrf_token")

def test_new_model_is_new():
    assert BookEditModel().is_new
