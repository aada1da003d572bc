"""
User-facing messages of the book editing workflow, in Russian and English.
"""

from enum import Enum

from librarycatalog.core.locale import Locale


class Message(str, Enum):
    ENTER_PAGE_COUNT = "enter_page_count"
    ENTER_PUBLISH_YEAR = "enter_publish_year"
    AT_LEAST_ONE_PAGE = "at_least_one_page"
    FILL_IN_NAME = "fill_in_name"
    UPLOAD_COVER = "upload_cover"
    FILL_IN_ISBN = "fill_in_isbn"
    ISBN_DIGITS_AND_HYPHENS = "isbn_digits_and_hyphens"
    ISBN_TOO_MANY_HYPHENS = "isbn_too_many_hyphens"
    ISBN_LENGTH = "isbn_length"
    ISBN_DUPLICATE = "isbn_duplicate"
    CHECK_PUBLISH_YEAR = "check_publish_year"


CATALOGUES = {
    Locale.EN: {
        Message.ENTER_PAGE_COUNT: "Enter the page count",
        Message.ENTER_PUBLISH_YEAR: "Enter the publish year",
        Message.AT_LEAST_ONE_PAGE: "The book must have at least one page",
        Message.FILL_IN_NAME: "Fill in the book name",
        Message.UPLOAD_COVER: "Upload a book cover (jpg, png, or gif, at least 200 bytes)",
        Message.FILL_IN_ISBN: "Fill in the ISBN",
        Message.ISBN_DIGITS_AND_HYPHENS: "ISBN must contain only digits and hyphens",
        Message.ISBN_TOO_MANY_HYPHENS: "Too many hyphens in ISBN",
        Message.ISBN_LENGTH: "ISBN must have 10 to 13 digits (hyphens optional)",
        Message.ISBN_DUPLICATE: "A book with this ISBN already exists",
        Message.CHECK_PUBLISH_YEAR: "Check the publish year",
    },
    Locale.RU: {
        Message.ENTER_PAGE_COUNT: "Введите количество страниц",
        Message.ENTER_PUBLISH_YEAR: "Укажите год издания",
        Message.AT_LEAST_ONE_PAGE: "В книге должна быть хотя бы одна страница!",
        Message.FILL_IN_NAME: "Заполните название книги",
        Message.UPLOAD_COVER: "Загрузите обложку книги (jpg, png или gif не менее 200 байт)",
        Message.FILL_IN_ISBN: "Заполните ISBN",
        Message.ISBN_DIGITS_AND_HYPHENS: "ISBN не должен включать ничего кроме цифр и дефисов!",
        Message.ISBN_TOO_MANY_HYPHENS: "Слишком много дефисов в ISBN",
        Message.ISBN_LENGTH: "ISBN должен включать от 10 до 13 цифр (допускается использовать дефисы между ними)",
        Message.ISBN_DUPLICATE: "Книга с таким ISBN уже есть в базе",
        Message.CHECK_PUBLISH_YEAR: "Проверьте год издания",
    },
}


def get_message(message: Message, locale: Locale) -> str:
    return CATALOGUES[locale][message]
