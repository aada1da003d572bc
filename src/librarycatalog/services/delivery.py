"""
Delivery of a book's binary fields (cover image and PDF content) as raw bytes.

A missing binary field gives an empty body, not an error. Every successful
content delivery counts as one view: the count read at the start of the request
plus one is written back. Concurrent reads of the same book may lose increments.
"""

import logging
from dataclasses import dataclass

from librarycatalog.services.book_service import BookService

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"

IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@dataclass(frozen=True)
class BinaryResponse:
    content_type: str
    body: bytes = b""

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def is_empty(self) -> bool:
        return not self.body


def image_content_type(data: bytes) -> str:
    for signature, content_type in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return content_type
    return DEFAULT_IMAGE_CONTENT_TYPE


def serve_image(service: BookService, book_id: int) -> BinaryResponse:
    """
    Returns the cover of a book.

    Raises:
        BookNotFoundError: If the book does not exist.
    """
    image = service.get(book_id).image
    if not image:
        return BinaryResponse(content_type=DEFAULT_IMAGE_CONTENT_TYPE)
    return BinaryResponse(content_type=image_content_type(image), body=image)


def serve_content(service: BookService, book_id: int) -> BinaryResponse:
    """
    Returns the PDF content of a book and counts the view.

    Raises:
        BookNotFoundError: If the book does not exist.
    """
    book = service.get(book_id)
    view_count = book.view_count or 0
    content = book.content
    if not content:
        return BinaryResponse(content_type=PDF_CONTENT_TYPE)

    response = BinaryResponse(content_type=PDF_CONTENT_TYPE, body=content)
    service.update_view_count(book_id, view_count + 1)
    logger.debug(f"Content of book {book_id} delivered ({response.content_length} bytes).")
    return response
