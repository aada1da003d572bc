class BookNotFoundError(LookupError):
    """Raised when a book id does not match any stored book."""

    def __init__(self, book_id: int):
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id
