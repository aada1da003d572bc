# streamlit_app/app.py

import logging
import os
import sys

import pandas as pd
import streamlit as st
from sqlalchemy.orm import Session

# --- Attempt to import project modules ---
try:
    from librarycatalog.core.config import settings
    from librarycatalog.core.exceptions import BookNotFoundError
    from librarycatalog.core.locale import Locale, default_locale
    from librarycatalog.crud import get_genres
    from librarycatalog.db.session import SessionLocal, init_db
    from librarycatalog.schemas.book import RatingCreate
    from librarycatalog.schemas.page import SortDirection
    from librarycatalog.services.book_service import BookService
    from librarycatalog.services.delivery import serve_content, serve_image
except ImportError:
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
    if project_root not in sys.path:
        sys.path.append(project_root)
    try:
        from librarycatalog.core.config import settings
        from librarycatalog.core.exceptions import BookNotFoundError
        from librarycatalog.core.locale import Locale, default_locale
        from librarycatalog.crud import get_genres
        from librarycatalog.db.session import SessionLocal, init_db
        from librarycatalog.schemas.book import RatingCreate
        from librarycatalog.schemas.page import SortDirection
        from librarycatalog.services.book_service import BookService
        from librarycatalog.services.delivery import serve_content, serve_image
    except ImportError as e:
        st.error(f"Failed to import project modules in app.py. Error: {e}")
        st.stop()

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

SORT_OPTIONS = {
    "Name (A-Z)": ("name", SortDirection.ASC),
    "Name (Z-A)": ("name", SortDirection.DESC),
    "Most viewed": ("view_count", SortDirection.DESC),
    "Best rated": ("avg_rating", SortDirection.DESC),
    "Newest": ("publish_year", SortDirection.DESC),
}

# --- Session State Initialization ---
if 'locale' not in st.session_state:
    st.session_state.locale = default_locale().value
if 'page_number' not in st.session_state:
    st.session_state.page_number = 0
if 'delivered_content' not in st.session_state:
    # Only the most recently read book is kept: (book_id, BinaryResponse)
    st.session_state.delivered_content = (None, None)


def _reset_page():
    st.session_state.page_number = 0


def _open_editor(book_id=None):
    st.session_state.edit_book_id = book_id
    st.session_state.edit_result = None
    st.switch_page("pages/edit_book.py")


# --- Sidebar: language and popular books ---
st.sidebar.title("Library")
st.sidebar.selectbox(
    "Language",
    options=[locale.value for locale in Locale],
    format_func=lambda tag: {"ru": "Русский", "en": "English"}[tag],
    key="locale",
)
locale = Locale.resolve(st.session_state.locale)

db_main: Session | None = None
try:
    db_main = SessionLocal()
    service = BookService(db_main)

    st.sidebar.subheader("Popular books")
    top_books = service.find_top_books(settings.TOP_BOOKS_LIMIT)
    if not top_books:
        st.sidebar.caption("No books yet.")
    for cover in top_books:
        if cover.image:
            st.sidebar.image(cover.image, width=90)

    if st.sidebar.button("➕ New book"):
        _open_editor()

    # --- Filter and sort widgets ---
    st.header("Catalogue")
    genres = get_genres(db_main, locale)
    genre_names = {g.id: g.localized_name(locale) for g in genres}

    control_cols = st.columns([3, 2, 2])
    with control_cols[0]:
        search_term = st.text_input("Search by title or author", key="search_term", on_change=_reset_page).strip()
    with control_cols[1]:
        selected_genre = st.selectbox(
            "Genre",
            options=[None] + list(genre_names),
            format_func=lambda gid: "All genres" if gid is None else genre_names[gid],
            key="genre_filter",
            on_change=_reset_page,
        )
    with control_cols[2]:
        sort_label = st.selectbox("Sort by", options=list(SORT_OPTIONS), key="book_sort", on_change=_reset_page)
    sort_field, sort_direction = SORT_OPTIONS[sort_label]
    st.divider()

    # --- Fetch the requested page ---
    page_number = st.session_state.page_number
    if search_term:
        page = service.search_page(page_number, settings.PAGE_SIZE, sort_field, sort_direction,
                                   search_term, locale=locale)
    elif selected_genre is not None:
        page = service.find_by_genre(page_number, settings.PAGE_SIZE, sort_field, sort_direction, selected_genre)
    else:
        page = service.get_page(page_number, settings.PAGE_SIZE, sort_field, sort_direction)

    # Deleting the last book of the last page leaves the stored page number behind
    if page.is_past_end:
        st.session_state.page_number = page.last_number
        st.rerun()

    if not page.items:
        st.warning("No books match the current filters.")
    else:
        st.markdown(f"**{page.total} book(s) found**")

        with st.expander("Table view"):
            st.dataframe(pd.DataFrame([
                {
                    "Title": b.name,
                    "Author": b.author.localized_fio(locale) if b.author else "",
                    "Year": b.publish_year or None,
                    "Pages": b.page_count,
                    "ISBN": b.isbn,
                    "Rating": b.avg_rating,
                    "Views": b.view_count,
                }
                for b in page
            ]), hide_index=True)

        for book in page:
            author_name = book.author.localized_fio(locale) if book.author else "Unknown author"
            with st.expander(f"{book.name} ({author_name})"):
                main_cols = st.columns([1, 3])

                with main_cols[0]:
                    cover = serve_image(service, book.id)
                    if cover.is_empty:
                        st.caption("🖼 No cover")
                    else:
                        st.image(cover.body, width=150)

                with main_cols[1]:
                    st.subheader(book.name)
                    st.write(f"**Author:** {author_name}")
                    details = [f"**ISBN:** {book.isbn or 'N/A'}", f"**Pages:** {book.page_count}"]
                    if book.publish_year:
                        details.append(f"**Year:** {book.publish_year}")
                    if book.genre:
                        details.append(f"**Genre:** {book.genre.localized_name(locale)}")
                    if book.publisher:
                        details.append(f"**Publisher:** {book.publisher.localized_name(locale)}")
                    st.caption(" | ".join(details))
                    st.metric(label="Rating", value=f"{book.avg_rating} ⭐",
                              delta=f"{book.total_vote_count} vote(s)", delta_color="off")
                    st.caption(f"👁 {book.view_count} view(s)")

                if book.description:
                    st.caption(book.description)

                # --- Reading ---
                action_cols = st.columns(4)
                with action_cols[0]:
                    if st.button("📖 Read", key=f"read_{book.id}"):
                        response = serve_content(service, book.id)
                        if response.is_empty:
                            st.info("This book has no content yet.")
                        else:
                            st.session_state.delivered_content = (book.id, response)
                    delivered_id, delivered = st.session_state.delivered_content
                    if delivered_id == book.id and delivered is not None:
                        st.download_button("⬇ PDF", data=delivered.body, mime=delivered.content_type,
                                           file_name=f"{book.name}.pdf", key=f"download_{book.id}")
                with action_cols[1]:
                    if st.button("✏️ Edit", key=f"edit_{book.id}"):
                        _open_editor(book.id)
                with action_cols[2]:
                    if st.button("🗑️ Delete", key=f"delete_{book.id}"):
                        try:
                            service.delete_by_id(book.id)
                            if st.session_state.delivered_content[0] == book.id:
                                st.session_state.delivered_content = (None, None)
                            st.success("Book deleted.")
                            st.rerun()
                        except BookNotFoundError:
                            st.error("The book no longer exists.")

                # --- Rating ---
                with st.form(key=f"rating_form_{book.id}", clear_on_submit=True):
                    score = st.slider("Your score:", 1, 5, 3)
                    if st.form_submit_button("Rate"):
                        service.rate_book(book.id, RatingCreate(score=score))
                        st.success("Thanks for rating!")
                        st.rerun()

        # --- Pagination ---
        nav_cols = st.columns([1, 2, 1])
        with nav_cols[0]:
            if page.has_previous and st.button("← Previous"):
                st.session_state.page_number -= 1
                st.rerun()
        with nav_cols[1]:
            st.caption(f"Page {page.number + 1} of {page.total_pages}")
        with nav_cols[2]:
            if page.has_next and st.button("Next →"):
                st.session_state.page_number += 1
                st.rerun()

except Exception as e:
    st.error(f"Error loading the catalogue: {e}")
    logger.exception("Error in main app.py block")
finally:
    if db_main:
        db_main.close()
