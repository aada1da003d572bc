# streamlit_app/pages/edit_book.py

import logging
import os
import sys

import streamlit as st
from sqlalchemy.orm import Session

# --- Attempt to import project modules ---
try:
    from librarycatalog.core.config import settings
    from librarycatalog.core.exceptions import BookNotFoundError
    from librarycatalog.core.locale import Locale, default_locale
    from librarycatalog.db.session import SessionLocal, init_db
    from librarycatalog.schemas.book import bind_book_form
    from librarycatalog.services.book_editor import BookEditor
except ImportError:
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', 'src'))
    if project_root not in sys.path:
        sys.path.append(project_root)
    try:
        from librarycatalog.core.config import settings
        from librarycatalog.core.exceptions import BookNotFoundError
        from librarycatalog.core.locale import Locale, default_locale
        from librarycatalog.db.session import SessionLocal, init_db
        from librarycatalog.schemas.book import bind_book_form
        from librarycatalog.services.book_editor import BookEditor
    except ImportError as e:
        st.error(f"Failed to import project modules in edit_book.py. Error: {e}")
        st.stop()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

locale = Locale.resolve(st.session_state.get('locale'), default=default_locale())
edit_book_id = st.session_state.get('edit_book_id')


def _text(value) -> str:
    return "" if value is None else str(value)


def _option_index(options, selected) -> int:
    return options.index(selected) if selected in options else 0


db_edit: Session | None = None
try:
    db_edit = SessionLocal()
    editor = BookEditor(db_edit, locale)

    # A rejected submission is shown again as it was typed, with its errors
    result = st.session_state.get('edit_result')
    if result is None:
        try:
            result = editor.new_book_form() if edit_book_id is None else editor.edit_book_form(edit_book_id)
        except BookNotFoundError:
            st.error("🚫 This book does not exist anymore.")
            st.stop()

    model = result.editable_book
    st.title("📚 New book" if model.is_new else f"✏️ {model.name}")

    for message in result.errors:
        st.error(message)

    author_names = {a.id: a.localized_fio(locale) for a in result.all_authors}
    genre_names = {g.id: g.localized_name(locale) for g in result.all_genres}
    publisher_names = {p.id: p.localized_name(locale) for p in result.all_publishers}
    author_options = [None] + list(author_names)
    genre_options = [None] + list(genre_names)
    publisher_options = [None] + list(publisher_names)

    with st.form("book_form"):
        name = st.text_input("Title", value=_text(model.name))
        cols = st.columns(3)
        with cols[0]:
            isbn = st.text_input("ISBN", value=_text(model.isbn))
        with cols[1]:
            page_count = st.text_input("Pages", value=_text(model.page_count))
        with cols[2]:
            publish_year = st.text_input("Publish year", value=_text(model.publish_year))

        author_id = st.selectbox("Author", author_options, index=_option_index(author_options, model.author_id),
                                 format_func=lambda aid: "-" if aid is None else author_names[aid])
        genre_id = st.selectbox("Genre", genre_options, index=_option_index(genre_options, model.genre_id),
                                format_func=lambda gid: "-" if gid is None else genre_names[gid])
        publisher_id = st.selectbox("Publisher", publisher_options,
                                    index=_option_index(publisher_options, model.publisher_id),
                                    format_func=lambda pid: "-" if pid is None else publisher_names[pid])
        description = st.text_area("Description", value=_text(model.description))

        if model.image:
            st.image(model.image, width=120, caption="Current cover")
        uploaded_image = st.file_uploader("Cover (jpg, png, gif)", type=["jpg", "jpeg", "png", "gif"])
        uploaded_content = st.file_uploader("Content (pdf)", type=["pdf"])

        submitted = st.form_submit_button("Save")

    if submitted:
        form_data = {
            "id": _text(model.id),
            "name": name,
            "isbn": isbn,
            "page_count": page_count,
            "publish_year": publish_year,
            "author_id": _text(author_id),
            "genre_id": _text(genre_id),
            "publisher_id": _text(publisher_id),
            "description": description,
        }
        submission, binding_errors = bind_book_form(form_data, locale)
        # The cover and content travel with the edited model, not with the form fields
        submission.image = model.image
        submission.content = model.content
        outcome = editor.process(
            submission,
            binding_errors,
            uploaded_image=uploaded_image.getvalue() if uploaded_image else None,
            uploaded_content=uploaded_content.getvalue() if uploaded_content else None,
        )
        if outcome.saved:
            st.session_state.edit_result = None
            st.session_state.edit_book_id = None
            st.success(f"Saved “{outcome.book.name}”.")
            st.switch_page("app.py")
        else:
            st.session_state.edit_result = outcome
            st.rerun()

    if st.button("← Back to catalogue"):
        st.session_state.edit_result = None
        st.session_state.edit_book_id = None
        st.switch_page("app.py")

except Exception as e:
    st.error(f"Error in the book editor: {e}")
    logger.exception("Error in edit_book.py")
finally:
    if db_edit:
        db_edit.close()
