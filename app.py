"""
PageLab - Interactive HTML, CSS and JavaScript Exercises

Streamlit application: pick a topic, solve short exercises in the editor,
watch the live preview and submit for checking. Progress is saved locally.

Usage:
    streamlit run app.py
"""

import logging

import streamlit as st
import streamlit.components.v1 as components
from streamlit_ace import st_ace

from pagelab.classroom import (
    ALL_LEVELS,
    LEVEL_CHOICES,
    CatalogLoader,
    ExerciseSession,
    ProgressStore,
    ViewMode,
    get_completion_stats,
)
from pagelab.config import get_settings
from pagelab.sandbox import PreviewRenderer
from pagelab.utils import configure_logging
from pagelab.viewer import (
    EDITOR_LANGUAGES,
    build_preview_page,
    estimate_preview_height,
    get_exercise_css,
    render_answer,
    render_exercise_row,
    render_feedback,
    render_hint,
    render_instructions,
    render_progress_summary,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="PageLab",
    page_icon="🧪",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "loader" not in st.session_state:
        try:
            st.session_state.loader = CatalogLoader(settings.catalog_dir)
        except FileNotFoundError as e:
            logger.error(str(e))
            st.session_state.loader = None

    if "store" not in st.session_state:
        st.session_state.store = ProgressStore(settings.progress_db)

    if "renderer" not in st.session_state:
        st.session_state.renderer = PreviewRenderer(
            time_limit=settings.exec_time_limit,
            memory_limit=settings.exec_memory_limit,
        )

    if "set_key" not in st.session_state:
        keys = st.session_state.loader.get_set_keys() if st.session_state.loader else []
        st.session_state.set_key = keys[0] if keys else None

    if "session" not in st.session_state:
        st.session_state.session = None

    if "editor_revision" not in st.session_state:
        st.session_state.editor_revision = 0

    if "confirm_reset" not in st.session_state:
        st.session_state.confirm_reset = False


def get_session() -> ExerciseSession:
    """Session for the selected set; rebuilt when the set changes."""
    session = st.session_state.session
    if session is None or session.catalog_set.key != st.session_state.set_key:
        catalog_set = st.session_state.loader.load_set(st.session_state.set_key)
        session = ExerciseSession(catalog_set, st.session_state.store, st.session_state.renderer)
        st.session_state.session = session
        st.session_state.confirm_reset = False
    return session


def bump_editor():
    """Force the editor widget to reload its value."""
    st.session_state.editor_revision += 1


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with topic selection and progress."""
    st.sidebar.title("🧪 PageLab")

    loader = st.session_state.loader
    store = st.session_state.store
    if not store.available:
        st.sidebar.warning("Progress storage is unavailable; progress will not be saved.")

    st.sidebar.subheader("Topics")
    for catalog_set in loader.load_all():
        stats = get_completion_stats(store.load(catalog_set.key), catalog_set.count)
        is_current = catalog_set.key == st.session_state.set_key
        label = f"{catalog_set.title} ({stats['completed']}/{stats['total']})"
        if st.sidebar.button(
            label,
            key=f"set_{catalog_set.key}",
            use_container_width=True,
            type="primary" if is_current else "secondary",
        ):
            st.session_state.set_key = catalog_set.key
            st.rerun()
        st.sidebar.progress(stats["completion_percent"] / 100)


# -----------------------------------------------------------------------------
# Listing View
# -----------------------------------------------------------------------------

def render_listing_view(session: ExerciseSession):
    """Exercise list with level filter and progress reset."""
    catalog_set = session.catalog_set
    st.title(catalog_set.title)
    if catalog_set.description:
        st.caption(catalog_set.description)

    st.markdown(get_exercise_css(), unsafe_allow_html=True)
    st.markdown(render_progress_summary(session.progress_summary()), unsafe_allow_html=True)

    options = [ALL_LEVELS, *LEVEL_CHOICES]
    choice = st.radio(
        "Level",
        options,
        index=options.index(session.filter_level),
        format_func=lambda value: "All" if value == ALL_LEVELS else f"Level {value}",
        horizontal=True,
    )
    if choice != session.filter_level:
        session.set_filter(choice)
        st.rerun()

    visible = session.visible_exercises()
    if not visible:
        st.info("No exercises at this level.")

    for index, exercise in visible:
        col1, col2 = st.columns([9, 1])
        with col1:
            st.markdown(
                render_exercise_row(index, exercise, session.is_completed(index), session.exercise_label(index)),
                unsafe_allow_html=True,
            )
        with col2:
            if st.button("Open", key=f"open_{catalog_set.key}_{index}", use_container_width=True):
                session.select(index)
                bump_editor()
                st.rerun()

    st.divider()
    render_reset_progress(session)


def render_reset_progress(session: ExerciseSession):
    """Reset progress behind an explicit confirmation step."""
    if not st.session_state.confirm_reset:
        if st.button("Reset progress"):
            st.session_state.confirm_reset = True
            st.rerun()
        return

    st.warning("This clears every completed exercise in this topic. Continue?")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Yes, reset", type="primary", use_container_width=True):
            session.reset_progress(confirmed=True)
            st.session_state.confirm_reset = False
            st.rerun()
    with col2:
        if st.button("Cancel", use_container_width=True):
            st.session_state.confirm_reset = False
            st.rerun()


# -----------------------------------------------------------------------------
# Detail View
# -----------------------------------------------------------------------------

def render_navigation_bar(session: ExerciseSession):
    """Previous / back / next controls."""
    index = session.active_index
    total = session.catalog_set.count

    col1, col2, col3, col4 = st.columns([1, 1, 2, 1])
    with col1:
        if st.button("← Previous", disabled=index == 0, use_container_width=True):
            session.previous()
            bump_editor()
            st.rerun()
    with col2:
        if st.button("☰ All exercises", use_container_width=True):
            session.back()
            st.rerun()
    with col3:
        st.markdown(f"<center>{session.exercise_label(index)} of {total}</center>", unsafe_allow_html=True)
    with col4:
        if st.button("Next →", disabled=index + 1 >= total, use_container_width=True):
            session.next()
            bump_editor()
            st.rerun()


def render_detail_view(session: ExerciseSession):
    """Single exercise: instructions, editor, preview and actions."""
    exercise = session.active_exercise
    editor = session.editor

    render_navigation_bar(session)

    done = " ✅" if session.is_completed(session.active_index) else ""
    st.subheader(f"{exercise.display_title}{done}")
    st.caption(f"Level {exercise.level}")

    st.markdown(get_exercise_css(), unsafe_allow_html=True)
    st.markdown(render_instructions(exercise), unsafe_allow_html=True)

    if st.button("Hide hint" if editor.hint_visible else "Show hint"):
        session.toggle_hint()
        st.rerun()
    if editor.hint_visible:
        st.markdown(render_hint(exercise), unsafe_allow_html=True)

    col_editor, col_preview = st.columns(2)
    with col_editor:
        st.markdown("**Your code**")
        source = st_ace(
            value=editor.source,
            placeholder=exercise.placeholder_text or "Write code here...",
            language=EDITOR_LANGUAGES[exercise.kind],
            theme="monokai",
            key=f"ace_{session.catalog_set.key}_{session.active_index}_{st.session_state.editor_revision}",
            height=320,
            font_size=14,
            wrap=True,
            auto_update=True,
        )
        if source is not None and source != editor.source:
            session.update_source(source)

    with col_preview:
        st.markdown("**Preview**")
        if editor.preview is not None:
            components.html(
                build_preview_page(editor.preview),
                height=estimate_preview_height(editor.preview),
                scrolling=True,
            )

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("Submit", type="primary", use_container_width=True):
            session.submit()
    with col2:
        if st.button("Reset code", use_container_width=True):
            session.reset_editor()
            bump_editor()
            st.rerun()
    with col3:
        if st.button("Show answer", use_container_width=True):
            session.reveal_answer()

    if editor.feedback is not None:
        st.markdown(render_feedback(editor.feedback), unsafe_allow_html=True)

    if editor.answer_revealed:
        st.markdown("**Reference answer**")
        st.markdown(render_answer(exercise), unsafe_allow_html=True)


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()

    if not st.session_state.loader or not st.session_state.set_key:
        st.error(f"No exercise catalog found in {settings.catalog_dir}.")
        return

    render_sidebar()
    session = get_session()

    if session.mode == ViewMode.DETAIL:
        render_detail_view(session)
    else:
        render_listing_view(session)


if __name__ == "__main__":
    main()
