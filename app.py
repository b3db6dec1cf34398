"""
LearnQuest - Course shell

Streamlit application around the LearnQuest runtime: page navigation,
activity notes, completion toggles, and progress display. Progress is
saved to the LMS when one hosts the course, and always to local storage.

Usage:
    streamlit run app.py
    (open with ?fresh to ignore saved progress and start over)
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import streamlit as st

from learnquest.config import load_settings
from learnquest.progress import (
    accent_for_page,
    build_activity_meta,
    build_progress_summary,
    can_toggle_completion,
)
from learnquest.runtime import open_course
from learnquest.schemas import PageType, editable_note_text, has_note_content, load_manifest


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="LearnQuest",
    page_icon="🧭",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def push_route(page_index: int):
    st.query_params["page"] = str(page_index)


def init_session_state():
    """Open the course once per browser session."""
    if "course" in st.session_state:
        return

    settings = load_settings()
    st.session_state.settings = settings

    if not settings.manifest_path.exists():
        st.session_state.course = None
        return

    manifest = load_manifest(settings.manifest_path)
    url = "?" + urlencode(st.query_params.to_dict())
    course = open_course(manifest, settings, url=url, on_route=push_route)
    st.session_state.course = course

    # A page in the URL (reload, shared link) wins over the saved position
    if "page" in st.query_params:
        try:
            course.synchronizer.sync(int(st.query_params["page"]))
        except ValueError:
            logger.warning(f"Ignoring invalid page parameter: {st.query_params['page']!r}")


# -----------------------------------------------------------------------------
# Sidebar: Contents and Progress
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with contents and progress."""
    course = st.session_state.course
    snapshot = course.store.snapshot
    pages = course.manifest.pages

    st.sidebar.title(f"🧭 {course.manifest.title}")
    st.sidebar.caption(
        f"Learner: {course.bridge.learner_name} · "
        f"{'LMS connected' if course.lms_connected else 'Saved on this device'}"
    )

    stats = build_progress_summary(pages, snapshot)
    st.sidebar.markdown(
        f"**Progress:** {round(stats['overall_progress'] * 100)}% · "
        f"activities visited {stats['activities_visited']}/{stats['activities_total']}"
    )
    st.sidebar.progress(stats["overall_progress"])

    st.sidebar.divider()
    st.sidebar.subheader("Contents")

    for idx, page in enumerate(pages):
        if page.type == PageType.ACTIVITY:
            continue
        marker = "→" if idx == snapshot.page_index else ("✓" if idx in snapshot.visited else "○")
        if st.sidebar.button(f"{marker} {page.title}", key=f"page_{idx}", use_container_width=True):
            course.navigator.goto_page(idx)
            st.rerun()

    st.sidebar.subheader("Activities")
    for meta in build_activity_meta(pages):
        done = snapshot.completed.get(meta.id, False)
        marker = "✓" if done else ("•" if meta.index in snapshot.visited else "○")
        if st.sidebar.button(f"{marker} {meta.number}. {meta.title}", key=f"activity_{meta.id}",
                             use_container_width=True):
            course.navigator.goto_page(meta.index)
            st.rerun()

    if snapshot.finished:
        st.sidebar.success("Course finished")


# -----------------------------------------------------------------------------
# Main Content: Page View
# -----------------------------------------------------------------------------

def render_page_view():
    """Render the current page."""
    course = st.session_state.course
    nav = course.navigator
    page = nav.current_page
    accent = accent_for_page(page)

    st.markdown(
        f"<div style='height: 6px; background: {accent}; border-radius: 3px;'></div>",
        unsafe_allow_html=True,
    )
    st.title(page.title)
    if page.content.get("body"):
        st.markdown(page.content["body"])

    if page.type == PageType.ACTIVITY:
        render_activity_section(page.item_id, page.content.get("kind"))

    render_navigation_bar()


def render_activity_section(item_id: str, kind: Optional[str] = None):
    """Render the note editor and completion toggle for an activity."""
    store = st.session_state.course.store
    snapshot = store.snapshot

    saved = snapshot.notes.get(item_id)
    current_text = editable_note_text(saved)

    if current_text is None:
        # Structured notes are shown as-is; a text edit would replace them
        st.caption("Saved work")
        st.json(saved)
    else:
        text = st.text_area("Your reflection", value=current_text, key=f"note_{item_id}", height=200)
        if text != current_text:
            store.set_note(item_id, {"text": text})

        if has_note_content(store.snapshot.notes.get(item_id)):
            st.caption("Saved")

    if not can_toggle_completion(store.snapshot, item_id, kind):
        st.caption("Start the activity to mark it complete.")
        return

    done = store.snapshot.is_completed(item_id)
    label = "Mark as incomplete" if done else "Mark activity as complete"
    if st.button(label, type="secondary" if done else "primary", key=f"complete_{item_id}"):
        store.toggle_complete(item_id)
        st.rerun()


def render_navigation_bar():
    """Render navigation bar with prev/next buttons."""
    nav = st.session_state.course.navigator
    idx = nav.store.snapshot.page_index

    st.divider()
    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if idx > 0 and st.button("← Previous", use_container_width=True):
            nav.previous_page()
            st.rerun()

    with col2:
        st.markdown(f"<center>Page {idx + 1} of {nav.total_pages}</center>", unsafe_allow_html=True)

    with col3:
        if st.button(f"{nav.next_label()} →", use_container_width=True):
            nav.next_page()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()

    if not st.session_state.course:
        st.error(f"Course manifest not found: {st.session_state.settings.manifest_path}")
        return

    render_sidebar()
    render_page_view()


if __name__ == "__main__":
    main()
