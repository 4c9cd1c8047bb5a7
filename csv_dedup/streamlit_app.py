"""
Streamlit dashboard for the CSV deduplicator.

Run with ``streamlit run csv_dedup/streamlit_app.py``. Files are uploaded in the
sidebar; the page lists them, shows the columns every file shares and runs the
dedup when a column button is clicked.
"""

from __future__ import annotations

import streamlit as st

from csv_dedup.config import ConfigError, load_settings
from csv_dedup.errors import DedupError
from csv_dedup.loaders import tables_from_uploads
from csv_dedup.reports import files_frame, table_to_frame
from csv_dedup.session import Session

SESSION_KEY = "dedup_session"
UPLOADER_KEY = "uploader_generation"
PREVIEW_ROWS = 50


def get_session(case_sensitive: bool) -> Session:
    """One Session per browser tab, kept in Streamlit's session state."""

    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = Session(case_sensitive=case_sensitive)
    return st.session_state[SESSION_KEY]


def render_file_list(session: Session) -> None:
    st.subheader("Loaded Files")
    for name, row_count in session.file_summaries():
        col_name, col_rows, col_remove = st.columns([6, 2, 1])
        col_name.write(name)
        col_rows.caption(f"{row_count} rows")
        if col_remove.button("✕", key=f"remove-{name}", help=f"Remove {name}"):
            session.remove_table(name)
            # A fresh uploader widget forgets the removed file.
            st.session_state[UPLOADER_KEY] = st.session_state.get(UPLOADER_KEY, 0) + 1
            st.rerun()

    with st.expander("File details"):
        st.dataframe(files_frame(session.tables).to_pandas(), use_container_width=True)
        preview_name = st.selectbox("Preview file", session.table_names)
        table = session.get_table(preview_name) if preview_name else None
        if table is not None:
            st.dataframe(table_to_frame(table, limit=PREVIEW_ROWS).to_pandas(), use_container_width=True)


def render_dedup_controls(session: Session) -> None:
    header_col, case_col = st.columns([3, 1])
    header_col.subheader("Available Deduplication Columns")
    case_sensitive = case_col.checkbox("Case Sensitive", value=session.case_sensitive)
    if case_sensitive != session.case_sensitive:
        session.set_case_sensitive(case_sensitive)

    buttons = st.columns(len(session.common_headers))
    for slot, header in zip(buttons, session.common_headers):
        if slot.button(header or "(blank)", key=f"header-{header}"):
            with st.spinner(f'Deduplicating using column "{header}"'):
                try:
                    session.select_key(header)
                except DedupError as exc:
                    st.error(str(exc))


def render_result(session: Session) -> None:
    result = session.current_result()
    if result is None:
        return
    st.divider()
    st.write(result.summary())
    st.download_button(
        label="Download",
        data=result.to_csv_text().encode("utf-8"),
        file_name=f"deduplicated_{result.key or 'output'}.csv",
        mime="text/csv",
    )


def main() -> None:
    st.set_page_config(page_title="CSV Deduplicator", layout="wide")
    st.title("CSV Deduplicator")

    try:
        settings = load_settings()
    except ConfigError as exc:
        st.error(f"Config error: {exc}")
        return

    session = get_session(settings.case_sensitive)

    uploads = st.sidebar.file_uploader(
        "Add CSV",
        type=["csv"],
        accept_multiple_files=True,
        key=f"uploader-{st.session_state.get(UPLOADER_KEY, 0)}",
    )
    if uploads:
        new_uploads = [u for u in uploads if u.name not in session.table_names]
        if new_uploads:
            try:
                tables = tables_from_uploads(new_uploads, encodings=settings.encodings, max_workers=settings.max_workers)
            except DedupError as exc:
                st.sidebar.error(str(exc))
            else:
                session.add_tables(tables)

    if not session.tables:
        st.info("Upload two or more CSV files in the sidebar to get started.")
        return

    st.divider()
    render_file_list(session)

    if not session.can_deduplicate:
        if len(session.tables) > 1:
            st.warning("The loaded files share no columns.")
        return

    st.divider()
    render_dedup_controls(session)
    render_result(session)


if __name__ == "__main__":
    main()
