import streamlit as st

from titans.auth import Session, bootstrap_admin
from titans.config import club_name, configure_logging
from titans.db import init_db
from titans.routes import ADMIN_LOGIN, ADMIN_NAV, HOME, resolve

APP_TITLE = club_name()


def hide_sidebar():
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none; }
        [data-testid="stSidebarCollapsedControl"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def sidebar_divider_compact():
    """A tighter divider than st.sidebar.markdown('---') to reduce vertical whitespace."""
    st.sidebar.markdown(
        '<hr style="margin: 0.25rem 0; border: 0; border-top: 1px solid rgba(49, 51, 63, 0.2);" />',
        unsafe_allow_html=True,
    )


def boot():
    """Logging, tables and first-admin bootstrap. Safe on every rerun."""
    configure_logging()
    init_db()
    if not st.session_state.get("admin_bootstrapped"):
        bootstrap_admin()
        st.session_state["admin_bootstrapped"] = True


def get_session() -> Session:
    if "session" not in st.session_state:
        st.session_state["session"] = Session()
    return st.session_state["session"]


def go(path: str):
    st.switch_page(resolve(path))


def require_admin() -> Session:
    """Ensure DB exists, then require a signed-in admin. Otherwise redirect to the login page."""
    boot()
    session = get_session()
    if not session.is_signed_in:
        hide_sidebar()
        go(ADMIN_LOGIN)
        st.stop()
    return session


def render_admin_header(session: Session):
    """Sidebar: signed-in admin, admin navigation, view-site link and sign out."""
    st.sidebar.write(f"**{APP_TITLE} Admin**")
    st.sidebar.caption(session.user["email"])
    sidebar_divider_compact()

    for path, label in ADMIN_NAV:
        st.sidebar.page_link(resolve(path), label=label)
    st.sidebar.page_link(resolve(HOME), label="View Site →")

    sidebar_divider_compact()
    if st.sidebar.button("Sign Out", use_container_width=True):
        result = session.sign_out()
        if not result.ok:
            st.sidebar.error(result.error)
        go(ADMIN_LOGIN)
