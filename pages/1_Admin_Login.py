import streamlit as st

from titans.guard import APP_TITLE, boot, get_session, go, hide_sidebar
from titans.routes import ADMIN_GAMES, HOME, resolve

st.set_page_config(page_title=f"{APP_TITLE} - Admin Login", layout="centered")


def main():
    boot()
    hide_sidebar()

    session = get_session()
    if session.is_signed_in:
        go(ADMIN_GAMES)
        return

    st.title("Admin Login")
    st.caption(f"Sign in to manage {APP_TITLE}.")

    with st.form("admin_login_form"):
        email = st.text_input("Email", placeholder="admin@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In", type="primary", width="stretch")

    if submitted:
        with st.spinner("Signing in..."):
            result = session.sign_in(email, password)
        if result.ok:
            go(ADMIN_GAMES)
        else:
            st.error(result.error)

    st.markdown("---")
    st.page_link(resolve(HOME), label="← Back to site")


main()
