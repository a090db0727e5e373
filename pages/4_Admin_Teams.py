import streamlit as st

from titans.admin_ui import (
    flash,
    get_screen,
    render_form,
    render_row_actions,
    render_screen_header,
    show_flash,
)
from titans.crud import TEAM_FORM, CrudScreen
from titans.formatting import team_initials
from titans.guard import APP_TITLE, render_admin_header, require_admin
from titans.models import HOME_TEAM_SETTING, TEAM_LOGOS_BUCKET
from titans.repositories import SettingsRepository, TeamRepository

st.set_page_config(page_title=f"{APP_TITLE} - Teams", layout="wide")

session = require_admin()
render_admin_header(session)
show_flash()

repo = TeamRepository()
screen = get_screen("teams_screen", lambda: CrudScreen(repo, TEAM_FORM))

render_screen_header(screen, "Manage Teams", "Opponents and the club's own team.")
render_form(screen, image_buckets={"logo_url": TEAM_LOGOS_BUCKET})


def render_team_cards(rows):
    cols = st.columns(3)
    for i, team in enumerate(rows):
        with cols[i % 3]:
            with st.container(border=True):
                if team.get("logo_url"):
                    st.image(team["logo_url"], width=64)
                else:
                    st.markdown(f"### {team_initials(team.get('name'))}")
                st.markdown(f"**{team['name']}**" + (f" ({team['short_name']})" if team.get("short_name") else ""))
                if team.get("conference"):
                    st.caption(team["conference"])
                st.markdown(
                    f":gray[Colors:] `{team.get('primary_color') or '-'}` / `{team.get('secondary_color') or '-'}`"
                )
                rec = repo.record(team["id"])
                st.write(f"Record vs this team: **{rec['wins']}-{rec['losses']}**")


def render_home_team_setting(rows):
    """Which team is the club itself; prefills Home Team on new games and results."""
    settings = SettingsRepository()
    ids = [t["id"] for t in rows]
    names = {t["id"]: t["name"] for t in rows}
    current = settings.home_team_id()

    st.markdown("### Club team")
    with st.form("home_team_form"):
        choice = st.selectbox(
            "Home team used as the default on new games and results",
            ids,
            index=ids.index(current) if current in ids else None,
            format_func=lambda i: names.get(i, "Unknown Team"),
            placeholder="Choose an option",
        )
        saved = st.form_submit_button("Save")
    if saved:
        settings.set(HOME_TEAM_SETTING, None if choice is None else str(choice))
        flash("Club team saved.")
        st.rerun()


try:
    if screen.error:
        st.warning(f"Couldn't load teams: {screen.error}")
    elif not screen.rows:
        st.info("No teams yet. Add your first team to get started.")
    else:
        render_team_cards(screen.rows)
        st.markdown("---")
        render_home_team_setting(screen.rows)
        render_row_actions(
            screen,
            lambda t: t["name"],
            delete_warning="Deleting a team clears it from any games or results that reference it.",
        )
except Exception as e:
    st.error(str(e))
