import pandas as pd
import streamlit as st

from titans.admin_ui import (
    get_screen,
    get_team_picker,
    render_form,
    render_row_actions,
    render_screen_header,
    render_table,
    show_flash,
)
from titans.crud import GAME_FORM, CrudScreen, home_team_defaults
from titans.formatting import format_date_series, format_time_ampm, format_game_date, team_name
from titans.guard import APP_TITLE, render_admin_header, require_admin
from titans.repositories import GameRepository

st.set_page_config(page_title=f"{APP_TITLE} - Games", layout="wide")

session = require_admin()
render_admin_header(session)
show_flash()


def games_table(rows):
    df = pd.DataFrame(
        [
            {
                "Date": r.get("date"),
                "Time": format_time_ampm(r.get("time")),
                "Opponent": team_name(r.get("opponent")),
                "Location": r.get("location") or "",
                "Type": (r.get("game_type") or "").capitalize(),
                "Season": r.get("season") or "",
            }
            for r in rows
        ]
    )
    df["Date"] = format_date_series(df["Date"])
    return df


screen = get_screen("games_screen", lambda: CrudScreen(GameRepository(), GAME_FORM, home_team_defaults()))

render_screen_header(screen, "Manage Games", "Add, edit, and remove games on the schedule.")
render_form(screen, picker=get_team_picker())

try:
    render_table(screen, games_table, "No games yet. Add your first game to get started.")
    render_row_actions(
        screen,
        lambda r: f"{format_game_date(r.get('date'))} vs {team_name(r.get('opponent'))}",
        delete_warning="Are you sure you want to delete this game?",
    )
except Exception as e:
    st.error(str(e))
