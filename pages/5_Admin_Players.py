import pandas as pd
import streamlit as st

from titans.admin_ui import (
    get_screen,
    render_form,
    render_row_actions,
    render_screen_header,
    render_table,
    show_flash,
)
from titans.crud import PLAYER_FORM, CrudScreen
from titans.guard import APP_TITLE, render_admin_header, require_admin
from titans.models import PLAYER_PHOTOS_BUCKET, Position, full_name
from titans.repositories import PlayerRepository

st.set_page_config(page_title=f"{APP_TITLE} - Players", layout="wide")

session = require_admin()
render_admin_header(session)
show_flash()


def players_table(rows):
    out = []
    for p in rows:
        pos = Position.parse(p.get("position"))
        out.append(
            {
                "#": p.get("jersey_number"),
                "Name": full_name(p),
                "Position": pos.label if pos else "",
                "Grade": p.get("grade"),
                "Season": p.get("season") or "",
                "Active": bool(p.get("is_active")),
            }
        )
    df = pd.DataFrame(out)
    df["#"] = df["#"].astype("Int64")
    df["Grade"] = df["Grade"].astype("Int64")
    return df


screen = get_screen("players_screen", lambda: CrudScreen(PlayerRepository(), PLAYER_FORM))

render_screen_header(screen, "Manage Players", "The roster shown on the public site.")
render_form(screen, image_buckets={"photo_url": PLAYER_PHOTOS_BUCKET})

try:
    render_table(screen, players_table, "No players yet. Add your first player to get started.")
    render_row_actions(
        screen,
        lambda p: full_name(p) + (f" #{p['jersey_number']}" if p.get("jersey_number") is not None else ""),
        delete_warning="Are you sure you want to delete this player?",
    )
except Exception as e:
    st.error(str(e))
