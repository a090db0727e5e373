"""Public site sections. Each one renders hook state and owns no data logic."""

import streamlit as st

from titans.config import club_name, current_season, get_optional
from titans.contact import ERROR, FIELDS, SUCCESS, ContactForm, submit_to_relay
from titans.formatting import (
    date_badge,
    format_game_date,
    format_time_ampm,
    player_initials,
    team_initials,
    team_name,
)
from titans.hooks import Query
from titans.models import ROSTER_FILTERS, Position, filter_roster, full_name
from titans.outcomes import outcome, outcome_label

SPONSORS = [
    "Local Business 1",
    "Sports Store",
    "Community Bank",
    "Pizza Place",
    "Auto Shop",
    "Medical Center",
    "Local Restaurant",
    "Insurance Co",
]


def _fetch_notice(query: Query, what: str) -> None:
    if query.error:
        st.warning(f"Couldn't load {what}: {query.error}")


def render_header():
    cols = st.columns([3, 2])
    with cols[0]:
        st.markdown(f"## {club_name().upper()}")
    with cols[1]:
        st.markdown(
            "[Schedule](#schedule) · [Results](#results) · [Roster](#roster) · [Contact](#contact)"
        )


def render_hero(games: Query):
    st.title(club_name())
    st.subheader(f"{current_season()} Season")
    st.write("Youth lacrosse built on hustle, teamwork, and community.")
    if games.data:
        g = games.data[0]
        st.info(
            f"**Next up:** vs {team_name(g.get('opponent'))} · "
            f"{format_game_date(g.get('date'))} · {format_time_ampm(g.get('time'))} · {g.get('location') or ''}"
        )


def render_stats(stats: Query):
    _fetch_notice(stats, "season stats")
    s = stats.data
    cols = st.columns(5)
    cols[0].metric("Games Played", s.total_games)
    cols[1].metric("Wins", s.wins)
    cols[2].metric("Losses", s.losses)
    cols[3].metric("Goals For", s.total_goals)
    cols[4].metric("Goals Against", s.goals_against)


def render_schedule(games: Query):
    st.header("Schedule", anchor="schedule")
    _fetch_notice(games, "the schedule")
    if games.loading:
        st.caption("Loading games...")
        return
    if not games.data:
        st.info("No upcoming games scheduled.")
        return

    for g in games.data:
        badge = date_badge(g.get("date"))
        c1, c2, c3 = st.columns([1, 4, 1])
        with c1:
            st.markdown(f"**{badge['month']} {badge['day']}**  \n{badge['weekday']}")
        with c2:
            st.markdown(f"**vs {team_name(g.get('opponent'))}**  \n{g.get('location') or ''}")
            if g.get("notes"):
                st.caption(g["notes"])
        with c3:
            st.markdown(f"`{(g.get('game_type') or '').upper()}`  \n{format_time_ampm(g.get('time'))}")


def render_results(results: Query):
    st.header("Results", anchor="results")
    _fetch_notice(results, "results")
    if not results.data:
        st.info("No results yet this season.")
        return

    for r in results.data:
        opp = r.get("opponent") or {}
        label = outcome_label(r)
        icon = {"win": "🏆", "tie": "🤝", "loss": "➖"}[outcome(r)]
        st.subheader(f"{icon} {label}: {r['titans_score']} - {r['opponent_score']}")
        st.write(
            f"vs **{team_name(opp, r.get('opponent_name') or 'Unknown Team')}** "
            f"({opp.get('short_name') or team_initials(opp.get('name'))}) · {format_game_date(r.get('game_date'))}"
        )
        if r.get("season_type"):
            st.caption(r["season_type"])
        if r.get("leading_scorer"):
            goals = r.get("leading_scorer_goals")
            st.write(f"Leading scorer: {r['leading_scorer']}" + (f" ({goals} goals)" if goals else ""))


def render_roster(roster: Query):
    st.header("Roster", anchor="roster")
    _fetch_notice(roster, "the roster")

    choice = st.radio(
        "Position",
        ROSTER_FILTERS,
        format_func=lambda v: v.capitalize(),
        horizontal=True,
        key="roster_filter",
        label_visibility="collapsed",
    )
    players = filter_roster(roster.data or [], choice)
    if not players:
        st.info("No players found for this position.")
        return

    cols = st.columns(4)
    for i, p in enumerate(players):
        with cols[i % 4]:
            if p.get("photo_url"):
                st.image(p["photo_url"], use_container_width=True)
            else:
                st.markdown(f"### {player_initials(p)}")
            number = p.get("jersey_number")
            st.markdown(f"**{full_name(p)}**" + (f" · #{number}" if number is not None else ""))
            pos = Position.parse(p.get("position"))
            details = [pos.label if pos else "", f"Grade {p['grade']}" if p.get("grade") else ""]
            st.caption(" · ".join(d for d in details if d))
            if p.get("bio"):
                st.write(p["bio"])


def render_sponsors():
    st.markdown("#### Proudly Supported By")
    cols = st.columns(len(SPONSORS) // 2)
    for i, name in enumerate(SPONSORS):
        cols[i % len(cols)].markdown(f"**{name[0]}** {name}")


def _contact_form() -> ContactForm:
    if "contact_form" not in st.session_state:
        st.session_state["contact_form"] = ContactForm()
    return st.session_state["contact_form"]


def _on_field_commit(form: ContactForm, name: str):
    # Streamlit fires on_change when a text input loses focus or Enter is pressed.
    form.blur(name, st.session_state[f"contact_{name}"])


def render_cta():
    st.header("Get Involved", anchor="contact")
    st.write("Questions about tryouts, sponsorships, or volunteering? Send us a message.")

    form = _contact_form()

    if form.status == SUCCESS:
        st.success("Message sent! Thank you for reaching out. We'll get back to you within 24 hours.")
        if st.button("Send another message"):
            form.reset_status()
            st.rerun()
        return

    labels = {
        "name": "Name *",
        "email": "Email *",
        "phone": "Phone (optional)",
        "subject": "Subject *",
        "message": "Message *",
    }
    for name in FIELDS:
        key = f"contact_{name}"
        if key not in st.session_state or st.session_state.get("contact_cleared"):
            st.session_state[key] = form.values[name]
        widget = st.text_area if name == "message" else st.text_input
        widget(
            labels[name],
            key=key,
            on_change=_on_field_commit,
            args=(form, name),
            disabled=form.is_submitting,
        )
        err = form.error_for(name)
        if err:
            st.caption(f":red[{err}]")
    st.session_state["contact_cleared"] = False

    if form.status == ERROR:
        st.error("Something went wrong sending your message. Please try again.")

    if st.button("Send Message", type="primary", disabled=form.is_submitting):
        for name in FIELDS:
            form.change(name, st.session_state[f"contact_{name}"])
        try:
            with st.spinner("Sending..."):
                status = submit_to_relay(form, get_optional("CONTACT_FORM_ENDPOINT"))
        except RuntimeError as e:
            st.error(str(e))
            return
        if status == SUCCESS:
            st.session_state["contact_cleared"] = True
        st.rerun()


def render_footer():
    st.markdown("---")
    st.caption(f"© {club_name()} · {current_season()} season")
