"""Streamlit rendering for the admin CRUD screens (list, form, delete confirm)."""

from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import streamlit as st

from titans.crud import FORM_OPEN, CrudScreen, FieldSpec, TeamPicker
from titans.formatting import parse_date
from titans.models import Position
from titans.routes import ADMIN_TEAMS, resolve
from titans.storage import ObjectStore, build_object_store
from titans.uploads import ImageUpload

IMAGE_TYPES = ["png", "jpg", "jpeg", "gif", "webp"]


def get_screen(key: str, factory: Callable[[], CrudScreen]) -> CrudScreen:
    if key not in st.session_state:
        st.session_state[key] = factory()
    screen = st.session_state[key]
    if not screen.loaded:
        screen.load()
    return screen


def get_team_picker() -> TeamPicker:
    # Reloaded on every render so teams added in another tab show up.
    picker = TeamPicker()
    picker.load()
    return picker


def get_object_store() -> ObjectStore:
    if "object_store" not in st.session_state:
        st.session_state["object_store"] = build_object_store()
    return st.session_state["object_store"]


def flash(msg: str) -> None:
    st.session_state["admin_action_msg"] = msg


def show_flash() -> None:
    # One-time popup message after admin actions
    if st.session_state.get("admin_action_msg"):
        st.toast(st.session_state.pop("admin_action_msg"), icon="✅")


def render_screen_header(screen: CrudScreen, title: str, subtitle: str) -> None:
    col1, col2 = st.columns([4, 1])
    with col1:
        st.title(title)
        st.caption(subtitle)
    with col2:
        entity = screen.form.entity.capitalize()
        if st.button(f"Add {entity}", type="primary", width="stretch", key=f"{screen.form.entity}_add"):
            screen.open_create()
            st.session_state[f"{screen.form.entity}_form_nonce"] = st.session_state.get(
                f"{screen.form.entity}_form_nonce", 0
            ) + 1
            st.rerun()


def _nonce(screen: CrudScreen) -> int:
    return st.session_state.get(f"{screen.form.entity}_form_nonce", 0)


def _render_image_field(screen: CrudScreen, spec: FieldSpec, bucket: str) -> None:
    widget_key = f"{screen.form.entity}_{spec.name}_{_nonce(screen)}_upload"
    if widget_key not in st.session_state:
        st.session_state[widget_key] = ImageUpload(
            get_object_store(),
            bucket,
            current_image=screen.values.get(spec.name),
            on_image_uploaded=lambda url: screen.values.__setitem__(spec.name, url),
        )
    widget: ImageUpload = st.session_state[widget_key]

    st.markdown(f"**{spec.label}**")
    if widget.preview:
        st.image(widget.preview, width=120)
        if st.button("Remove image", key=f"{widget_key}_remove", disabled=widget.uploading):
            widget.remove()
            st.rerun()
        return

    file = st.file_uploader(
        "Drag & drop or click to upload (PNG, JPG, GIF up to 10MB)",
        type=IMAGE_TYPES,
        key=f"{widget_key}_file",
        disabled=widget.uploading,
    )
    if file is not None:
        with st.spinner("Uploading..."):
            url = widget.accept(file)
        if url:
            st.rerun()
    if widget.alert:
        st.error(widget.alert)


def _render_input(spec: FieldSpec, value: Any, key: str, picker: Optional[TeamPicker]) -> Any:
    label = f"{spec.label} *" if spec.required else spec.label
    if spec.kind == "textarea":
        return st.text_area(label, value=value or "", key=key, placeholder=spec.placeholder)
    if spec.kind == "int":
        return st.number_input(
            label,
            value=None if value in (None, "") else int(value),
            min_value=spec.min_value,
            max_value=spec.max_value,
            step=1,
            key=key,
        )
    if spec.kind == "date":
        return st.date_input(label, value=parse_date(value) if value else None, key=key)
    if spec.kind == "time":
        parsed = pd.to_datetime(value, format="%H:%M", errors="coerce") if value else None
        return st.time_input(
            label, value=None if parsed is None or pd.isna(parsed) else parsed.time(), step=900, key=key
        )
    if spec.kind == "choice":
        options = list(spec.choices)
        current = value
        if spec.name == "position":
            pos = Position.parse(value)
            current = pos.value if pos else None
        if len(options) <= 2:
            # home / away
            return st.radio(
                label,
                options,
                index=options.index(current) if current in options else 0,
                format_func=lambda v: v.capitalize(),
                horizontal=True,
                key=key,
            )
        return st.selectbox(
            label,
            options,
            index=options.index(current) if current in options else None,
            format_func=lambda v: v.capitalize(),
            placeholder="Select...",
            key=key,
        )
    if spec.kind == "team":
        if picker is None or picker.loading:
            st.caption("Loading teams...")
            return value
        if picker.error:
            st.error(f"Couldn't load teams: {picker.error}")
            return value
        if not picker.teams:
            st.warning("No teams available. Please add teams first.")
            st.page_link(resolve(ADMIN_TEAMS), label="Go to Teams Management")
            return None
        ids = [t["id"] for t in picker.teams]
        return st.selectbox(
            label,
            ids,
            index=ids.index(value) if value in ids else None,
            format_func=picker.label_for,
            placeholder="Select a team...",
            key=key,
        )
    if spec.kind == "bool":
        return st.checkbox(label, value=bool(value), key=key)
    if spec.kind == "color":
        return st.color_picker(label, value=value or spec.default or "#000000", key=key)
    return st.text_input(label, value=value or "", key=key, placeholder=spec.placeholder)


def render_form(
    screen: CrudScreen,
    picker: Optional[TeamPicker] = None,
    image_buckets: Optional[Dict[str, str]] = None,
) -> None:
    if screen.state != FORM_OPEN:
        return

    image_buckets = image_buckets or {}
    entity = screen.form.entity
    title = f"Edit {entity}" if screen.is_editing else f"Add new {entity}"

    with st.container(border=True):
        st.subheader(title.upper())

        if screen.form_error:
            st.error(screen.form_error)

        # Uploads sit outside st.form: file widgets there would only fire on submit.
        for spec in screen.form.fields:
            if spec.kind == "image":
                _render_image_field(screen, spec, image_buckets.get(spec.name, ""))

        values: Dict[str, Any] = {}
        with st.form(f"{entity}_form_{_nonce(screen)}"):
            for spec in screen.form.fields:
                if spec.kind == "image":
                    continue
                key = f"{entity}_{spec.name}_{_nonce(screen)}"
                values[spec.name] = _render_input(spec, screen.values.get(spec.name), key, picker)
                if spec.name in screen.field_errors:
                    st.caption(f":red[{screen.field_errors[spec.name]}]")

            c1, c2 = st.columns(2)
            with c1:
                cancelled = st.form_submit_button("Cancel", width="stretch")
            with c2:
                label = f"Update {entity.capitalize()}" if screen.is_editing else f"Add {entity.capitalize()}"
                submitted = st.form_submit_button(label, type="primary", width="stretch", disabled=screen.saving)

    if cancelled:
        screen.cancel()
        st.rerun()

    if submitted:
        for spec in screen.form.fields:
            if spec.kind == "image":
                values[spec.name] = screen.values.get(spec.name)
        was_editing = screen.is_editing
        if screen.submit(values):
            flash(f"{entity.capitalize()} {'updated' if was_editing else 'added'}.")
        st.rerun()


def render_table(screen: CrudScreen, to_display: Callable[[List[Dict[str, Any]]], pd.DataFrame], empty_msg: str):
    if screen.error:
        st.warning(f"Couldn't load {screen.form.entity}s: {screen.error}")
    if screen.loading:
        st.caption(f"Loading {screen.form.entity}s...")
        return
    if not screen.rows:
        st.info(empty_msg)
        return
    st.dataframe(to_display(screen.rows), width="stretch", hide_index=True)


def render_row_actions(screen: CrudScreen, row_label: Callable[[Dict[str, Any]], str], delete_warning: str = ""):
    """Pick a row, then edit it or delete it behind an explicit confirmation."""
    if not screen.rows:
        return

    entity = screen.form.entity
    labels = {}
    for row in screen.rows:
        labels[f"{row_label(row)} [#{row['id']}]"] = row

    st.markdown(f"### Manage a {entity}")
    # No default selection, so nothing is edited or deleted by accident.
    selected = st.selectbox(
        f"Select a {entity}",
        list(labels),
        index=None,
        placeholder="Choose an option",
        key=f"{entity}_row_select",
    )
    if selected is None:
        return
    row = labels[selected]

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Edit", width="stretch", key=f"{entity}_edit_{row['id']}"):
            screen.open_edit(row)
            st.session_state[f"{entity}_form_nonce"] = _nonce(screen) + 1
            st.rerun()
    with col2:
        with st.expander(f"Delete {entity}", expanded=False):
            st.warning(delete_warning or f"This permanently deletes the {entity}. This cannot be undone.")
            confirm = st.checkbox(
                f"I understand and want to delete this {entity}", key=f"{entity}_delete_confirm_{row['id']}"
            )
            if st.button("Delete", type="primary", width="stretch", disabled=not confirm, key=f"{entity}_delete_{row['id']}"):
                if screen.delete(row["id"], confirmed=confirm):
                    flash(f"Deleted {entity}.")
                    st.rerun()

    if screen.alert:
        st.error(screen.alert)
