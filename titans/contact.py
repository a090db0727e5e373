from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

FIELDS = ("name", "email", "phone", "subject", "message")
REQUIRED_FIELDS = ("name", "email", "subject", "message")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s\-+()]+$")

IDLE = "idle"
SUBMITTING = "submitting"
SUCCESS = "success"
ERROR = "error"


def validate_field(name: str, value: Optional[str]) -> str:
    """Error message for one field, or '' when valid."""
    value = value or ""
    if name == "name":
        return "Name must be at least 2 characters" if len(value.strip()) < 2 else ""
    if name == "email":
        return "" if EMAIL_RE.fullmatch(value) else "Please enter a valid email address"
    if name == "phone":
        # Optional, but must look like a phone number when given
        if value and not PHONE_RE.fullmatch(value):
            return "Please enter a valid phone number"
        return ""
    if name == "subject":
        return "Subject must be at least 3 characters" if len(value.strip()) < 3 else ""
    if name == "message":
        return "Message must be at least 10 characters" if len(value.strip()) < 10 else ""
    return ""


def _empty_values() -> Dict[str, str]:
    return {f: "" for f in FIELDS}


class ContactForm:
    """
    Per field: untouched until first blur, then validated on blur and on
    every change after that. Submit walks idle -> submitting -> success|error.
    """

    def __init__(self):
        self.values: Dict[str, str] = _empty_values()
        self.touched: Dict[str, bool] = {}
        self.errors: Dict[str, str] = {}
        self.status = IDLE

    def change(self, name: str, value: str) -> None:
        self.values[name] = value
        if self.touched.get(name):
            self.errors[name] = validate_field(name, value)

    def blur(self, name: str, value: Optional[str] = None) -> None:
        if value is not None:
            self.values[name] = value
        self.touched[name] = True
        self.errors[name] = validate_field(name, self.values.get(name, ""))

    def error_for(self, name: str) -> str:
        return self.errors.get(name, "") if self.touched.get(name) else ""

    @property
    def is_submitting(self) -> bool:
        return self.status == SUBMITTING

    def validate_all(self) -> bool:
        """Check every field at once, marking failures touched. True when sendable."""
        new_errors = {}
        for name in REQUIRED_FIELDS:
            err = validate_field(name, self.values.get(name, ""))
            if err:
                new_errors[name] = err
        phone_err = validate_field("phone", self.values.get("phone", ""))
        if phone_err:
            new_errors["phone"] = phone_err

        if new_errors:
            self.errors = new_errors
            self.touched = {name: True for name in REQUIRED_FIELDS}
            if phone_err:
                self.touched["phone"] = True
            return False
        return True

    def submit(self, send: Callable[[Dict[str, str]], bool]) -> str:
        """Validate everything, then hand the payload to `send`. Returns the new status."""
        if not self.validate_all():
            return self.status

        self.status = SUBMITTING
        try:
            ok = bool(send(dict(self.values)))
        except Exception as e:
            logger.error("Contact form submission error: %s", e)
            ok = False

        if ok:
            self.status = SUCCESS
            self.values = _empty_values()
            self.errors = {}
            self.touched = {}
        else:
            self.status = ERROR
        return self.status

    def reset_status(self) -> None:
        self.status = IDLE


def post_to_relay(endpoint: str, timeout_s: int = 30) -> Callable[[Dict[str, str]], bool]:
    """Sender that POSTs the payload as JSON to a form relay (e.g. Formspree)."""

    def _send(payload: Dict[str, str]) -> bool:
        r = requests.post(
            endpoint,
            json=payload,
            headers={"Accept": "application/json"},
            timeout=timeout_s,
        )
        if not r.ok:
            logger.warning("Contact relay returned %s: %s", r.status_code, r.text)
        return r.ok

    return _send


def submit_to_relay(form: ContactForm, endpoint: Optional[str]) -> str:
    """Validate first, then send through the relay. A missing endpoint raises RuntimeError."""
    if not form.validate_all():
        return form.status
    if not endpoint:
        raise RuntimeError("Contact form is not configured.")
    return form.submit(post_to_relay(endpoint))
