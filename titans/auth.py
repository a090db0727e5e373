from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import bcrypt

from titans.config import get_optional
from titans.db import get_conn

logger = logging.getLogger(__name__)

SIGNED_OUT = "signed_out"
LOADING = "loading"
SIGNED_IN = "signed_in"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def hash_password(password: str) -> str:
    pw = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pw, salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class AuthError(Exception):
    pass


class AuthProvider:
    """Email/password accounts for the admin panel, stored in the admins table."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path

    def count_admins(self) -> int:
        conn = get_conn(self.db_path)
        try:
            row = conn.execute("SELECT COUNT(*) AS n FROM admins;").fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def create_admin(self, email: str, password: str) -> Dict[str, Any]:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValueError("Email and password are required.")

        conn = get_conn(self.db_path)
        try:
            conn.execute(
                """
                INSERT INTO admins (email, password_hash, is_active, created_at)
                VALUES (?, ?, 1, ?);
                """,
                (email, hash_password(password), _now_iso()),
            )
            conn.commit()
            row = conn.execute(
                "SELECT id, email, is_active, created_at, last_login_at FROM admins WHERE email = ?;",
                (email,),
            ).fetchone()
            logger.info("Created admin account %s", email)
            return dict(row)
        finally:
            conn.close()

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Return the signed-in user (without the hash) or raise AuthError."""
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthError("Email and password are required.")

        conn = get_conn(self.db_path)
        try:
            row = conn.execute(
                """
                SELECT id, email, password_hash, is_active, created_at, last_login_at
                FROM admins
                WHERE email = ?;
                """,
                (email,),
            ).fetchone()

            if row is None or int(row["is_active"]) != 1 or not verify_password(password, row["password_hash"]):
                raise AuthError("Invalid login credentials")

            conn.execute("UPDATE admins SET last_login_at = ? WHERE id = ?;", (_now_iso(), row["id"]))
            conn.commit()

            user = dict(row)
            user.pop("password_hash", None)
            return user
        finally:
            conn.close()

    def sign_out(self, user: Optional[Dict[str, Any]]) -> None:
        # Sessions live client-side in Streamlit state; nothing to revoke server-side.
        if user:
            logger.info("Admin %s signed out", user.get("email"))


def bootstrap_admin(provider: Optional[AuthProvider] = None) -> Optional[Dict[str, Any]]:
    """
    First boot: create the initial admin from ADMIN_EMAIL / ADMIN_PASSWORD
    when the admins table is empty.
    """
    provider = provider or AuthProvider()
    if provider.count_admins() != 0:
        return None
    email = get_optional("ADMIN_EMAIL")
    password = get_optional("ADMIN_PASSWORD")
    if not email or not password:
        logger.warning("No admin accounts and ADMIN_EMAIL/ADMIN_PASSWORD not set; admin login disabled")
        return None
    return provider.create_admin(email, password)


@dataclass
class AuthResult:
    ok: bool
    error: Optional[str] = None


class Session:
    """
    Explicit admin session. Pages receive it rather than reaching into
    global state; sign_in/sign_out report failures instead of raising.
    """

    def __init__(self, provider: Optional[AuthProvider] = None):
        self.provider = provider or AuthProvider()
        self.user: Optional[Dict[str, Any]] = None
        self.status = SIGNED_OUT

    @property
    def is_signed_in(self) -> bool:
        return self.status == SIGNED_IN and self.user is not None

    def sign_in(self, email: str, password: str) -> AuthResult:
        self.status = LOADING
        try:
            user = self.provider.sign_in(email, password)
        except AuthError as e:
            self.user = None
            self.status = SIGNED_OUT
            return AuthResult(ok=False, error=str(e))
        except Exception as e:
            logger.error("Sign-in failed: %s", e)
            self.user = None
            self.status = SIGNED_OUT
            return AuthResult(ok=False, error=str(e) or "Failed to sign in")

        self.user = user
        self.status = SIGNED_IN
        logger.info("Admin %s signed in", user["email"])
        return AuthResult(ok=True)

    def sign_out(self) -> AuthResult:
        try:
            self.provider.sign_out(self.user)
        except Exception as e:
            logger.error("Sign-out failed: %s", e)
            return AuthResult(ok=False, error=str(e))
        finally:
            self.user = None
            self.status = SIGNED_OUT
        return AuthResult(ok=True)
