"""Session-backed identity provider over the ``user`` table."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from flask import session
from werkzeug.security import check_password_hash, generate_password_hash

from jobwise.domain import User
from jobwise.errors import ConstraintViolation, PermissionDenied, ValidationError
from jobwise.forms import LoginForm, ProfileForm, SignupForm, validated
from jobwise.mapping import format_timestamp, user_from_row
from jobwise.store import DomainStore

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[User]], None]


class SessionIdentityProvider:
    """
    Signs users up and in, and keeps the signed-in user id in the Flask
    session. Listeners registered with ``on_auth_change`` are told about
    every change of the signed-in user.
    """

    def __init__(self, store: DomainStore) -> None:
        self._store = store
        self._listeners: list[AuthListener] = []

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        """Register ``callback``; the returned function unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, user: Optional[User]) -> None:
        for listener in list(self._listeners):
            listener(user)

    def _start_session(self, user: User) -> None:
        session.clear()
        session["user_id"] = user.id
        session["role"] = user.role.value
        session["username"] = user.display_name

    # ================= SIGNUP =================
    def signup(self, username: str, email: str, password: str, role: str) -> User:
        data = validated(SignupForm, username=username, email=email, password=password, role=role)
        email = data["email"].strip().lower()
        if self._store.select_where("user", email=email):
            raise ValidationError("User already exists", errors={"email": ["User already exists"]})

        now = format_timestamp(datetime.now(timezone.utc))
        try:
            row = self._store.insert("user", {
                "username": data["username"].strip(),
                "email": email,
                "password": generate_password_hash(data["password"]),
                "role": data["role"],
                "created_at": now,
            })
        except ConstraintViolation as exc:
            raise ValidationError("User already exists", errors={"email": ["User already exists"]}) from exc

        user = user_from_row(row)
        self._start_session(user)
        logger.info("User %s signed up as %s", user.id, user.role.value)
        self._notify(user)
        return user

    # ================= LOGIN =================
    def login(self, email: str, password: str) -> User:
        data = validated(LoginForm, email=email, password=password)
        rows = self._store.select_where("user", email=data["email"].strip().lower())
        if not rows or not check_password_hash(rows[0]["password"], data["password"]):
            logger.warning("Failed login for %s", data["email"])
            raise PermissionDenied("Invalid credentials")

        user = user_from_row(rows[0])
        self._start_session(user)
        self._notify(user)
        return user

    # ================= LOGOUT =================
    def logout(self) -> None:
        session.clear()
        self._notify(None)

    def current_user(self) -> Optional[User]:
        user_id = session.get("user_id")
        if user_id is None:
            return None
        row = self._store.get("user", user_id)
        if row is None:
            session.clear()
            return None
        return user_from_row(row)

    def update_profile(self, username: str) -> User:
        user = self.current_user()
        if user is None:
            raise PermissionDenied("Sign in to update your profile")
        data = validated(ProfileForm, username=username)
        row = self._store.update("user", user.id, {
            "username": data["username"].strip(),
            "updated_at": format_timestamp(datetime.now(timezone.utc)),
        })
        user = user_from_row(row)
        session["username"] = user.display_name
        self._notify(user)
        return user
