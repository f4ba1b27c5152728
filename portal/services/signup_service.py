"""
Self sign-up accounts.

Accounts live in the ``signupUsers`` slot and are never merged into the
student or teacher collections.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import logging
import re
import time

from portal.core.utils import utc_now_iso
from portal.repositories.persistence import CollectionPersistence

logger = logging.getLogger(__name__)

SIGNUP_USERS_KEY = "signupUsers"
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_AGE = 5
MAX_AGE = 120
MIN_PASSWORD_LENGTH = 6


class RegistrationError(Exception):
    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(errors.values()))
        self.errors = errors


def _text(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return "" if value is None else str(value)


def validate_signup(form: Mapping[str, Any]) -> dict[str, str]:
    """Return ``field -> message`` for every invalid field (empty when valid)."""
    errors: dict[str, str] = {}
    if not _text(form, "firstName").strip():
        errors["firstName"] = "First name is required"
    if not _text(form, "lastName").strip():
        errors["lastName"] = "Last name is required"

    try:
        age = int(_text(form, "age").strip())
    except ValueError:
        age = None
    if age is None or age < MIN_AGE or age > MAX_AGE:
        errors["age"] = f"Age must be between {MIN_AGE} and {MAX_AGE}"

    phone = _text(form, "phoneNumber")
    if not phone.strip():
        errors["phoneNumber"] = "Phone number is required"
    elif len(re.sub(r"\D", "", phone)) != 10:
        errors["phoneNumber"] = "Phone number must be 10 digits"

    if not _text(form, "gender"):
        errors["gender"] = "Gender is required"

    email = _text(form, "email")
    if not email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Invalid email format"

    password = _text(form, "password")
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password != _text(form, "confirmPassword"):
        errors["confirmPassword"] = "Passwords do not match"
    return errors


class SignupService:
    """Registers and lists self-created accounts."""

    def __init__(self, persistence: CollectionPersistence) -> None:
        self.persistence = persistence

    def list_accounts(self) -> list[dict]:
        accounts = self.persistence.read_json(SIGNUP_USERS_KEY, [])
        if not isinstance(accounts, list):
            return []
        return [dict(a) for a in accounts if isinstance(a, dict)]

    def find_by_email(self, email: str) -> dict | None:
        for account in self.list_accounts():
            if account.get("email") == email:
                return account
        return None

    def register(self, form: Mapping[str, Any]) -> dict:
        errors = validate_signup(form)
        if errors:
            raise RegistrationError(errors)

        accounts = self.list_accounts()
        email = _text(form, "email")
        if any(a.get("email") == email for a in accounts):
            raise RegistrationError({"email": "Email already registered"})

        first = _text(form, "firstName")
        last = _text(form, "lastName")
        account = {
            "id": str(int(time.time() * 1000)),
            "firstName": first,
            "lastName": last,
            "fullName": f"{first} {last}",
            "age": int(_text(form, "age").strip()),
            "phoneNumber": _text(form, "phoneNumber"),
            "gender": _text(form, "gender"),
            "email": email,
            "password": _text(form, "password"),
            "createdAt": utc_now_iso(),
        }
        accounts.append(account)
        result = self.persistence.write_json(SIGNUP_USERS_KEY, accounts)
        if not result.ok:
            raise RegistrationError({"submit": f"Failed to create account: {result.error}"})
        logger.info("Registered sign-up account %s", account["id"])
        return dict(account)
