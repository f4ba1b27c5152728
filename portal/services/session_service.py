"""
Login, remember-me and dashboard bootstrap use cases.

Passwords are compared in plain text: the portal makes no claim of being an
authentication boundary.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional
import logging
import secrets

from portal.core.config import Settings, get_settings
from portal.core.utils import dashboard_path, parse_dashboard_path
from portal.repositories.persistence import CollectionPersistence
from portal.services.record_service import PortalDataService
from portal.services.signup_service import SignupService

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "currentUser"
STUDENT = "student"
LECTURER = "lecturer"
ADMIN = "admin"
USER_TYPES = (STUDENT, LECTURER, ADMIN)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    pass


class TrustedRedirectDisabledError(AuthError):
    pass


@dataclass
class SessionUser:
    id: str
    name: str
    email: str
    type: str
    specialization: Optional[list[str]] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["specialization"] is None:
            del data["specialization"]
        return data

    @property
    def dashboard_path(self) -> str:
        return dashboard_path(self.id)


def _same_secret(given: str, stored: str) -> bool:
    return secrets.compare_digest((given or "").encode("utf-8"), (stored or "").encode("utf-8"))


class SessionService:
    """Resolves identities against the record collections and sign-up accounts."""

    def __init__(
        self,
        data: PortalDataService,
        signups: SignupService,
        persistence: CollectionPersistence,
        settings: Settings | None = None,
    ) -> None:
        self.data = data
        self.signups = signups
        self.persistence = persistence
        self.settings = settings or get_settings()

    # -------------------------------------- helpers --------------------------------------
    @staticmethod
    def _matches(record: dict, identifier: str) -> bool:
        if record.get("id") == identifier:
            return True
        email = str(record.get("email") or "")
        return bool(email) and email.lower() == identifier.lower()

    @staticmethod
    def _student_user(record: dict) -> SessionUser:
        return SessionUser(id=record["id"], name=record.get("name", ""), email=record.get("email", ""), type=STUDENT)

    @staticmethod
    def _lecturer_user(record: dict) -> SessionUser:
        return SessionUser(
            id=record["id"],
            name=record.get("name", ""),
            email=record.get("email", ""),
            type=LECTURER,
            specialization=list(record.get("specialization") or []),
        )

    def _authenticate(self, user_type: str, identifier: str, password: str) -> Optional[SessionUser]:
        if user_type == STUDENT:
            for record in self.data.students.list():
                if self._matches(record, identifier) and _same_secret(password, str(record.get("password") or "")):
                    return self._student_user(record)
            account = self.signups.find_by_email(identifier)
            if account and _same_secret(password, str(account.get("password") or "")):
                return SessionUser(
                    id=account["id"],
                    name=account.get("fullName", ""),
                    email=account["email"],
                    type=STUDENT,
                )
            return None
        if user_type == LECTURER:
            for record in self.data.teachers.list():
                if self._matches(record, identifier) and _same_secret(password, str(record.get("password") or "")):
                    return self._lecturer_user(record)
            return None
        if user_type == ADMIN:
            admin = {"id": self.settings.admin_id, "email": self.settings.admin_email}
            if self._matches(admin, identifier) and _same_secret(password, self.settings.admin_password):
                return SessionUser(id=self.settings.admin_id, name="Administrator", email=self.settings.admin_email, type=ADMIN)
        return None

    # -------------------------------------- login --------------------------------------
    def login(self, user_type: str, identifier: str, password: str, remember: bool = False) -> SessionUser:
        kind = (user_type or "").strip().lower()
        if kind == "teacher":
            kind = LECTURER
        ident = (identifier or "").strip()
        if kind not in USER_TYPES or not ident:
            raise InvalidCredentialsError("Invalid credentials")
        user = self._authenticate(kind, ident, password)
        if not user:
            logger.warning("Failed %s login for %s", kind, ident)
            raise InvalidCredentialsError("Invalid credentials")

        if remember:
            self.persistence.write_json(CURRENT_USER_KEY, user.to_dict())
        else:
            self.persistence.remove(CURRENT_USER_KEY)
        return user

    def current_user(self) -> Optional[SessionUser]:
        raw = self.persistence.read_json(CURRENT_USER_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return SessionUser(
                id=str(raw["id"]),
                name=raw.get("name", ""),
                email=raw.get("email", ""),
                type=raw["type"],
                specialization=raw.get("specialization"),
            )
        except KeyError:
            return None

    def logout(self) -> None:
        self.persistence.remove(CURRENT_USER_KEY)

    # -------------------------------------- trusted redirect --------------------------------------
    def bootstrap_from_path(self, path: str, current: Optional[SessionUser] = None) -> Optional[SessionUser]:
        """
        Establish a session from a ``/<id>/dashboard`` deep link without credentials.

        Only available when TRUSTED_REDIRECT_ENABLED is set. Students are
        checked before teachers and the first match wins.
        """
        if not self.settings.trusted_redirect_enabled:
            raise TrustedRedirectDisabledError("Trusted redirect is disabled")
        record_id = parse_dashboard_path(path)
        if record_id is None:
            return None
        if current and current.id == record_id:
            return current
        student = self.data.students.get_by_id(record_id)
        if student:
            return self._student_user(student)
        teacher = self.data.teachers.get_by_id(record_id)
        if teacher:
            return self._lecturer_user(teacher)
        return None
