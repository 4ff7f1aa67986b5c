"""Registration and login payload validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..forms import PayloadForm

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def clean_profile(form: PayloadForm, data) -> dict:
    """Validate the optional ``profile`` object shared by register and profile updates."""

    if data is None:
        return {}
    if not isinstance(data, dict):
        form._add_error("profile", "Profile must be an object")
        return {}
    profile = ProfileForm.from_mapping(data, partial=True)
    if not profile.validate():
        for key, messages in profile.errors.items():
            for message in messages:
                form._add_error(f"profile.{key}", message)
    return profile.cleaned


@dataclass(slots=True)
class ProfileForm(PayloadForm):
    def clean(self) -> None:
        self._text("firstName", "first_name", "First name", max_length=50, nullable=True)
        self._text("lastName", "last_name", "Last name", max_length=50, nullable=True)
        self._text("avatar", "avatar", "Avatar", max_length=255, nullable=True)
        self._text("phone", "phone", "Phone", max_length=20, nullable=True)
        self._text("currency", "currency", "Currency", max_length=3)
        self._text("timezone", "timezone", "Timezone", max_length=64)


@dataclass(slots=True)
class RegisterForm(PayloadForm):
    def clean(self) -> None:
        self._text("email", "email", "Email", required=True, max_length=255)
        email = self.cleaned.get("email")
        if email is not None and not EMAIL_PATTERN.match(email):
            self._add_error("email", "Please provide a valid email")
        password = self.raw_data.get("password")
        if not isinstance(password, str) or not password:
            self._add_error("password", "Password is required")
        else:
            self.cleaned["password"] = password
        self.cleaned["profile"] = clean_profile(self, self.raw_data.get("profile"))


@dataclass(slots=True)
class LoginForm(PayloadForm):
    def clean(self) -> None:
        self._text("email", "email", "Email", required=True, max_length=255)
        password = self.raw_data.get("password")
        if not isinstance(password, str) or not password:
            self._add_error("password", "Password is required")
        else:
            self.cleaned["password"] = password
