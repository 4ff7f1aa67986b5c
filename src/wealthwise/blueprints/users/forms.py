"""Profile, preference and password payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import ROLES, THEMES
from ..auth.forms import ProfileForm
from ..forms import PayloadForm


@dataclass(slots=True)
class ProfileUpdateForm(PayloadForm):
    """Accepts profile fields at the top level or nested under ``profile``."""

    def clean(self) -> None:
        nested = self.raw_data.get("profile")
        source = nested if isinstance(nested, dict) else self.raw_data
        profile = ProfileForm.from_mapping(source, partial=True)
        if not profile.validate():
            for key, messages in profile.errors.items():
                for message in messages:
                    self._add_error(key, message)
        self.cleaned.update(profile.cleaned)
        self._choice("role", "role", "Role", ROLES)


@dataclass(slots=True)
class PreferencesForm(PayloadForm):
    def clean(self) -> None:
        self._flag("notifications", "notifications_enabled", "Notifications")
        self._flag("weeklyReport", "weekly_report", "Weekly report")
        self._choice("theme", "theme", "Theme", THEMES)


@dataclass(slots=True)
class ChangePasswordForm(PayloadForm):
    def clean(self) -> None:
        for key, label in (("currentPassword", "Current password"), ("newPassword", "New password")):
            value = self.raw_data.get(key)
            if not isinstance(value, str) or not value:
                self._add_error(key, f"{label} is required")
            else:
                self.cleaned[key] = value
