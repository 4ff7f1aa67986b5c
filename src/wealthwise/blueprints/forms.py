"""Shared request-payload validation for the API blueprints.

Each blueprint defines a ``*Form`` subclass whose :meth:`clean` walks the
payload field by field.  ``cleaned`` ends up keyed by model attribute names
so views can pass it straight into a model or an update.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from ..errors import ApiError

_MISSING = object()

# Upper bound for day-count query parameters
MAX_PERIOD_DAYS = 3650


def parse_datetime(raw: Any) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or ISO-8601 strings into naive UTC datetimes."""

    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = (
                datetime.strptime(text, "%Y-%m-%d")
                if len(text) == 10
                else datetime.fromisoformat(text)
            )
        except ValueError:
            return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(slots=True)
class PayloadForm:
    """Base form: bind a JSON mapping, validate, expose ``cleaned`` values."""

    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)
    cleaned: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], *, partial: bool = False):
        """Create a form populated from request data.

        ``partial`` forms (updates) only validate the keys that are present.
        """

        form = cls(partial=partial)
        form.load(data or {})
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = dict(data)

    def validate(self) -> bool:
        self.errors.clear()
        self.cleaned = {}
        self.clean()
        return not self.errors

    def validated(self) -> dict[str, Any]:
        """Return ``cleaned`` or raise a 400 listing every field error."""

        if not self.validate():
            raise ApiError.validation(self.errors)
        return self.cleaned

    def clean(self) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)

    def _raw(self, key: str, required: bool, label: str) -> Any:
        """Return the raw value, ``_MISSING`` when absent (recording required errors)."""

        if key not in self.raw_data:
            if required and not self.partial:
                self._add_error(key, f"{label} is required")
            return _MISSING
        value = self.raw_data[key]
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                self._add_error(key, f"{label} is required")
                return _MISSING
            return None
        return value

    def _text(
        self,
        key: str,
        attr: str,
        label: str,
        *,
        required: bool = False,
        max_length: Optional[int] = None,
        nullable: bool = False,
    ) -> None:
        value = self._raw(key, required, label)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None if nullable else ""
            return
        text = str(value).strip()
        if max_length is not None and len(text) > max_length:
            self._add_error(key, f"{label} cannot exceed {max_length} characters")
            return
        self.cleaned[attr] = text

    def _number(
        self,
        key: str,
        attr: str,
        label: str,
        *,
        required: bool = False,
        minimum: Optional[float] = None,
        exclusive_minimum: bool = False,
        maximum: Optional[float] = None,
        integer: bool = False,
    ) -> None:
        value = self._raw(key, required, label)
        if value is _MISSING or value is None:
            return
        kind = "whole number" if integer else "number"
        if isinstance(value, bool):
            self._add_error(key, f"{label} must be a {kind}")
            return
        try:
            number = int(value) if integer else float(value)
        except (TypeError, ValueError):
            self._add_error(key, f"{label} must be a {kind}")
            return
        if minimum is not None:
            too_small = number <= minimum if exclusive_minimum else number < minimum
            if too_small:
                relation = "greater than" if exclusive_minimum else "at least"
                self._add_error(key, f"{label} must be {relation} {minimum:g}")
                return
        if maximum is not None and number > maximum:
            self._add_error(key, f"{label} cannot exceed {maximum:g}")
            return
        self.cleaned[attr] = number

    def _date(self, key: str, attr: str, label: str, *, required: bool = False) -> None:
        value = self._raw(key, required, label)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None
            return
        parsed = parse_datetime(value)
        if parsed is None:
            self._add_error(key, f"{label} must be a valid date")
            return
        self.cleaned[attr] = parsed

    def _choice(
        self,
        key: str,
        attr: str,
        label: str,
        choices: Iterable[str],
        *,
        required: bool = False,
    ) -> None:
        value = self._raw(key, required, label)
        if value is _MISSING or value is None:
            return
        options = tuple(choices)
        if value not in options:
            self._add_error(key, f"{label} must be one of: {', '.join(options)}")
            return
        self.cleaned[attr] = value

    def _flag(self, key: str, attr: str, label: str) -> None:
        value = self.raw_data.get(key, _MISSING)
        if value is _MISSING or value is None:
            return
        if not isinstance(value, bool):
            self._add_error(key, f"{label} must be true or false")
            return
        self.cleaned[attr] = value

    def _string_list(self, key: str, attr: str, label: str) -> None:
        value = self.raw_data.get(key, _MISSING)
        if value is _MISSING or value is None:
            return
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self._add_error(key, f"{label} must be a list of strings")
            return
        self.cleaned[attr] = [v.strip() for v in value if v.strip()]


def query_int(
    args: Mapping[str, Any], key: str, default: int, *, maximum: Optional[int] = None
) -> int:
    """Read a positive integer query parameter, falling back to ``default``.

    Values above ``maximum`` are clamped to it.
    """

    try:
        value = int(args.get(key, default))
    except (TypeError, ValueError):
        return default
    if value <= 0:
        return default
    if maximum is not None and value > maximum:
        return maximum
    return value


def query_date(args: Mapping[str, Any], key: str) -> Optional[datetime]:
    raw = args.get(key)
    if not raw:
        return None
    parsed = parse_datetime(raw)
    if parsed is None:
        raise ApiError.bad_request(f"{key} must be a valid date")
    return parsed


def query_flag(args: Mapping[str, Any], key: str) -> Optional[bool]:
    raw = args.get(key)
    if raw is None or raw == "":
        return None
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}
