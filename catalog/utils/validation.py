"""
Declarative form validation.

A form is checked against an ordered list of `Rule`s. Every rule runs and
every violation is reported, so the caller can show all problems at once.
Sanitisation is a separate pass, applied only to input that validated.
"""
from __future__ import annotations

import datetime
import html
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from dateutil.parser import isoparse

from catalog.schemas.form import FieldError

Check = Callable[[str], bool]
Sanitizer = Callable[[str], str]

_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class Rule:
    field: str
    check: Check
    message: str
    # skip the rule when the submitted value is empty
    optional: bool = False


def trim(value: str) -> str:
    return value.strip()


def escape(value: str) -> str:
    """HTML-escape untrusted text, quotes included."""
    return html.escape(value, quote=True)


def is_present(value: str) -> bool:
    return len(value.strip()) >= 1


def is_alphanumeric(value: str) -> bool:
    return _ALPHANUMERIC.fullmatch(value.strip()) is not None


def parse_iso8601(value: str) -> datetime.date | None:
    """
    Parse an ISO-8601 date or date-time. Reduced precision ("1920",
    "1920-05") resolves to the first day of the period; date-times are
    truncated to their date.
    """
    try:
        return isoparse(value).date()
    except (ValueError, OverflowError):
        return None


def is_iso8601(value: str) -> bool:
    return parse_iso8601(value.strip()) is not None


def validate(values: Mapping[str, str | None], rules: Sequence[Rule]) -> list[FieldError]:
    """Evaluate `rules` in order and collect every violation."""
    errors: list[FieldError] = []

    for rule in rules:
        value = values.get(rule.field) or ""
        if rule.optional and not value:
            continue
        if not rule.check(value):
            errors.append(FieldError(field=rule.field, message=rule.message))
    return errors


def sanitize(
    values: Mapping[str, str | None],
    sanitizers: Mapping[str, Sequence[Sanitizer]],
) -> dict[str, str]:
    """Return a new mapping with each field run through its sanitizers."""
    cleaned: dict[str, str] = {}
    for field, chain in sanitizers.items():
        value = values.get(field) or ""
        for step in chain:
            value = step(value)
        cleaned[field] = value
    return cleaned
