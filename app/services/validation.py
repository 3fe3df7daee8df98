"""
Declarative request validation.

A rule set is an ordered list of FieldRules. Each entry names the property
reported to the client, the request attribute it reads, the rules to run and an
optional condition on the whole request. Every rule of every applicable field
runs; failures are collected into {property: [messages]}.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import HttpUrl, TypeAdapter, ValidationError

# Register user names: letters, digits, underscore and hyphen.
USER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

_HTTP_URL = TypeAdapter(HttpUrl)


class RequestValidationFailed(Exception):
    """Raised when a request violates its rule set. errors maps property name to messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed for: {', '.join(errors)}")


@dataclass(frozen=True)
class Rule:
    """A predicate over a single value and the message reported when it returns False."""

    check: Callable[[Any], bool]
    message: str


@dataclass(frozen=True)
class FieldRules:
    """Rules for one request attribute, applied only when `when(request)` is true."""

    name: str
    attr: str
    rules: tuple[Rule, ...]
    when: Callable[[Any], bool] | None = None


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# --- predicates ---


def not_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def max_length(limit: int) -> Callable[[Any], bool]:
    return lambda value: value is None or len(value) <= limit


def min_length(limit: int) -> Callable[[Any], bool]:
    return lambda value: value is None or len(value) >= limit


def matches(pattern: re.Pattern[str]) -> Callable[[Any], bool]:
    return lambda value: value is None or bool(pattern.match(value))


def is_http_url(value: Any) -> bool:
    """True for a well-formed absolute URL with scheme http or https."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        url = _HTTP_URL.validate_python(value.strip())
    except ValidationError:
        return False
    return url.scheme in ("http", "https")


def is_email(value: Any) -> bool:
    """Loose email check: exactly one '@', neither first nor last character."""
    if not isinstance(value, str):
        return False
    index = value.find("@")
    return index > 0 and index != len(value) - 1 and index == value.rfind("@")


def not_in_future(value: Any) -> bool:
    return value is None or as_utc(value) <= datetime.now(UTC)


def _present(attr: str) -> Callable[[Any], bool]:
    return lambda request: getattr(request, attr) is not None


def _non_empty(attr: str) -> Callable[[Any], bool]:
    return lambda request: bool(getattr(request, attr))


# --- rule sets ---

_TITLE_RULES = (
    Rule(not_empty, "Title must not be empty."),
    Rule(max_length(256), "Title must not exceed 256 characters."),
)
_URL_RULES = (
    Rule(not_empty, "URL must not be empty."),
    Rule(is_http_url, "URL must be an absolute http or https address."),
    Rule(max_length(2048), "URL must not exceed 2048 characters."),
)
_SOURCE_RULES = (Rule(max_length(128), "Source must not exceed 128 characters."),)
_SUMMARY_RULES = (Rule(max_length(1024), "Summary must not exceed 1024 characters."),)
_COLLECTED_AT_RULES = (Rule(not_in_future, "Collected time must not be in the future."),)

CREATE_SCRAPED_ITEM_RULES: tuple[FieldRules, ...] = (
    FieldRules("Title", "title", _TITLE_RULES),
    FieldRules("Url", "url", _URL_RULES),
    FieldRules("Source", "source", _SOURCE_RULES, when=_non_empty("source")),
    FieldRules("Summary", "summary", _SUMMARY_RULES, when=_non_empty("summary")),
    FieldRules("CollectedAt", "collected_at", _COLLECTED_AT_RULES, when=_present("collected_at")),
)

UPDATE_SCRAPED_ITEM_RULES: tuple[FieldRules, ...] = (
    FieldRules("Title", "title", _TITLE_RULES, when=_present("title")),
    FieldRules("Url", "url", _URL_RULES, when=_present("url")),
    FieldRules("Source", "source", _SOURCE_RULES, when=_non_empty("source")),
    FieldRules("Summary", "summary", _SUMMARY_RULES, when=_non_empty("summary")),
    FieldRules("CollectedAt", "collected_at", _COLLECTED_AT_RULES, when=_present("collected_at")),
)

REGISTER_RULES: tuple[FieldRules, ...] = (
    FieldRules(
        "Email",
        "email",
        (
            Rule(not_empty, "Email must not be empty."),
            Rule(is_email, "Email is not a valid email address."),
            Rule(max_length(256), "Email must not exceed 256 characters."),
        ),
    ),
    FieldRules(
        "UserName",
        "user_name",
        (
            Rule(not_empty, "User name must not be empty."),
            Rule(min_length(3), "User name must be at least 3 characters."),
            Rule(max_length(64), "User name must not exceed 64 characters."),
            Rule(
                matches(USER_NAME_PATTERN),
                "User name may only contain letters, digits, underscores and hyphens.",
            ),
        ),
    ),
    FieldRules(
        "Password",
        "password",
        (
            Rule(not_empty, "Password must not be empty."),
            Rule(min_length(6), "Password must be at least 6 characters."),
            Rule(max_length(128), "Password must not exceed 128 characters."),
        ),
    ),
    FieldRules(
        "DisplayName",
        "display_name",
        (Rule(max_length(128), "Display name must not exceed 128 characters."),),
        when=_non_empty("display_name"),
    ),
)

LOGIN_RULES: tuple[FieldRules, ...] = (
    FieldRules(
        "EmailOrUserName",
        "email_or_user_name",
        (
            Rule(not_empty, "Email or user name must not be empty."),
            Rule(max_length(256), "Email or user name must not exceed 256 characters."),
        ),
    ),
    FieldRules(
        "Password",
        "password",
        (
            Rule(not_empty, "Password must not be empty."),
            Rule(max_length(128), "Password must not exceed 128 characters."),
        ),
    ),
)


def collect_errors(request: Any, rule_set: Sequence[FieldRules]) -> dict[str, list[str]]:
    """Run every applicable rule and return the failures grouped by property name."""
    errors: dict[str, list[str]] = {}
    for field in rule_set:
        if field.when is not None and not field.when(request):
            continue
        value = getattr(request, field.attr)
        for rule in field.rules:
            if not rule.check(value):
                errors.setdefault(field.name, []).append(rule.message)
    return errors


def validate(request: Any, rule_set: Sequence[FieldRules]) -> None:
    """Raise RequestValidationFailed if any rule in rule_set fails for request."""
    errors = collect_errors(request, rule_set)
    if errors:
        raise RequestValidationFailed(errors)
