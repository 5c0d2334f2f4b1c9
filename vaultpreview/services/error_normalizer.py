from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"

# Keys that never describe a form field.
_RESERVED_KEYS = frozenset({"non_field_errors", "detail", "message", "errors", "status", "statusText"})

FieldErrorSink = Callable[[str, str], None]


@dataclass(frozen=True)
class NormalizedError:
    message: str
    field_errors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    has_field_errors: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.field_errors, MappingProxyType):
            object.__setattr__(self, "field_errors", MappingProxyType(dict(self.field_errors)))


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def _field_message(value: Any) -> str | None:
    """Return the message carried by a field value, or None when it carries none."""
    if isinstance(value, (list, tuple)):
        return _stringify(value[0]) if value else None
    if isinstance(value, str):
        return value or None
    return None


def _from_exception(error: BaseException, sink: FieldErrorSink | None) -> NormalizedError:  # noqa: ARG001
    return NormalizedError(message=str(error) or DEFAULT_ERROR_MESSAGE)


def _fallback(error: Any, sink: FieldErrorSink | None) -> NormalizedError:  # noqa: ARG001
    return NormalizedError(message=DEFAULT_ERROR_MESSAGE)


def _from_detail(error: Mapping, sink: FieldErrorSink | None) -> NormalizedError:  # noqa: ARG001
    detail = error["detail"]
    if isinstance(detail, (list, tuple)):
        detail = detail[0]
    return NormalizedError(message=_stringify(detail))


def _from_message(error: Mapping, sink: FieldErrorSink | None) -> NormalizedError:  # noqa: ARG001
    return NormalizedError(message=error["message"])


def _errors_result(error: Mapping) -> tuple[str, str | None, bool] | None:
    errors = error.get("errors")
    if not errors:
        return None
    if isinstance(errors, (list, tuple)):
        return _stringify(errors[0]), None, False
    if isinstance(errors, Mapping):
        key, value = next(iter(errors.items()))
        message = _field_message(value)
        if message is not None:
            return message, str(key), True
    return None


def _from_errors(error: Mapping, sink: FieldErrorSink | None) -> NormalizedError:
    message, key, is_field = _errors_result(error)  # type: ignore[misc]
    if not is_field:
        return NormalizedError(message=message)
    if sink is not None:
        sink(key, message)
    return NormalizedError(message=f"{key}: {message}", field_errors={key: message}, has_field_errors=True)


def _from_non_field_errors(error: Mapping, sink: FieldErrorSink | None) -> NormalizedError:  # noqa: ARG001
    return NormalizedError(message=_stringify(error["non_field_errors"][0]))


def _field_entries(error: Mapping) -> list[tuple[str, str]]:
    entries: list[tuple[str, str]] = []
    for key, value in error.items():
        if key in _RESERVED_KEYS:
            continue
        message = _field_message(value)
        if message is not None:
            entries.append((str(key), message))
    return entries


def _from_fields(error: Mapping, sink: FieldErrorSink | None) -> NormalizedError:
    entries = _field_entries(error)
    if sink is not None:
        for key, message in entries:
            sink(key, message)
    key, message = entries[0]
    return NormalizedError(message=f"{key}: {message}", field_errors=dict(entries), has_field_errors=True)


_RULES: list[tuple[Callable[[Any], bool], Callable[[Any, FieldErrorSink | None], NormalizedError]]] = [
    (lambda e: isinstance(e, BaseException), _from_exception),
    (lambda e: not isinstance(e, Mapping), _fallback),
    (lambda e: bool(e.get("detail")), _from_detail),
    (lambda e: isinstance(e.get("message"), str) and bool(e.get("message")), _from_message),
    (lambda e: _errors_result(e) is not None, _from_errors),
    (lambda e: isinstance(e.get("non_field_errors"), (list, tuple)) and bool(e.get("non_field_errors")), _from_non_field_errors),
    (lambda e: bool(_field_entries(e)), _from_fields),
]


def normalize_error(error: Any, sink: FieldErrorSink | None = None) -> NormalizedError:
    """
    Collapse any error shape into a single user-facing message.

    Rules are evaluated in order and the first match wins:
      - exceptions: their text
      - anything that is not a mapping: generic fallback
      - `detail`, then string `message`, then `errors` (list or field mapping)
      - `non_field_errors`
      - remaining keys treated as per-field errors

    For per-field errors every qualifying field is reported to `sink` (e.g. a form's
    error setter) while the returned message summarizes only the first one.
    """
    for predicate, extract in _RULES:
        if predicate(error):
            return extract(error, sink)
    return _fallback(error, sink)
