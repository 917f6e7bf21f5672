from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Type, TypeVar
from urllib.parse import urlparse

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import ErrorCode, ValidationError

E = TypeVar("E", bound=Enum)


def _invalid(field_name: str) -> ValidationError:
    return ValidationError(ErrorCode.INVALID_INPUT, field=field_name)


def optional_text(value: object, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(field_name)
    return value.strip() or None


def require_int(value: object, field_name: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    # bool is an int subclass; "true" is never a valid count.
    if isinstance(value, bool):
        raise _invalid(field_name)
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise _invalid(field_name)
    if isinstance(value, float) and value != number:
        raise _invalid(field_name)
    if minimum is not None and number < minimum:
        raise _invalid(field_name)
    if maximum is not None and number > maximum:
        raise _invalid(field_name)
    return number


def require_positive_int(value: object, field_name: str) -> int:
    return require_int(value, field_name, minimum=1)


def require_enum(enum_cls: Type[E], value: object, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        raise _invalid(field_name)


def require_url_list(value: object, field_name: str = "attachment_urls") -> list[str]:
    """Attachment URLs are opaque strings; only the http(s) shape is checked."""

    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise _invalid(field_name)

    urls: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise _invalid(field_name)
        parsed = urlparse(item.strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise _invalid(field_name)
        urls.append(item.strip())
    return urls


def require_pagination(page: object, limit: object) -> tuple[int, int]:
    return (
        require_int(page, "page", minimum=1),
        require_int(limit, "limit", minimum=1, maximum=MAX_PAGE_SIZE),
    )
