"""
Field checks shared by the entity services.

Request bodies arrive loosely typed (numbers for phones, strings for roles)
and are normalized here; anything unusable raises InvalidArgumentError.
"""

import math
from typing import Any, Optional

from backend.app.core.exceptions import InvalidArgumentError
from backend.app.models.enums import UserRole


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(**fields: Any) -> dict:
    """
    Cast each field to a stripped string, failing on the first blank one.

    Missing fields are reported together, in argument order.
    """
    missing = [name for name, value in fields.items() if is_blank(value)]
    if missing:
        raise InvalidArgumentError(
            f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
            details={"missing": missing},
        )
    return {name: str(value).strip() for name, value in fields.items()}


def optional_text(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    return str(value).strip()


def check_lengths(model: Any, **values: Optional[str]) -> None:
    """
    Reject text longer than the model's column allows.

    Limits come from the ``String(n)`` column types; ``None`` values and
    unbounded columns are skipped.
    """
    columns = model.__table__.columns
    for name, value in values.items():
        length = getattr(columns[name].type, "length", None)
        if value is not None and length is not None and len(value) > length:
            raise InvalidArgumentError(
                f"{name} must be at most {length} characters",
                details={"field": name, "max_length": length},
            )


def normalize_role(value: Any, default: Optional[UserRole] = UserRole.PASSENGER) -> UserRole:
    """Accept 0/1 as int or numeric string; absent means ``default``."""
    if value is None and default is not None:
        return default
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError("role must be 0 or 1", details={"role": value})
    try:
        number = float(str(value).strip())
    except ValueError:
        raise InvalidArgumentError("role must be 0 or 1", details={"role": value})
    if not number.is_integer() or int(number) not in (UserRole.PASSENGER, UserRole.RIDER):
        raise InvalidArgumentError("role must be 0 or 1", details={"role": value})
    return UserRole(int(number))


def optional_float(name: str, value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number", details={name: value})
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number", details={name: value})
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be a number", details={name: value})
    return number
