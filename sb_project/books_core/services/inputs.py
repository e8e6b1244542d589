"""Coercion of payload values the HTTP layer hands to the services."""
import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date

from ..exceptions import ValidationError


def to_date(value, field, default=None):
    """Accept a date or an ISO-8601 string; None falls back to default."""
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{field} is required", field=field)
        return default
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)",
                              field=field)
    return parsed


def optional_date(value, field):
    return None if value in (None, "") else to_date(value, field)


def today():
    return timezone.localdate()


def to_amount(value, field, allow_zero=False):
    """Integer minor units; bools and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer in minor units",
                              field=field)
    if value < 0 or (value == 0 and not allow_zero):
        raise ValidationError(f"{field} must be positive", field=field)
    return value


def require(payload, key, field=None):
    value = payload.get(key)
    if value in (None, ""):
        raise ValidationError(f"{field or key} is required", field=field or key)
    return value
