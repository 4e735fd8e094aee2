# erp_core/common/decimals.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from rest_framework.exceptions import ValidationError

# Exclusive ceiling for DecimalField(max_digits=12, decimal_places=2) columns.
MONEY_CEILING = Decimal("1e10")
MONEY_CEILING_MSG = "Ensure that there are no more than 12 digits in total."


def to_decimal(value, field_name: str) -> Decimal:
    """
    Accepts Decimal / str / int / float and converts to Decimal safely.
    Raises ValidationError for invalid values.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() handles int/float/str uniformly
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError({field_name: ["Invalid decimal value."]})
    if not result.is_finite():
        raise ValidationError({field_name: ["Invalid decimal value."]})
    return result
