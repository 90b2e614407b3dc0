# LarpManager - https://larpmanager.com
# Copyright (C) 2025 Scanagatta Mauro
#
# This file is part of LarpManager and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# commercial@larpmanager.com
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from chirho.models.accounting import PaymentBalanceStatus
from chirho.utils.exceptions import ValidationError

CENTS = Decimal("0.01")

# Largest value a DecimalField(max_digits=10, decimal_places=2) can store
MAX_AMOUNT = Decimal("99999999.99")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Coerce an amount to Decimal.

    Floats go through their string representation, so 0.1 becomes Decimal('0.1')
    and not its binary approximation.

    Args:
        value: Decimal, int, float or numeric string
        field: Name used in the error message

    Returns:
        Decimal: The coerced amount

    Raises:
        ValidationError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {field}")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as err:
        raise ValidationError(f"Invalid {field}") from err
    if not result.is_finite():
        raise ValidationError(f"Invalid {field}")
    return result


def to_amount(value: Any, field: str = "amount", *, allow_zero: bool = False, message: str | None = None) -> Decimal:
    """Coerce a money amount to Decimal rounded to cents.

    The result fits the amount columns of the ledger, so what is returned is
    exactly what gets stored.

    Args:
        value: Decimal, int, float or numeric string
        field: Name used in the error messages
        allow_zero: Accept 0 as a valid amount
        message: Error message for a zero or negative amount

    Returns:
        Decimal: The amount with two decimals

    Raises:
        ValidationError: If the value is not an amount the ledger can store
    """
    try:
        amount = to_decimal(value, field).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as err:
        raise ValidationError(f"Invalid {field}") from err
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Invalid {field}")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(message or f"{field.capitalize()} must be greater than 0")
    return amount


def classify_payment_status(total_due: Any, amount_paid: Any) -> PaymentBalanceStatus:
    """Derive the balance status from the amount due and the amount paid.

    Args:
        total_due: Total amount owed by the registration
        amount_paid: Sum of the succeeded payments

    Returns:
        PaymentBalanceStatus: paid_full when nothing remains, overpaid when the
            remainder is negative, partial when something was paid, else unpaid
    """
    total_due = to_decimal(total_due, "total due")
    amount_paid = to_decimal(amount_paid, "amount paid")
    remaining = total_due - amount_paid

    if remaining == 0:
        return PaymentBalanceStatus.PAID_FULL
    if remaining < 0:
        return PaymentBalanceStatus.OVERPAID
    if amount_paid > 0:
        return PaymentBalanceStatus.PARTIAL
    return PaymentBalanceStatus.UNPAID
