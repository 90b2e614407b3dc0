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

from decimal import Decimal

import pytest

from chirho.accounting.base import classify_payment_status, to_amount, to_decimal
from chirho.models.accounting import PaymentBalanceStatus
from chirho.utils.exceptions import ValidationError


class TestClassifyPaymentStatus:
    """Test balance status derivation from amount due and amount paid"""

    @pytest.mark.parametrize(
        ("total_due", "amount_paid", "expected"),
        [
            (Decimal("100.00"), Decimal("0.00"), PaymentBalanceStatus.UNPAID),
            (Decimal("100.00"), Decimal("40.00"), PaymentBalanceStatus.PARTIAL),
            (Decimal("100.00"), Decimal("100.00"), PaymentBalanceStatus.PAID_FULL),
            (Decimal("100.00"), Decimal("100.01"), PaymentBalanceStatus.OVERPAID),
            (Decimal("0.00"), Decimal("0.00"), PaymentBalanceStatus.PAID_FULL),
            (Decimal("0.00"), Decimal("5.00"), PaymentBalanceStatus.OVERPAID),
        ],
    )
    def test_statuses(self, total_due, amount_paid, expected):
        status = classify_payment_status(total_due, amount_paid)
        assert status == expected, f"Expected {expected} for {total_due}/{amount_paid}, got {status}"

    def test_exact_boundary_is_paid_full(self):
        """Paying exactly the amount due is never partial nor overpaid"""
        assert classify_payment_status(Decimal("249.99"), Decimal("249.99")) == PaymentBalanceStatus.PAID_FULL
        assert classify_payment_status("100", 100) == PaymentBalanceStatus.PAID_FULL
        assert classify_payment_status(100.0, "100.00") == PaymentBalanceStatus.PAID_FULL

    def test_negative_paid_amount_is_unpaid(self):
        """A refund larger than the payments leaves nothing paid"""
        assert classify_payment_status(Decimal("100"), Decimal("-10")) == PaymentBalanceStatus.UNPAID

    def test_pure(self):
        first = classify_payment_status(Decimal("80"), Decimal("20"))
        second = classify_payment_status(Decimal("80"), Decimal("20"))
        assert first == second == PaymentBalanceStatus.PARTIAL


class TestToDecimal:
    def test_float_goes_through_string(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_and_int(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")
        assert to_decimal(7) == Decimal(7)

    @pytest.mark.parametrize("value", ["abc", None, "", True, "NaN", "Infinity"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            to_decimal(value)


class TestToAmount:
    """Test amounts are coerced to what the ledger columns store"""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("12.5", Decimal("12.50")), ("0.005", Decimal("0.01")), (19.999, Decimal("20.00")), (7, Decimal("7.00"))],
    )
    def test_rounded_to_cents(self, value, expected):
        assert to_amount(value) == expected

    def test_largest_amount(self):
        assert to_amount("99999999.99") == Decimal("99999999.99")

    @pytest.mark.parametrize("value", ["100000000", "12345678901", "1e40", "abc"])
    def test_not_storable(self, value):
        with pytest.raises(ValidationError) as exc_info:
            to_amount(value)
        assert exc_info.value.message == "Invalid amount"

    @pytest.mark.parametrize("value", ["0", "0.001", "-5"])
    def test_not_positive(self, value):
        """Sub-cent amounts round to zero and are refused like zero"""
        with pytest.raises(ValidationError) as exc_info:
            to_amount(value, message="Amount must be positive")
        assert exc_info.value.message == "Amount must be positive"

    def test_zero_allowed(self):
        assert to_amount("0.001", allow_zero=True) == Decimal("0.00")
        with pytest.raises(ValidationError):
            to_amount("-0.01", allow_zero=True)
