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

from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from chirho.accounting.balance import (
    adjust_total_due,
    get_event_balances,
    get_registration_payments,
    recompute_balance,
    recompute_event_balances,
)
from chirho.models.accounting import PaymentBalance, PaymentStatus, RegistrationEdit, RegistrationEditType
from chirho.models.registration import RegistrationType
from chirho.tests.unit.base import BaseTestCase
from chirho.utils.exceptions import NotFoundError, ValidationError


class TestRecomputeBalance(BaseTestCase):
    """Test balance recomputation from succeeded payments"""

    def test_sums_succeeded_payments(self):
        balance = self.create_balance(self.create_group(), total_amount_due=Decimal("300.00"))
        self.create_payment(balance, Decimal("100.00"), processed_at=datetime(2025, 3, 1, 10, 0))
        self.create_payment(balance, Decimal("50.00"), processed_at=datetime(2025, 3, 5, 10, 0))
        self.create_payment(balance, Decimal("80.00"), status=PaymentStatus.PENDING)

        result = recompute_balance(balance.registration_id, RegistrationType.GROUP)

        assert result["amount_paid"] == Decimal("150.00"), f"Pending payments must not count, got {result}"
        assert result["amount_remaining"] == Decimal("150.00")
        assert result["payment_status"] == "partial"

        balance.refresh_from_db()
        assert balance.amount_paid == Decimal("150.00")
        assert balance.payment_status == "partial"
        assert balance.last_payment_date == datetime(2025, 3, 5, 10, 0)

    def test_idempotent(self):
        balance = self.create_balance(self.create_individual(), total_amount_due=Decimal("120.00"))
        self.create_payment(balance, Decimal("120.00"))

        first = recompute_balance(balance.registration_id, RegistrationType.INDIVIDUAL)
        second = recompute_balance(balance.registration_id, RegistrationType.INDIVIDUAL)

        assert first == second, f"Expected identical results, got {first} and {second}"
        assert first["payment_status"] == "paid_full"

    def test_duplicate_rows_are_summed(self):
        """Duplicates that reach the ledger are counted, removing them is not the recompute's job"""
        balance = self.create_balance(self.create_individual(), total_amount_due=Decimal("100.00"))
        self.create_payment(balance, Decimal("100.00"))
        self.create_payment(balance, Decimal("100.00"))

        result = recompute_balance(balance.registration_id, RegistrationType.INDIVIDUAL)

        assert result["amount_paid"] == Decimal("200.00")
        assert result["amount_remaining"] == Decimal("-100.00")
        assert result["payment_status"] == "overpaid"

    def test_no_payments(self):
        balance = self.create_balance(self.create_group(), total_amount_due=Decimal("75.00"))

        result = recompute_balance(balance.registration_id, RegistrationType.GROUP)

        assert result == {
            "amount_paid": Decimal(0),
            "amount_remaining": Decimal("75.00"),
            "payment_status": "unpaid",
        }

    def test_corrects_stale_amount(self):
        """A balance incremented by hand is brought back to the sum of payments"""
        balance = self.create_balance(
            self.create_group(), total_amount_due=Decimal("100.00"), amount_paid=Decimal("999.00")
        )
        self.create_payment(balance, Decimal("25.00"))

        result = recompute_balance(balance.registration_id, RegistrationType.GROUP)

        assert result["amount_paid"] == Decimal("25.00")

    def test_missing_balance(self):
        with pytest.raises(NotFoundError):
            recompute_balance("nosuchid", RegistrationType.GROUP)

    @pytest.mark.parametrize(("registration_id", "registration_type"), [("", "group"), ("  ", "group"), ("abc", "team")])
    def test_invalid_input(self, registration_id, registration_type):
        with pytest.raises(ValidationError):
            recompute_balance(registration_id, registration_type)


class TestAdjustTotalDue(BaseTestCase):
    """Test manual changes of the amount due"""

    def test_adjust_writes_audit_row(self):
        user = self.user()
        balance = self.create_balance(self.create_group(), total_amount_due=Decimal("200.00"))
        self.create_payment(balance, Decimal("100.00"))
        recompute_balance(balance.registration_id, RegistrationType.GROUP)

        result = adjust_total_due(
            balance.registration_id, RegistrationType.GROUP, "250", edited_by=user, reason="housing change"
        )

        assert result["total_amount_due"] == Decimal("250")
        assert result["amount_remaining"] == Decimal("150.00")
        assert result["payment_status"] == "partial"

        edit = RegistrationEdit.objects.get(registration_id=balance.registration_id)
        assert edit.edit_type == RegistrationEditType.PAYMENT_UPDATED
        assert edit.old_total == Decimal("200.00")
        assert edit.new_total == Decimal("250.00")
        assert edit.difference == Decimal("50.00")
        assert edit.edited_by == user
        assert edit.changes_made["total_amount_due"] == {"old": "200.00", "new": "250"}
        assert edit.admin_notes == "Price adjusted from $200.00 to $250.00 (housing change). Difference: +$50.00"

    def test_lowering_total_to_paid_amount(self):
        balance = self.create_balance(self.create_individual(), total_amount_due=Decimal("200.00"))
        self.create_payment(balance, Decimal("150.00"))

        result = adjust_total_due(balance.registration_id, RegistrationType.INDIVIDUAL, Decimal("150.00"))

        assert result["payment_status"] == "paid_full"
        edit = RegistrationEdit.objects.get(registration_id=balance.registration_id)
        assert edit.admin_notes.endswith("Difference: $-50.00")

    def test_negative_total(self):
        balance = self.create_balance(self.create_individual())
        with pytest.raises(ValidationError):
            adjust_total_due(balance.registration_id, RegistrationType.INDIVIDUAL, "-1")
        assert RegistrationEdit.objects.count() == 0

    def test_total_too_large(self):
        balance = self.create_balance(self.create_individual())
        with pytest.raises(ValidationError, match="Invalid total amount due"):
            adjust_total_due(balance.registration_id, RegistrationType.INDIVIDUAL, "12345678901")
        assert RegistrationEdit.objects.count() == 0

    def test_total_rounded_to_cents(self):
        balance = self.create_balance(self.create_individual())

        result = adjust_total_due(balance.registration_id, RegistrationType.INDIVIDUAL, "120.456")

        assert result["total_amount_due"] == Decimal("120.46")
        balance.refresh_from_db()
        assert balance.amount_remaining == Decimal("120.46")

    def test_missing_balance(self):
        with pytest.raises(NotFoundError):
            adjust_total_due("nosuchid", RegistrationType.INDIVIDUAL, "10")


class TestEventBalances(BaseTestCase):
    """Test event-wide balance operations"""

    def test_recompute_event_balances(self):
        group_balance = self.create_balance(self.create_group(), total_amount_due=Decimal("100.00"))
        individual_balance = self.create_balance(self.create_individual(), total_amount_due=Decimal("50.00"))
        self.create_payment(group_balance, Decimal("100.00"))

        stats = recompute_event_balances(self.event())

        assert stats == {"processed": 2, "updated": 1, "errors": 0}, f"Unexpected stats {stats}"
        group_balance.refresh_from_db()
        individual_balance.refresh_from_db()
        assert group_balance.payment_status == "paid_full"
        assert individual_balance.payment_status == "unpaid"

    def test_recompute_event_balances_continues_after_failure(self):
        self.create_balance(self.create_group(), total_amount_due=Decimal("100.00"))
        self.create_balance(self.create_individual(), total_amount_due=Decimal("50.00"))

        side_effect = [
            RuntimeError("db down"),
            {"amount_paid": Decimal(0), "amount_remaining": Decimal("50.00"), "payment_status": "unpaid"},
        ]
        with patch("chirho.accounting.balance.recompute_balance", side_effect=side_effect):
            stats = recompute_event_balances(self.event())

        assert stats["processed"] == 2
        assert stats["errors"] == 1

    def test_get_event_balances(self):
        group = self.create_group(participants=["John Smith", "Mary Smith"])
        individual = self.create_individual()
        self.create_individual(first_name="Paul", last_name="Nobalance")
        group_balance = self.create_balance(group, total_amount_due=Decimal("300.00"))
        self.create_balance(individual, total_amount_due=Decimal("100.00"))
        self.create_payment(group_balance, Decimal("100.00"))
        recompute_balance(group.uuid, RegistrationType.GROUP)

        report = get_event_balances(self.event())

        rows = report["balances"]
        assert len(rows) == 3
        assert rows[0]["registration_id"] == group.uuid, "Highest remaining amount comes first"
        assert rows[0]["participant_count"] == 2
        assert rows[0]["amount_remaining"] == Decimal("200.00")
        no_balance = [row for row in rows if row["name"] == "Paul Nobalance"][0]
        assert no_balance["payment_status"] == "unpaid"
        assert no_balance["total_due"] == Decimal(0)

        assert report["totals"]["total_due"] == Decimal("400.00")
        assert report["totals"]["amount_paid"] == Decimal("100.00")
        assert report["totals"]["amount_remaining"] == Decimal("300.00")
        assert report["by_status"]["partial"] == 1
        assert report["by_status"]["unpaid"] == 2


class TestRegistrationPayments(BaseTestCase):
    def test_history(self):
        group = self.create_group()
        balance = self.create_balance(group)
        first = self.create_payment(balance, Decimal("10.00"), created=datetime(2025, 1, 1, 9, 0))
        second = self.create_payment(balance, Decimal("20.00"), created=datetime(2025, 1, 2, 9, 0))

        result = get_registration_payments(group.uuid, RegistrationType.GROUP)

        assert result["registration_name"] == "Youth Group"
        assert result["payment_balance"]["total_amount_due"] == Decimal("100.00")
        assert [payment["id"] for payment in result["payments"]] == [second.uuid, first.uuid]

    def test_unknown_registration(self):
        with pytest.raises(NotFoundError):
            get_registration_payments("nosuchid", RegistrationType.GROUP)

    def test_balance_missing(self):
        individual = self.create_individual()
        result = get_registration_payments(individual.uuid, RegistrationType.INDIVIDUAL)
        assert result["payment_balance"] is None
        assert result["payments"] == []
        assert PaymentBalance.objects.count() == 0
