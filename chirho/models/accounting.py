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

from django.conf import settings as conf_settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from chirho.models.base import BaseModel, UuidMixin
from chirho.models.event import Event, Organization
from chirho.models.registration import RegistrationType


class PaymentMethod(models.TextChoices):
    CARD = "card", _("Credit Card")
    CHECK = "check", _("Check")
    CASH = "cash", _("Cash")
    BANK_TRANSFER = "bank_transfer", _("Wire Transfer")
    OTHER = "other", _("Other")


class PaymentStatus(models.TextChoices):
    SUCCEEDED = "succeeded", _("Succeeded")
    PENDING = "pending", _("Pending")


class PaymentKind(models.TextChoices):
    PARTIAL = "partial", _("Partial")
    FULL = "full", _("Full")
    DEPOSIT = "deposit", _("Deposit")


class PaymentBalanceStatus(models.TextChoices):
    UNPAID = "unpaid", _("Unpaid")
    PARTIAL = "partial", _("Partial")
    PAID_FULL = "paid_full", _("Paid in full")
    OVERPAID = "overpaid", _("Overpaid")


class Payment(UuidMixin, BaseModel):
    """A single payment received (or expected) for a registration.

    Rows are never deleted; the only change after creation is the
    pending to succeeded transition of check payments.
    """

    search = models.CharField(max_length=150, editable=False)

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="payments")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="payments")

    registration_id = models.CharField(max_length=12, db_index=True)

    registration_type = models.CharField(max_length=10, choices=RegistrationType.choices)

    amount = models.DecimalField(max_digits=10, decimal_places=2)

    payment_kind = models.CharField(max_length=10, choices=PaymentKind.choices, default=PaymentKind.PARTIAL)

    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)

    status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.SUCCEEDED, db_index=True
    )

    check_number = models.CharField(max_length=50, blank=True, null=True)

    check_date = models.DateField(blank=True, null=True)

    card_last4 = models.CharField(max_length=4, blank=True, null=True)

    cardholder_name = models.CharField(max_length=150, blank=True, null=True)

    authorization_code = models.CharField(max_length=50, blank=True, null=True)

    payment_method_details = models.CharField(max_length=150, blank=True, null=True)

    transaction_reference = models.CharField(max_length=150, blank=True, null=True)

    notes = models.JSONField(default=dict, blank=True)

    processed_at = models.DateTimeField(blank=True, null=True)

    recorded_by = models.ForeignKey(
        conf_settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    class Meta:
        indexes = [
            models.Index(fields=["registration_id", "status"]),
            models.Index(fields=["registration_id", "created"]),
        ]

    def __str__(self) -> str:
        return f"({self.status}) {self.registration_type} {self.registration_id} {self.amount} {self.payment_method}"

    def method_label(self) -> str:
        """Human label of the payment method, preferring free-text details for 'other'."""
        if self.payment_method == PaymentMethod.OTHER and self.payment_method_details:
            return self.payment_method_details
        return str(self.get_payment_method_display())

    def reference_info(self) -> str:
        if self.payment_method == PaymentMethod.CHECK and self.check_number:
            return f"Check #{self.check_number}"
        if self.payment_method == PaymentMethod.CARD and self.card_last4:
            return f"Card ending in {self.card_last4}"
        return self.transaction_reference or ""


class PaymentBalance(BaseModel):
    """Derived ledger summary for one registration.

    amount_paid always equals the sum of the succeeded payments of the
    registration; it is recomputed from them, never incremented.
    """

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="payment_balances")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="payment_balances")

    registration_id = models.CharField(max_length=12, unique=True, db_index=True)

    registration_type = models.CharField(max_length=10, choices=RegistrationType.choices)

    total_amount_due = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    amount_remaining = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    payment_status = models.CharField(
        max_length=10, choices=PaymentBalanceStatus.choices, default=PaymentBalanceStatus.UNPAID, db_index=True
    )

    last_payment_date = models.DateTimeField(blank=True, null=True)

    def __str__(self) -> str:
        return f"Balance {self.registration_type} {self.registration_id} - {self.payment_status}"

    def as_dict(self) -> dict:
        return {
            "total_amount_due": self.total_amount_due,
            "amount_paid": self.amount_paid,
            "amount_remaining": self.amount_remaining,
            "payment_status": self.payment_status,
            "last_payment_date": self.last_payment_date,
        }


class RegistrationEditType(models.TextChoices):
    PAYMENT_UPDATED = "payment_updated", _("Payment updated")


class RegistrationEdit(BaseModel):
    """Audit trail of manual changes to a registration's amounts."""

    registration_id = models.CharField(max_length=12, db_index=True)

    registration_type = models.CharField(max_length=10, choices=RegistrationType.choices)

    edited_by = models.ForeignKey(
        conf_settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    edit_type = models.CharField(max_length=20, choices=RegistrationEditType.choices)

    old_total = models.DecimalField(max_digits=10, decimal_places=2)

    new_total = models.DecimalField(max_digits=10, decimal_places=2)

    difference = models.DecimalField(max_digits=10, decimal_places=2)

    changes_made = models.JSONField(default=dict, blank=True)

    admin_notes = models.TextField(blank=True, default="")

    def __str__(self) -> str:
        return f"{self.get_edit_type_display()} {self.registration_id} ({self.old_total} -> {self.new_total})"
