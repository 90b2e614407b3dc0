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

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from django.db import transaction
from django.db.models import Count, Max

from chirho.accounting.base import classify_payment_status, to_amount
from chirho.models.accounting import (
    Payment,
    PaymentBalance,
    PaymentBalanceStatus,
    PaymentStatus,
    RegistrationEdit,
    RegistrationEditType,
)
from chirho.models.registration import GroupRegistration, IndividualRegistration, RegistrationType, get_registration
from chirho.models.utils import format_amount, get_sum
from chirho.utils.exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from django.contrib.auth.models import User

    from chirho.models.event import Event

logger = logging.getLogger(__name__)


def validate_registration_key(registration_id: Any, registration_type: Any) -> None:
    """Check that a registration id and type can identify a balance.

    Raises:
        ValidationError: If the id is empty or the type is unknown
    """
    if not registration_id or not str(registration_id).strip():
        raise ValidationError("Registration ID is required")
    if registration_type not in RegistrationType.values:
        raise ValidationError('Invalid registration type. Must be "group" or "individual".')


def lock_balance(registration_id: str) -> PaymentBalance:
    """Fetch the balance row of a registration under a row lock.

    Must be called inside an atomic block.
    """
    balance = PaymentBalance.objects.select_for_update().filter(registration_id=registration_id).first()
    if not balance:
        raise NotFoundError("Payment balance not found")
    return balance


def _apply_paid_amount(balance: PaymentBalance) -> None:
    """Set amount paid, remaining and status of a locked balance from its payments."""
    succeeded = Payment.objects.filter(
        registration_id=balance.registration_id,
        registration_type=balance.registration_type,
        status=PaymentStatus.SUCCEEDED,
    )
    amount_paid = get_sum(succeeded)
    last_payment = succeeded.aggregate(last=Max("processed_at"))["last"]

    balance.amount_paid = amount_paid
    balance.amount_remaining = balance.total_amount_due - amount_paid
    balance.payment_status = classify_payment_status(balance.total_amount_due, amount_paid)
    if last_payment:
        balance.last_payment_date = last_payment


def recompute_balance(registration_id: str, registration_type: str) -> dict:
    """Recompute the balance of a registration from its succeeded payments.

    The paid amount is always the full sum of the succeeded payments, never an
    increment, so repeated calls without new payments give the same result.
    Duplicate payment rows are summed like any other.

    Args:
        registration_id: External id of the group or individual registration
        registration_type: "group" or "individual"

    Returns:
        dict: amount_paid, amount_remaining and payment_status after the update

    Raises:
        ValidationError: If the id or type are invalid
        NotFoundError: If the registration has no balance
    """
    validate_registration_key(registration_id, registration_type)

    with transaction.atomic():
        balance = lock_balance(registration_id)
        _apply_paid_amount(balance)
        balance.save(
            update_fields=["amount_paid", "amount_remaining", "payment_status", "last_payment_date", "updated"]
        )

    logger.debug(
        "Balance of %s %s: paid %s remaining %s (%s)",
        registration_type,
        registration_id,
        balance.amount_paid,
        balance.amount_remaining,
        balance.payment_status,
    )

    return {
        "amount_paid": balance.amount_paid,
        "amount_remaining": balance.amount_remaining,
        "payment_status": balance.payment_status,
    }


def adjust_total_due(
    registration_id: str,
    registration_type: str,
    new_total_due: Any,
    edited_by: User | None = None,
    reason: str = "",
) -> dict:
    """Change the amount owed by a registration and keep an audit row of it.

    Args:
        registration_id: External id of the registration
        registration_type: "group" or "individual"
        new_total_due: New total amount due, zero or positive
        edited_by: User performing the change, if known
        reason: Free text appended to the audit note

    Returns:
        dict: The updated balance, as returned by PaymentBalance.as_dict

    Raises:
        ValidationError: If the new total is not a non-negative amount
        NotFoundError: If the registration has no balance
    """
    validate_registration_key(registration_id, registration_type)
    new_total_due = to_amount(new_total_due, "total amount due", allow_zero=True, message="Invalid total amount due")

    with transaction.atomic():
        balance = lock_balance(registration_id)
        old_total = balance.total_amount_due
        old_remaining = balance.amount_remaining

        balance.total_amount_due = new_total_due
        _apply_paid_amount(balance)
        balance.save()

        difference = new_total_due - old_total
        sign = "+" if difference > 0 else ""
        admin_notes = f"Price adjusted from ${format_amount(old_total)} to ${format_amount(new_total_due)}"
        if reason:
            admin_notes += f" ({reason})"
        admin_notes += f". Difference: {sign}${format_amount(difference)}"

        RegistrationEdit.objects.create(
            registration_id=registration_id,
            registration_type=registration_type,
            edited_by=edited_by,
            edit_type=RegistrationEditType.PAYMENT_UPDATED,
            old_total=old_total,
            new_total=new_total_due,
            difference=difference,
            changes_made={
                "total_amount_due": {"old": str(old_total), "new": str(new_total_due)},
                "amount_remaining": {"old": str(old_remaining), "new": str(balance.amount_remaining)},
            },
            admin_notes=admin_notes,
        )

    logger.info("Total due of %s %s changed from %s to %s", registration_type, registration_id, old_total, new_total_due)
    return balance.as_dict()


def provision_balance(
    event: Event,
    registration_id: str,
    registration_type: str,
    total_due: Any = None,
    edited_by: User | None = None,
    reason: str = "",
) -> bool:
    """Make sure a registration has a balance, owing total_due when given.

    A new balance starts from the payments already recorded for the
    registration. An existing balance is only touched when total_due differs
    from its current total, through adjust_total_due so the change is audited.

    Returns:
        bool: True if the balance was created
    """
    validate_registration_key(registration_id, registration_type)
    if total_due is not None:
        total_due = to_amount(total_due, "amount owed", allow_zero=True)

    with transaction.atomic():
        balance = PaymentBalance.objects.select_for_update().filter(registration_id=registration_id).first()
        if not balance:
            balance = PaymentBalance(
                organization=event.organization,
                event=event,
                registration_id=registration_id,
                registration_type=registration_type,
                total_amount_due=total_due or Decimal("0.00"),
            )
            _apply_paid_amount(balance)
            balance.save()
            logger.info("Created balance of %s %s owing %s", registration_type, registration_id, total_due)
            return True

    if total_due is not None and balance.total_amount_due != total_due:
        adjust_total_due(registration_id, registration_type, total_due, edited_by=edited_by, reason=reason)
    return False


def recompute_event_balances(event: Event) -> dict:
    """Recompute every balance of an event.

    A failure on one balance is logged and counted, the others are still
    processed.

    Returns:
        dict: processed, updated (balances whose values changed) and errors counts
    """
    stats = {"processed": 0, "updated": 0, "errors": 0}

    for balance in PaymentBalance.objects.filter(event=event):
        stats["processed"] += 1
        before = (balance.amount_paid, balance.amount_remaining, balance.payment_status)
        try:
            result = recompute_balance(balance.registration_id, balance.registration_type)
        except Exception:
            logger.exception("Could not recompute balance of %s", balance.registration_id)
            stats["errors"] += 1
            continue
        if before != (result["amount_paid"], result["amount_remaining"], result["payment_status"]):
            stats["updated"] += 1

    logger.info("Recomputed balances of event %s: %s", event.slug, stats)
    return stats


def _balance_row(balance: PaymentBalance | None) -> dict:
    if not balance:
        return {
            "total_due": Decimal(0),
            "amount_paid": Decimal(0),
            "amount_remaining": Decimal(0),
            "payment_status": PaymentBalanceStatus.UNPAID,
            "last_payment_date": None,
        }
    return {
        "total_due": balance.total_amount_due,
        "amount_paid": balance.amount_paid,
        "amount_remaining": balance.amount_remaining,
        "payment_status": balance.payment_status,
        "last_payment_date": balance.last_payment_date,
    }


def get_event_balances(event: Event) -> dict:
    """Build the balance report of an event.

    Returns one row per group and individual registration, the ones with the
    highest remaining amount first, along with totals and a count per status.
    Registrations without a balance are reported as unpaid with zero amounts.
    """
    balances = {balance.registration_id: balance for balance in PaymentBalance.objects.filter(event=event)}
    rows = []

    for group in GroupRegistration.objects.filter(event=event).annotate(participant_count=Count("participants")):
        row = {
            "registration_id": group.uuid,
            "registration_type": RegistrationType.GROUP,
            "name": group.group_name,
            "parish_name": group.parish_name,
            "contact_name": group.group_leader_name,
            "contact_email": group.group_leader_email,
            "participant_count": group.participant_count,
        }
        row.update(_balance_row(balances.get(group.uuid)))
        rows.append(row)

    for individual in IndividualRegistration.objects.filter(event=event):
        row = {
            "registration_id": individual.uuid,
            "registration_type": RegistrationType.INDIVIDUAL,
            "name": individual.full_name(),
            "parish_name": None,
            "contact_name": individual.full_name(),
            "contact_email": individual.email,
            "participant_count": 1,
        }
        row.update(_balance_row(balances.get(individual.uuid)))
        rows.append(row)

    rows.sort(key=lambda el: el["amount_remaining"], reverse=True)

    totals = {
        "total_due": sum((row["total_due"] for row in rows), Decimal(0)),
        "amount_paid": sum((row["amount_paid"] for row in rows), Decimal(0)),
        "amount_remaining": sum((row["amount_remaining"] for row in rows), Decimal(0)),
        "fully_paid": len([row for row in rows if row["amount_remaining"] == 0]),
        "with_balance": len([row for row in rows if row["amount_remaining"] > 0]),
    }
    by_status = {status: 0 for status in PaymentBalanceStatus.values}
    for row in rows:
        by_status[str(row["payment_status"])] += 1

    return {"balances": rows, "totals": totals, "by_status": by_status}


def get_registration_payments(registration_id: str, registration_type: str) -> dict:
    """Return the balance snapshot and payment history of a registration.

    Raises:
        ValidationError: If the id or type are invalid
        NotFoundError: If the registration does not exist
    """
    validate_registration_key(registration_id, registration_type)
    registration = get_registration(registration_id, registration_type)
    if not registration:
        raise NotFoundError("Registration not found")

    balance = PaymentBalance.objects.filter(registration_id=registration_id).first()
    payments = Payment.objects.filter(registration_id=registration_id, registration_type=registration_type).order_by(
        "-created"
    )

    return {
        "registration_name": str(registration),
        "payment_balance": balance.as_dict() if balance else None,
        "payments": [
            {
                "id": payment.uuid,
                "amount": payment.amount,
                "payment_kind": payment.payment_kind,
                "payment_method": payment.payment_method,
                "payment_status": payment.status,
                "check_number": payment.check_number,
                "card_last4": payment.card_last4,
                "notes": payment.notes,
                "processed_at": payment.processed_at,
                "created_at": payment.created,
            }
            for payment in payments
        ],
    }
