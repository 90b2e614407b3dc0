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
import re
from datetime import date, datetime, timedelta
from functools import partial
from typing import TYPE_CHECKING, Any

from django.conf import settings as conf_settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from chirho.accounting.balance import lock_balance, recompute_balance, validate_registration_key
from chirho.accounting.base import to_amount, to_decimal
from chirho.mail.accounting import notify_payment_received
from chirho.models.accounting import Payment, PaymentKind, PaymentMethod, PaymentStatus
from chirho.models.registration import get_registration
from chirho.utils.exceptions import DuplicatePaymentError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from decimal import Decimal

    from django.contrib.auth.models import User

logger = logging.getLogger(__name__)

CHECK_NOTE_FIELDS = (
    "check_number",
    "payment_type",
    "payer_name",
    "admin_notes",
    "date_received",
    "deposit_account",
    "deposit_date",
    "deposit_slip_number",
)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_duplicate_payment(
    registration_id: str,
    registration_type: str,
    amount: Any,
    payment_method: str,
    within_seconds: int = 30,
) -> bool:
    """Tell whether the same payment was recorded a few seconds ago.

    Matches payments of the same registration with equal amount and method,
    created inside the trailing window. The answer is advisory: it is up to the
    caller to reject or accept the new payment.

    Args:
        registration_id: External id of the registration
        registration_type: "group" or "individual"
        amount: Amount of the new payment
        payment_method: Method of the new payment
        within_seconds: Width of the window

    Returns:
        bool: True if a matching payment exists in the window
    """
    since = timezone.now() - timedelta(seconds=within_seconds)
    return Payment.objects.filter(
        registration_id=registration_id,
        registration_type=registration_type,
        amount=to_decimal(amount),
        payment_method=payment_method,
        created__gte=since,
    ).exists()


def _parse_day(value: Any, field: str) -> date:
    """Parse a date given as date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = None
    if isinstance(value, str):
        try:
            parsed = parse_date(value) or parse_datetime(value)
        except ValueError:
            parsed = None
    if not parsed:
        raise ValidationError(f"Invalid {field}")
    if isinstance(parsed, datetime):
        return parsed.date()
    return parsed


def _processed_at(day: date) -> datetime:
    """Timestamp stored for a payment made on the given day."""
    if day == timezone.now().date():
        return timezone.now()
    moment = datetime.combine(day, datetime.min.time())
    if conf_settings.USE_TZ:
        moment = timezone.make_aware(moment)
    return moment


def _schedule_notification(payment: Payment, send_email: Any) -> None:
    """Send the receipt once the payment is committed, never before."""
    if not send_email:
        return
    transaction.on_commit(partial(notify_payment_received, payment.uuid))


def _payment_result(payment: Payment, balance: dict) -> dict:
    return {
        "payment": {
            "id": payment.uuid,
            "amount": payment.amount,
            "payment_method": payment.payment_method,
            "payment_status": payment.status,
        },
        "updated_balance": balance,
    }


def _check_duplicate(registration_id: str, registration_type: str, amount: Decimal, method: str, force: bool) -> None:
    if force:
        return
    window = getattr(conf_settings, "DUPLICATE_PAYMENT_WINDOW", 30)
    if is_duplicate_payment(registration_id, registration_type, amount, method, within_seconds=window):
        logger.warning("Duplicate %s payment of %s for %s rejected", method, amount, registration_id)
        raise DuplicatePaymentError(registration_id, amount)


def record_payment(data: dict, *, recorded_by: User | None = None, force: bool = False) -> dict:
    """Record a manual payment and update the balance of its registration.

    Guard, insert and recompute run in the same transaction, under the lock of
    the balance row. The receipt email, if requested, is sent after commit and
    its failure never affects the payment.

    Args:
        data: Payment fields, see the keys read below
        recorded_by: User recording the payment
        force: Record the payment even if it looks like a duplicate

    Returns:
        dict: The created payment and the updated balance

    Raises:
        ValidationError: If required fields are missing or invalid
        NotFoundError: If the registration or its balance do not exist
        DuplicatePaymentError: If the same payment was recorded moments ago
    """
    required = ("registration_id", "registration_type", "amount", "payment_method", "payment_date")
    if any(data.get(field) in (None, "") for field in required):
        raise ValidationError("Missing required fields: " + ", ".join(required))

    registration_id = str(data["registration_id"]).strip()
    registration_type = data["registration_type"]
    validate_registration_key(registration_id, registration_type)

    amount = to_amount(data["amount"], message="Payment amount must be greater than 0")

    payment_method = data["payment_method"]
    if payment_method not in PaymentMethod.values:
        raise ValidationError("Invalid payment method")

    payment_day = _parse_day(data["payment_date"], "payment date")
    if payment_day > timezone.now().date():
        raise ValidationError("Payment date cannot be in the future")

    check_date = _parse_day(data["check_date"], "check date") if data.get("check_date") else None

    notes = {}
    if data.get("notes"):
        notes["admin_notes"] = str(data["notes"])

    with transaction.atomic():
        balance = lock_balance(registration_id)

        registration = get_registration(registration_id, registration_type)
        if not registration:
            raise NotFoundError("Registration not found")

        _check_duplicate(registration_id, registration_type, amount, payment_method, force)

        payment = Payment.objects.create(
            organization_id=balance.organization_id,
            event_id=balance.event_id,
            registration_id=registration_id,
            registration_type=registration_type,
            amount=amount,
            payment_method=payment_method,
            status=PaymentStatus.SUCCEEDED,
            check_number=data.get("check_number") or None,
            check_date=check_date,
            card_last4=data.get("card_last4") or None,
            cardholder_name=data.get("cardholder_name") or None,
            authorization_code=data.get("authorization_code") or None,
            payment_method_details=data.get("payment_method_details") or None,
            transaction_reference=data.get("transaction_reference") or None,
            notes=notes,
            processed_at=_processed_at(payment_day),
            recorded_by=recorded_by,
        )

        updated_balance = recompute_balance(registration_id, registration_type)
        _schedule_notification(payment, data.get("send_email", True))

    logger.info("Recorded %s payment %s of %s for %s", payment_method, payment.uuid, amount, registration_id)
    return _payment_result(payment, updated_balance)


def build_check_notes(values: dict, *, received: bool) -> dict:
    """Validate the details of a check payment and shape them as payment notes.

    Args:
        values: check_number, payment_type (partial, full or deposit), payer_name,
            admin_notes, and for received checks date_received, deposit_account,
            deposit_date and deposit_slip_number
        received: Whether the check is already in hand

    Returns:
        dict: check_number, payment_type, payer_name and admin_notes, plus
            date_received and bank_deposit (account, date, slip_number) for
            received checks

    Raises:
        ValidationError: On unknown keys, invalid payment type or non ISO dates
    """
    unknown = set(values) - set(CHECK_NOTE_FIELDS)
    if unknown:
        raise ValidationError("Unknown check payment fields: " + ", ".join(sorted(unknown)))

    payment_type = values.get("payment_type") or PaymentKind.PARTIAL
    if payment_type not in PaymentKind.values:
        raise ValidationError('Invalid paymentType. Must be "partial", "full" or "deposit"')

    for field in ("date_received", "deposit_date"):
        value = values.get(field)
        if value and (not ISO_DATE_RE.match(str(value)) or not parse_date(str(value))):
            raise ValidationError(f"Invalid {field.replace('_', ' ')}. Use YYYY-MM-DD")

    notes = {
        "check_number": values.get("check_number") or None,
        "payment_type": payment_type,
        "payer_name": values.get("payer_name") or None,
        "admin_notes": values.get("admin_notes") or None,
    }

    if received:
        notes["date_received"] = values.get("date_received") or timezone.now().date().isoformat()
        notes["bank_deposit"] = {
            "account": values.get("deposit_account") or None,
            "date": values.get("deposit_date") or None,
            "slip_number": values.get("deposit_slip_number") or None,
        }

    return notes


def record_check_payment(data: dict, *, recorded_by: User | None = None, force: bool = False) -> dict:
    """Record a check, either received or only announced by the registrant.

    Pending checks are stored but do not count toward the amount paid until
    confirmed with confirm_pending_payment.

    Raises:
        ValidationError: If required fields are missing or invalid
        NotFoundError: If the registration has no balance
        DuplicatePaymentError: If the same check was recorded moments ago
    """
    registration_id = str(data.get("registration_id") or "").strip()
    registration_type = data.get("registration_type")
    if not registration_id or not registration_type or data.get("amount") in (None, ""):
        raise ValidationError("Missing required fields: registration_id, registration_type, amount")
    validate_registration_key(registration_id, registration_type)

    payment_status = data.get("payment_status")
    if payment_status not in ("received", "pending"):
        raise ValidationError('Invalid paymentStatus. Must be "received" or "pending"')
    received = payment_status == "received"

    amount = to_amount(data["amount"], message="Invalid amount. Must be a positive number")

    notes = build_check_notes({key: data[key] for key in CHECK_NOTE_FIELDS if key in data}, received=received)

    with transaction.atomic():
        balance = lock_balance(registration_id)

        _check_duplicate(registration_id, registration_type, amount, PaymentMethod.CHECK, force)

        payment = Payment.objects.create(
            organization_id=balance.organization_id,
            event_id=balance.event_id,
            registration_id=registration_id,
            registration_type=registration_type,
            amount=amount,
            payment_kind=notes["payment_type"],
            payment_method=PaymentMethod.CHECK,
            status=PaymentStatus.SUCCEEDED if received else PaymentStatus.PENDING,
            check_number=notes["check_number"],
            notes=notes,
            processed_at=_processed_at(parse_date(notes["date_received"])) if received else None,
            recorded_by=recorded_by,
        )

        updated_balance = recompute_balance(registration_id, registration_type)
        _schedule_notification(payment, data.get("send_email", True))

    logger.info("Recorded %s check %s of %s for %s", payment_status, payment.uuid, amount, registration_id)
    return _payment_result(payment, updated_balance)


def confirm_pending_payment(payment_id: str, *, date_received: Any = None, send_email: bool = False) -> dict:
    """Mark a pending payment as succeeded and update the balance.

    Args:
        payment_id: External id of the payment
        date_received: Day the payment arrived, today if not given
        send_email: Send the receipt to the registrant

    Raises:
        NotFoundError: If the payment does not exist
        ValidationError: If the payment is not pending
    """
    day = _parse_day(date_received, "date received") if date_received else timezone.now().date()

    with transaction.atomic():
        payment = Payment.objects.select_for_update().filter(uuid=payment_id).first()
        if not payment:
            raise NotFoundError("Payment not found")
        if payment.status != PaymentStatus.PENDING:
            raise ValidationError("Payment is not pending")

        lock_balance(payment.registration_id)

        payment.status = PaymentStatus.SUCCEEDED
        payment.processed_at = _processed_at(day)
        notes = dict(payment.notes or {})
        notes["date_received"] = day.isoformat()
        payment.notes = notes
        payment.save()

        updated_balance = recompute_balance(payment.registration_id, payment.registration_type)
        _schedule_notification(payment, send_email)

    logger.info("Confirmed pending payment %s", payment.uuid)
    return _payment_result(payment, updated_balance)
