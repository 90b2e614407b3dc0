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

from django.utils.html import escape
from django.utils.translation import gettext as _

from chirho.models.accounting import Payment, PaymentBalance, PaymentBalanceStatus, PaymentMethod, PaymentStatus
from chirho.models.registration import get_registration
from chirho.models.utils import format_amount
from chirho.utils.tasks import my_send_mail

logger = logging.getLogger(__name__)


def notify_payment_received(payment_id: str) -> None:
    """Send the receipt of a payment to the registrant.

    Runs after the payment is committed. Any failure is logged and swallowed:
    the payment is recorded whether or not the email goes out.

    Args:
        payment_id: External id of the payment

    """
    try:
        payment = Payment.objects.select_related("event", "organization").filter(uuid=payment_id).first()
        if not payment:
            logger.error("Payment %s not found, receipt not sent", payment_id)
            return

        registration = get_registration(payment.registration_id, payment.registration_type)
        if not registration:
            logger.error("Registration %s not found, receipt not sent", payment.registration_id)
            return

        email, name = registration.recipient()
        if not email:
            logger.warning("No email for registration %s, receipt not sent", payment.registration_id)
            return

        balance = PaymentBalance.objects.filter(registration_id=payment.registration_id).first()
        subject, body = get_payment_mail(payment, balance, name)
        my_send_mail(subject, body, email, payment.organization)
    except Exception as err:
        logger.error("Could not send receipt of payment %s: %s", payment_id, err)


def get_payment_mail_subject(payment: Payment, balance: PaymentBalance | None) -> str:
    """Subject of the receipt, depending on method and resulting balance."""
    event_name = payment.event.name
    if payment.payment_method == PaymentMethod.CHECK:
        if payment.status == PaymentStatus.PENDING:
            return _("Check Payment Expected - %(event)s") % {"event": event_name}
        return _("Check Payment Received - %(event)s") % {"event": event_name}
    if balance and balance.payment_status == PaymentBalanceStatus.PAID_FULL:
        return _("Payment Received - PAID IN FULL! - %(event)s") % {"event": event_name}
    return _("Payment Received - %(event)s") % {"event": event_name}


def get_payment_mail(payment: Payment, balance: PaymentBalance | None, name: str) -> tuple[str, str]:
    """Generate subject and HTML body of a payment receipt.

    Args:
        payment: The recorded payment
        balance: Balance of the registration after the payment, if any
        name: Name used in the greeting

    Returns:
        Tuple containing email subject and HTML body as strings

    """
    subject = get_payment_mail_subject(payment, balance)
    pending = payment.status == PaymentStatus.PENDING

    event_name = escape(payment.event.name)
    body = _("Hello %(name)s") % {"name": escape(name)} + ",<br /><br />"
    if pending:
        body += _("We have noted that a check for <b>%(event)s</b> is on its way.") % {"event": event_name}
        body += " " + _("Your balance will be updated as soon as we receive it.")
    else:
        body += _("We have received your payment for <b>%(event)s</b>.") % {"event": event_name}

    body += "<br /><br /><b>" + _("Payment details") + "</b><br />"
    body += _("Amount") + f": ${format_amount(payment.amount)}<br />"
    body += _("Payment method") + f": {escape(payment.method_label())}<br />"
    reference = payment.reference_info()
    if reference:
        body += _("Reference") + f": {escape(reference)}<br />"
    if payment.processed_at:
        body += _("Date") + f": {payment.processed_at:%Y-%m-%d}<br />"

    if balance:
        body += "<br /><b>" + _("Updated balance") + "</b><br />"
        body += _("Total amount due") + f": ${format_amount(balance.total_amount_due)}<br />"
        body += _("Total paid") + f": ${format_amount(balance.amount_paid)}<br />"
        body += _("Balance remaining") + f": ${format_amount(balance.amount_remaining)}<br />"
        if balance.payment_status == PaymentBalanceStatus.PAID_FULL:
            body += "<br /><b>" + _("PAID IN FULL!") + "</b> " + _("Your registration is now fully paid. Thank you!")

    admin_notes = (payment.notes or {}).get("admin_notes")
    if admin_notes:
        body += "<br /><br /><b>" + _("Notes") + "</b><br />" + escape(admin_notes)

    body += "<br /><br />" + _("If you have any questions about this payment, please contact the event organizers.")
    body += "<br /><br />" + _("Thank you!")

    return str(subject), str(body)
