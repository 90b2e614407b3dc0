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
import traceback
from functools import wraps
from typing import TYPE_CHECKING, Any

from background_task import background
from django.conf import settings as conf_settings
from django.core.mail import EmailMultiAlternatives

from chirho.models.event import Organization

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

INTERNAL_KWARGS = {"schedule", "repeat", "repeat_until", "remove_existing_tasks"}


def background_auto(schedule: Any = 0, **background_kwargs: Any) -> Any:
    """Conditionally run functions as background tasks.

    Creates a decorator that runs functions synchronously when
    AUTO_BACKGROUND_TASKS is True, and as background tasks otherwise.

    Args:
        schedule (int): Seconds to delay before execution
        **background_kwargs: Additional arguments for background task

    Returns:
        function: Decorator function

    """

    def decorator(original_function: Callable[..., Any]) -> Callable[..., Any]:
        background_task = background(schedule=schedule, **background_kwargs)(original_function)

        @wraps(original_function)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if getattr(conf_settings, "AUTO_BACKGROUND_TASKS", False):
                filtered_kwargs = {key: value for key, value in kwargs.items() if key not in INTERNAL_KWARGS}
                return original_function(*args, **filtered_kwargs)
            return background_task(*args, **kwargs)

        wrapper.task = background_task
        wrapper.task_function = original_function
        return wrapper

    return decorator


# MAIL


def remove_html_tags(text: str) -> str:
    """Remove html tags from a string."""
    return re.sub(re.compile("<.*?>"), "", text)


def clean_sender(sender_name: str) -> str:
    """Sanitize a sender name for email headers."""
    sender_name = sender_name.replace(":", " ")
    sender_name = sender_name.split(",")[0]
    sender_name = re.sub(r"[^a-zA-Z0-9\s\-\']", "", sender_name)
    return re.sub(r"\s+", " ", sender_name).strip()


def mail_error(subject: Any, email_body: Any, exception: Any = None) -> None:
    """Log an email that could not be sent.

    Args:
        subject (str): Email subject that failed
        email_body (str): Email body that failed
        exception (Exception, optional): Exception that caused the failure

    """
    logger.error("Mail error: %s", exception)
    logger.error("Subject: %s", subject)
    logger.debug("Body: %s", email_body)
    if exception:
        logger.debug("".join(traceback.format_exception(type(exception), exception, exception.__traceback__)))


def _build_email_message(subj: str, body: str, m_email: str, organization: Organization | None) -> EmailMultiAlternatives:
    """Build the message, sent on behalf of the organization when known.

    The organization main mail, if set, gets a blind copy and is used as Reply-To.
    """
    sender_name = "ChiRho Events"
    headers = {}
    bcc_recipients = []
    if organization:
        sender_name = organization.name
        if organization.main_mail:
            bcc_recipients.append(organization.main_mail)
            headers["Reply-To"] = organization.main_mail

    sender = f"{clean_sender(sender_name)} <{conf_settings.DEFAULT_FROM_EMAIL}>"

    message = EmailMultiAlternatives(
        subj,
        remove_html_tags(body),
        sender,
        [m_email],
        bcc=bcc_recipients,
        headers=headers,
    )
    message.attach_alternative(body, "text/html")
    return message


def my_send_simple_mail(subj: str, body: str, m_email: str, organization_id: int | None = None) -> None:
    """Send an email right away.

    Args:
        subj: Email subject line
        body: Email body content (HTML format)
        m_email: Recipient email address
        organization_id: Organization sending the email, if any

    Raises:
        Exception: Re-raises email sending exceptions after logging error details
    """
    try:
        organization = None
        if organization_id:
            organization = Organization.objects.filter(pk=organization_id).first()

        email_message = _build_email_message(subj, body, m_email, organization)
        email_message.send()

        logger.info("Sent email to %s: %s", m_email, subj)

    except Exception as email_sending_exception:
        mail_error(subj, body, email_sending_exception)
        raise


@background_auto(queue="mail")
def my_send_mail_bkg(subj: str, body: str, m_email: str, organization_id: int | None = None) -> None:
    """Background task delivering a queued email."""
    my_send_simple_mail(subj, body, m_email, organization_id)


def my_send_mail(subject: str, body: str, recipient: str, organization: Organization | None = None) -> None:
    """Queue an email for delivery.

    Args:
        subject: Email subject line
        body: Email body content (HTML or plain text)
        recipient: Email address of the recipient
        organization: Organization the email is sent for, used for sender and copies

    """
    if not recipient:
        logger.warning("No recipient for email: %s", subject)
        return

    subject = str(subject).replace("  ", " ")
    organization_id = organization.id if organization else None
    my_send_mail_bkg(subject, str(body), recipient, organization_id)
