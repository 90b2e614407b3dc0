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


class ChirhoError(Exception):
    """Base class of the errors raised by the payment and import operations.

    Attributes:
        message (str): Message shown to the caller
        details (list): Optional list of detail messages, such as per-row errors

    """

    status_code = 500

    def __init__(self, message: str = "", details: list | None = None) -> None:
        """Initialize with the message shown to the caller."""
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(ChirhoError):
    """Malformed or missing required input."""

    status_code = 400


class MissingColumnError(ValidationError):
    """The uploaded CSV lacks the columns needed to process any row."""


class NotFoundError(ChirhoError):
    """Referenced registration, balance or payment does not exist."""

    status_code = 404


class DuplicatePaymentError(ChirhoError):
    """A matching payment was recorded moments ago.

    Attributes:
        registration_id (str): Registration the payment was meant for
        amount (Decimal): Amount of the rejected payment

    """

    status_code = 409

    def __init__(self, registration_id: str, amount: object) -> None:
        """Initialize with the registration and amount of the rejected payment."""
        super().__init__(
            f"A payment of {amount} was already recorded for this registration moments ago. "
            "Resubmit with force to record it anyway."
        )
        self.registration_id = registration_id
        self.amount = amount


class RowImportError(ChirhoError):
    """Problem limited to a single CSV row, recorded without stopping the batch.

    Attributes:
        participant_name (str | None): Name read from the row, when present

    """

    def __init__(self, message: str, participant_name: str | None = None) -> None:
        """Initialize with the row message and the participant it refers to."""
        super().__init__(message)
        self.participant_name = participant_name


class ParticipantNotFoundError(RowImportError):
    """No candidate matches the row identifiers."""


class AmbiguousParticipantError(RowImportError):
    """More than one candidate matches and the row cannot tell them apart."""


class MissingIdentifierError(RowImportError):
    """Row has neither a participant name nor a registration id."""


class CapacityExceededError(RowImportError):
    """Target section is already full."""
