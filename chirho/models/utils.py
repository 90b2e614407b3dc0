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

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import uuid4

from django.db.models import Sum

if TYPE_CHECKING:
    from django.db.models import QuerySet


def format_amount(decimal_value: Decimal | None) -> str:
    """Format an amount with two decimals, as shown to registrants."""
    if decimal_value is None:
        decimal_value = Decimal(0)
    return f"{decimal_value:.2f}"


def my_uuid_short() -> str:
    """Generate short UUID string of 12 characters.

    Returns:
        str: 12-character UUID string

    """
    return my_uuid(12)


def my_uuid(length: int | None = None) -> str:
    """Generate a UUID hex string, optionally truncated to specified length."""
    uuid_hex_string = uuid4().hex
    if length is None:
        return uuid_hex_string
    return uuid_hex_string[:length]


def get_sum(queryset: QuerySet, field_name: str = "amount") -> Decimal:
    """Sum a decimal field from a queryset, returning 0 if empty or None."""
    aggregation_result = queryset.aggregate(total=Sum(field_name))
    if not aggregation_result or not aggregation_result["total"]:
        return Decimal(0)
    return aggregation_result["total"]
