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

import re
from decimal import Decimal
from typing import Any


def _camel(key: str) -> str:
    return re.sub(r"_([a-z0-9])", lambda match: match.group(1).upper(), key)


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)([A-Z])", r"_\1", key).lower()


# Maps keyed by enum values, whose keys are passed through unchanged
VALUE_KEYED_MAPS = {"by_status"}


def camelize(value: Any) -> Any:
    """Recursively convert snake_case dict keys to camelCase.

    Decimal amounts are rendered with two decimals. The keys of the maps named
    in VALUE_KEYED_MAPS are data, not field names, and are left untouched.

    Example:
        >>> camelize({"amount_paid": Decimal("10"), "by_status": {"paid_full": 1}})
        {'amountPaid': '10.00', 'byStatus': {'paid_full': 1}}

    """
    if isinstance(value, dict):
        converted = {}
        for key, item in value.items():
            if key in VALUE_KEYED_MAPS and isinstance(item, dict):
                converted[_camel(str(key))] = {str(inner): camelize(el) for inner, el in item.items()}
            else:
                converted[_camel(str(key))] = camelize(item)
        return converted
    if isinstance(value, (list, tuple)):
        return [camelize(item) for item in value]
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return value


def underscore(value: Any) -> Any:
    """Recursively convert camelCase dict keys to snake_case."""
    if isinstance(value, dict):
        return {_snake(str(key)): underscore(item) for key, item in value.items()}
    if isinstance(value, list):
        return [underscore(item) for item in value]
    return value
