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

"""CSV security validation utilities.

Provides protection against:
- Formula injection attacks (=, +, -, @, | prefixes)
- Memory exhaustion from large files
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings as conf_settings

from chirho.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Formula injection characters that need sanitization
FORMULA_PREFIXES = ("=", "+", "-", "@", "|", "\t", "\r")

DEFAULT_MAX_CSV_SIZE = 5 * 1024 * 1024


def sanitize_csv_value(value: Any) -> Any:
    """Sanitize a CSV value to prevent formula injection attacks.

    When CSV files are opened in spreadsheet applications, cells starting
    with =, +, -, @, | are treated as formulas and executed.

    Args:
        value: Value of the CSV cell (string, number, etc.)

    Returns:
        Sanitized value with formula prefix escaped if necessary

    Examples:
        >>> sanitize_csv_value("=SUM(A1:A10)")
        "'=SUM(A1:A10)"
        >>> sanitize_csv_value("St. Mary")
        "St. Mary"
        >>> sanitize_csv_value(50)
        50

    """
    if not isinstance(value, str) or not value:
        return value

    if value.startswith(FORMULA_PREFIXES):
        sanitized = "'" + value
        logger.debug("Sanitized potential formula injection: %s -> %s", value[:50], sanitized[:50])
        return sanitized

    return value


def validate_csv_size(uploaded_file: Any) -> None:
    """Reject uploads larger than MAX_CSV_UPLOAD_SIZE bytes.

    Raises:
        ValidationError: If the file is too large
    """
    max_size = getattr(conf_settings, "MAX_CSV_UPLOAD_SIZE", DEFAULT_MAX_CSV_SIZE)
    size = getattr(uploaded_file, "size", None)
    if size is not None and size > max_size:
        logger.warning("Rejected CSV upload of %s bytes", size)
        raise ValidationError(f"File too large. Maximum size is {max_size // (1024 * 1024)} MB")
