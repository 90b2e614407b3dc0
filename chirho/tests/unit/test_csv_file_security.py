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

"""Tests for CSV upload limits and formula escaping."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from chirho.utils.exceptions import ValidationError
from chirho.utils.security.csv_validation import sanitize_csv_value, validate_csv_size


class TestSanitizeCsvValue:
    """Test escaping of cells a spreadsheet would run as formulas."""

    @pytest.mark.parametrize("value", ["=SUM(A1:A10)", "+1234567890", "-5*10", "@function()", "|cmd", "\t=SUM(A1)"])
    def test_formula_prefixes_are_escaped(self, value: str) -> None:
        assert sanitize_csv_value(value) == "'" + value

    @pytest.mark.parametrize("value", ["St. Mary", "", 50, None])
    def test_other_values_unchanged(self, value) -> None:
        assert sanitize_csv_value(value) == value

    def test_inner_equals_unchanged(self) -> None:
        """Only the first character matters."""
        assert sanitize_csv_value("Room A=B") == "Room A=B"


class TestValidateCsvSize:
    """Test the size limit of CSV uploads."""

    def test_small_file_accepted(self) -> None:
        validate_csv_size(Mock(size=1024))

    def test_file_at_limit_accepted(self, settings) -> None:
        settings.MAX_CSV_UPLOAD_SIZE = 2048
        validate_csv_size(Mock(size=2048))

    def test_large_file_rejected(self, settings) -> None:
        settings.MAX_CSV_UPLOAD_SIZE = 2 * 1024 * 1024
        with pytest.raises(ValidationError) as exc_info:
            validate_csv_size(Mock(size=3 * 1024 * 1024))
        assert exc_info.value.message == "File too large. Maximum size is 2 MB"

    def test_missing_size_accepted(self) -> None:
        validate_csv_size(object())
