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

from typing import TYPE_CHECKING

from django.http import JsonResponse
from django.views.decorators.http import require_POST

from chirho.utils.common import camelize
from chirho.utils.exceptions import ValidationError
from chirho.utils.upload import decode_uploaded_file, import_registrations
from chirho.views.base import acting_user, get_event, get_uploaded_csv

if TYPE_CHECKING:
    from django.http import HttpRequest


def _uploaded_lines(request: HttpRequest, field: str) -> list[str] | None:
    if field not in request.FILES:
        return None
    return decode_uploaded_file(get_uploaded_csv(request, field)).split("\n")


@require_POST
def orga_registrations_import(request: HttpRequest, event_id: int) -> JsonResponse:
    """Import group registrations and participants from a groups and/or a participants CSV."""
    event = get_event(event_id)
    groups_lines = _uploaded_lines(request, "groups_file")
    participants_lines = _uploaded_lines(request, "participants_file")
    if groups_lines is None and participants_lines is None:
        raise ValidationError("No file provided")

    result = import_registrations(event, groups_lines, participants_lines, imported_by=acting_user(request))
    return JsonResponse(camelize(result))
