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

from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from chirho.utils.common import camelize
from chirho.utils.download import seating_template_download
from chirho.utils.upload import decode_uploaded_file, import_seating_assignments, import_seating_sections
from chirho.views.base import acting_user, get_event, get_uploaded_csv

if TYPE_CHECKING:
    from django.http import HttpRequest


@require_POST
def orga_seating_assignments_import(request: HttpRequest, event_id: int) -> JsonResponse:
    """Import seating assignments; row problems are reported, not fatal."""
    event = get_event(event_id)
    uploaded_file = get_uploaded_csv(request)
    lines = decode_uploaded_file(uploaded_file).split("\n")
    result = import_seating_assignments(event, lines, assigned_by=acting_user(request))
    return JsonResponse(camelize(result))


@require_POST
def orga_seating_sections_import(request: HttpRequest, event_id: int) -> JsonResponse:
    """Create seating sections from a CSV file."""
    event = get_event(event_id)
    result = import_seating_sections(event, get_uploaded_csv(request))
    if not result["errors"]:
        del result["errors"]
    return JsonResponse(camelize(result))


@require_GET
def orga_seating_template(request: HttpRequest, event_id: int) -> HttpResponse:
    """Download the seating assignment template of an event."""
    return seating_template_download(get_event(event_id))
