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
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from chirho.accounting.balance import (
    adjust_total_due,
    get_event_balances,
    get_registration_payments,
    recompute_event_balances,
)
from chirho.accounting.payment import confirm_pending_payment, record_check_payment, record_payment
from chirho.utils.common import camelize
from chirho.views.base import acting_user, get_event, read_json_body

if TYPE_CHECKING:
    from django.http import HttpRequest


@require_POST
def orga_payment_record(request: HttpRequest) -> JsonResponse:
    """Record a manual payment (card, check, cash, transfer or other).

    A payment looking like a resubmission is refused with 409, unless the
    body carries "force": true.
    """
    data = read_json_body(request)
    force = bool(data.pop("force", False))
    result = record_payment(data, recorded_by=acting_user(request), force=force)
    return JsonResponse(camelize({"success": True, **result}))


@require_POST
def orga_check_payment_record(request: HttpRequest) -> JsonResponse:
    """Record a check, already received or only expected."""
    data = read_json_body(request)
    force = bool(data.pop("force", False))
    result = record_check_payment(data, recorded_by=acting_user(request), force=force)
    return JsonResponse(camelize({"success": True, **result}))


@require_POST
def orga_payment_confirm(request: HttpRequest, payment_id: str) -> JsonResponse:
    """Mark a pending check as received."""
    data = read_json_body(request)
    result = confirm_pending_payment(
        payment_id,
        date_received=data.get("date_received"),
        send_email=bool(data.get("send_email", False)),
    )
    return JsonResponse(camelize({"success": True, **result}))


@require_http_methods(["PUT", "POST"])
def orga_payment_balance_update(request: HttpRequest, registration_id: str) -> JsonResponse:
    """Change the total amount due of a registration."""
    data = read_json_body(request)
    balance = adjust_total_due(
        registration_id,
        data.get("registration_type"),
        data.get("total_amount_due"),
        edited_by=acting_user(request),
        reason=data.get("reason") or "",
    )
    return JsonResponse(camelize(balance))


@require_GET
def orga_registration_payments(request: HttpRequest, registration_id: str) -> JsonResponse:
    """Balance and payment history of a registration; ?type=group|individual."""
    result = get_registration_payments(registration_id, request.GET.get("type"))
    return JsonResponse(camelize(result))


@require_GET
def orga_event_balances(request: HttpRequest, event_id: int) -> JsonResponse:
    """Balance report of every registration of an event."""
    return JsonResponse(camelize(get_event_balances(get_event(event_id))))


@require_POST
def orga_event_balances_recompute(request: HttpRequest, event_id: int) -> JsonResponse:
    """Recompute all balances of an event from their payments."""
    stats = recompute_event_balances(get_event(event_id))
    return JsonResponse(camelize({"success": True, **stats}))
