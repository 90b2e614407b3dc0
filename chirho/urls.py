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

from django.urls import path

from chirho.views.orga import accounting as views_oa
from chirho.views.orga import registration as views_or
from chirho.views.orga import seating as views_os

urlpatterns = [
    path(
        "api/payments/record/",
        views_oa.orga_payment_record,
        name="orga_payment_record",
    ),
    path(
        "api/payments/check/record/",
        views_oa.orga_check_payment_record,
        name="orga_check_payment_record",
    ),
    path(
        "api/payments/<str:payment_id>/confirm/",
        views_oa.orga_payment_confirm,
        name="orga_payment_confirm",
    ),
    path(
        "api/registrations/<str:registration_id>/payment-balance/",
        views_oa.orga_payment_balance_update,
        name="orga_payment_balance_update",
    ),
    path(
        "api/registrations/<str:registration_id>/payments/",
        views_oa.orga_registration_payments,
        name="orga_registration_payments",
    ),
    path(
        "api/events/<int:event_id>/reports/balances/",
        views_oa.orga_event_balances,
        name="orga_event_balances",
    ),
    path(
        "api/events/<int:event_id>/balances/recompute/",
        views_oa.orga_event_balances_recompute,
        name="orga_event_balances_recompute",
    ),
    path(
        "api/events/<int:event_id>/registrations/import/",
        views_or.orga_registrations_import,
        name="orga_registrations_import",
    ),
    path(
        "api/events/<int:event_id>/seating-assignments/import/",
        views_os.orga_seating_assignments_import,
        name="orga_seating_assignments_import",
    ),
    path(
        "api/events/<int:event_id>/seating-assignments/template/",
        views_os.orga_seating_template,
        name="orga_seating_template",
    ),
    path(
        "api/events/<int:event_id>/seating-sections/import/",
        views_os.orga_seating_sections_import,
        name="orga_seating_sections_import",
    ),
]
