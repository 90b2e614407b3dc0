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

from typing import TYPE_CHECKING, ClassVar

from admin_auto_filters.filters import AutocompleteFilter
from django.contrib import admin
from import_export.admin import ImportExportModelAdmin

from chirho.models.accounting import Payment, PaymentBalance, RegistrationEdit
from chirho.models.event import Event, Organization
from chirho.models.registration import GroupRegistration, IndividualRegistration, Participant
from chirho.models.seating import SeatingAssignment, SeatingSection

if TYPE_CHECKING:
    from django.http import HttpRequest


class DefModelAdmin(ImportExportModelAdmin):
    """Base admin class with import/export, most recently updated first."""

    ordering: ClassVar[list] = ["-updated"]


class OrganizationFilter(AutocompleteFilter):
    title = "Organization"
    field_name = "organization"


class EventFilter(AutocompleteFilter):
    title = "Event"
    field_name = "event"


class SectionFilter(AutocompleteFilter):
    title = "Section"
    field_name = "section"


@admin.register(Organization)
class OrganizationAdmin(DefModelAdmin):
    list_display = ("name", "slug", "main_mail")
    search_fields = ("name", "slug")


@admin.register(Event)
class EventAdmin(DefModelAdmin):
    list_display = ("name", "organization", "start", "end")
    list_filter = (OrganizationFilter,)
    autocomplete_fields = ["organization"]
    search_fields = ("name", "slug")


class ParticipantInline(admin.TabularInline):
    model = Participant
    exclude = ("search",)
    extra = 0


@admin.register(GroupRegistration)
class GroupRegistrationAdmin(DefModelAdmin):
    exclude = ("search",)
    list_display = ("group_name", "parish_name", "event", "group_leader_name", "external_id", "uuid")
    list_filter = (EventFilter,)
    autocomplete_fields = ["event"]
    search_fields = ("search", "uuid", "external_id")
    inlines: ClassVar[list] = [ParticipantInline]


@admin.register(IndividualRegistration)
class IndividualRegistrationAdmin(DefModelAdmin):
    exclude = ("search",)
    list_display = ("first_name", "last_name", "email", "event", "uuid")
    list_filter = (EventFilter,)
    autocomplete_fields = ["event"]
    search_fields = ("search", "uuid", "email")


@admin.register(Payment)
class PaymentAdmin(DefModelAdmin):
    exclude = ("search",)
    list_display = ("uuid", "registration_id", "registration_type", "amount", "payment_method", "status", "created")
    list_filter = (EventFilter, "status", "payment_method")
    autocomplete_fields = ["organization", "event"]
    search_fields = ("search", "uuid", "registration_id")

    def has_delete_permission(self, request: HttpRequest, obj: Payment | None = None) -> bool:
        """Payments are never deleted, only confirmed."""
        return False


@admin.register(PaymentBalance)
class PaymentBalanceAdmin(DefModelAdmin):
    list_display = ("registration_id", "registration_type", "total_amount_due", "amount_paid", "payment_status")
    list_filter = (EventFilter, "payment_status")
    autocomplete_fields = ["organization", "event"]
    readonly_fields = ("amount_paid", "amount_remaining", "payment_status", "last_payment_date")
    search_fields = ("registration_id",)


@admin.register(RegistrationEdit)
class RegistrationEditAdmin(DefModelAdmin):
    list_display = ("registration_id", "edit_type", "old_total", "new_total", "difference", "created")
    search_fields = ("registration_id",)


@admin.register(SeatingSection)
class SeatingSectionAdmin(DefModelAdmin):
    exclude = ("search",)
    list_display = ("name", "event", "capacity", "current_occupancy", "display_order")
    list_filter = (EventFilter,)
    autocomplete_fields = ["event"]
    search_fields = ("search", "section_code")
    ordering: ClassVar[list] = ["display_order", "name"]


@admin.register(SeatingAssignment)
class SeatingAssignmentAdmin(DefModelAdmin):
    list_display = ("section", "group_registration", "individual_registration", "created")
    list_filter = (SectionFilter,)
    autocomplete_fields = ["section", "group_registration", "individual_registration"]
