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

from django.conf import settings as conf_settings
from django.db import models
from django.db.models import Q
from django.db.models.constraints import UniqueConstraint
from django.utils.translation import gettext_lazy as _

from chirho.models.base import BaseModel
from chirho.models.event import Event
from chirho.models.registration import GroupRegistration, IndividualRegistration, RegistrationType


class SeatingSection(BaseModel):
    """A named, capacity-bounded block of seats for an event."""

    search = models.CharField(max_length=150, editable=False)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="seating_sections")

    name = models.CharField(max_length=100, verbose_name=_("Name"))

    section_code = models.CharField(max_length=20, blank=True, null=True)

    color = models.CharField(max_length=7, default="#1E3A5F")

    capacity = models.PositiveIntegerField(default=100)

    current_occupancy = models.PositiveIntegerField(default=0)

    location_description = models.CharField(max_length=300, blank=True, null=True)

    public_visible = models.BooleanField(default=True)

    display_order = models.IntegerField(blank=True)

    class Meta:
        ordering = ["display_order", "name"]

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "capacity": self.capacity,
            "current_occupancy": self.current_occupancy,
            "display_order": self.display_order,
        }


class SeatingAssignment(BaseModel):
    """Places one registration (group or individual) into a seating section."""

    section = models.ForeignKey(SeatingSection, on_delete=models.CASCADE, related_name="assignments")

    group_registration = models.ForeignKey(
        GroupRegistration, on_delete=models.CASCADE, null=True, blank=True, related_name="seating_assignments"
    )

    individual_registration = models.ForeignKey(
        IndividualRegistration, on_delete=models.CASCADE, null=True, blank=True, related_name="seating_assignments"
    )

    assigned_by = models.ForeignKey(
        conf_settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    class Meta:
        constraints = [
            UniqueConstraint(
                fields=["group_registration"],
                condition=Q(deleted=None, group_registration__isnull=False),
                name="unique_seating_per_group_registration",
            ),
            UniqueConstraint(
                fields=["individual_registration"],
                condition=Q(deleted=None, individual_registration__isnull=False),
                name="unique_seating_per_individual_registration",
            ),
        ]

    def registration_type(self) -> str:
        if self.group_registration_id:
            return RegistrationType.GROUP
        return RegistrationType.INDIVIDUAL
