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

from django.db import models
from django.utils.translation import gettext_lazy as _

from chirho.models.base import BaseModel, UuidMixin
from chirho.models.event import Event


class RegistrationType(models.TextChoices):
    GROUP = "group", _("Group")
    INDIVIDUAL = "individual", _("Individual")


class ParticipantType(models.TextChoices):
    YOUTH_U18 = "youth_u18", _("Youth under 18")
    YOUTH_O18 = "youth_o18", _("Youth 18 or over")
    CHAPERONE = "chaperone", _("Chaperone")
    PRIEST = "priest", _("Priest")


class Gender(models.TextChoices):
    MALE = "male", _("Male")
    FEMALE = "female", _("Female")


class GroupRegistration(UuidMixin, BaseModel):
    """A parish or youth group enrolled in an event as a whole."""

    search = models.CharField(max_length=150, editable=False)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="group_registrations")

    group_name = models.CharField(max_length=150, verbose_name=_("Group name"))

    parish_name = models.CharField(max_length=150, blank=True, null=True, verbose_name=_("Parish name"))

    group_leader_name = models.CharField(max_length=150, blank=True, default="")

    group_leader_email = models.EmailField(blank=True, default="")

    group_leader_phone = models.CharField(max_length=30, blank=True, default="")

    external_id = models.CharField(
        max_length=50,
        blank=True,
        null=True,
        db_index=True,
        help_text=_("Identifier of the group in the imported roster"),
    )

    def __str__(self) -> str:
        return self.group_name

    def recipient(self) -> tuple[str, str]:
        """Return (email, greeting name) for notifications."""
        return self.group_leader_email, self.group_leader_name or self.group_name


class Participant(UuidMixin, BaseModel):
    """A person attending as part of a group registration."""

    search = models.CharField(max_length=150, editable=False)

    group = models.ForeignKey(GroupRegistration, on_delete=models.CASCADE, related_name="participants")

    first_name = models.CharField(max_length=100)

    last_name = models.CharField(max_length=100)

    email = models.EmailField(blank=True, default="")

    age = models.PositiveIntegerField(blank=True, null=True)

    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True, default="")

    participant_type = models.CharField(
        max_length=10, choices=ParticipantType.choices, default=ParticipantType.YOUTH_U18
    )

    def __str__(self) -> str:
        return self.full_name()

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class IndividualRegistration(UuidMixin, BaseModel):
    """A single attendee enrolled on their own."""

    search = models.CharField(max_length=150, editable=False)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="individual_registrations")

    first_name = models.CharField(max_length=100)

    last_name = models.CharField(max_length=100)

    email = models.EmailField(blank=True, default="")

    def __str__(self) -> str:
        return self.full_name()

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def recipient(self) -> tuple[str, str]:
        """Return (email, greeting name) for notifications."""
        return self.email, self.full_name()


def get_registration(registration_id: str, registration_type: str) -> GroupRegistration | IndividualRegistration | None:
    """Look up a registration of either type by its external id."""
    model = GroupRegistration if registration_type == RegistrationType.GROUP else IndividualRegistration
    return model.objects.select_related("event", "event__organization").filter(uuid=registration_id).first()
