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

from django.db import models
from django.utils.translation import gettext_lazy as _

from chirho.models.base import BaseModel


class Organization(BaseModel):
    """Represents an organization running conferences and retreats."""

    name = models.CharField(max_length=100, verbose_name=_("Name"))

    slug = models.SlugField(max_length=100, db_index=True, unique=True)

    main_mail = models.EmailField(
        blank=True,
        null=True,
        verbose_name=_("Main mail"),
        help_text=_("Address receiving a copy of registrant notifications"),
    )


class Event(BaseModel):
    """Represents a conference or retreat of an organization."""

    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="events")

    name = models.CharField(max_length=100, verbose_name=_("Name"))

    slug = models.SlugField(max_length=100, db_index=True)

    start = models.DateField(blank=True, null=True, verbose_name=_("Start date"))

    end = models.DateField(blank=True, null=True, verbose_name=_("End date"))

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "slug"],
                condition=models.Q(deleted=None),
                name="unique_event_slug_per_organization",
            ),
        ]
