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

from typing import Any

from django.db.models.signals import pre_save
from django.dispatch import receiver

from chirho.models.accounting import Payment, PaymentBalance, RegistrationEdit  # noqa: F401
from chirho.models.base import BaseModel, auto_assign_display_order, auto_set_uuid, update_model_search_field
from chirho.models.event import Event, Organization  # noqa: F401
from chirho.models.registration import GroupRegistration, IndividualRegistration, Participant  # noqa: F401
from chirho.models.seating import SeatingAssignment, SeatingSection  # noqa: F401


@receiver(pre_save)
def pre_save_callback(sender: type, instance: Any, *args: Any, **kwargs: Any) -> None:
    """Generic pre-save handler for automatic field population.

    Sets uuid and display order fields when missing, and refreshes the search
    field for models that have one.
    """
    if not isinstance(instance, BaseModel):
        return

    auto_set_uuid(instance)

    auto_assign_display_order(instance)

    update_model_search_field(instance)
