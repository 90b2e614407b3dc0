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

import csv
from typing import TYPE_CHECKING

from django.conf import settings as conf_settings
from django.http import HttpResponse

from chirho.models.registration import GroupRegistration, IndividualRegistration
from chirho.models.seating import SeatingSection
from chirho.utils.security.csv_validation import sanitize_csv_value

if TYPE_CHECKING:
    from chirho.models.event import Event

SEATING_TEMPLATE_HEADER = ["Section Name", "Max Capacity", "Participant Name", "Registration ID", "Group Name"]


def _seating_template_comments(event: Event) -> list[str]:
    """Instruction lines placed before the header, ignored by the import."""
    comments = []
    sections = SeatingSection.objects.filter(event=event).order_by("display_order", "name")
    if sections:
        comments.append("# Available Sections:")
        comments.extend(
            f"# {section.name} (Capacity: {section.capacity}, Current: {section.current_occupancy})"
            for section in sections
        )
        comments.append("#")

    comments.extend(
        [
            "# Instructions:",
            "# 1. Fill in the Section Name column for each participant",
            "# 2. New sections will be created automatically if they do not exist",
            "# 3. Delete rows for participants you do not want to assign",
            "# 4. Do not modify the Registration ID column",
            "#",
        ]
    )
    return comments


def export_seating_template(event: Event) -> tuple[list[str], list[list[str]]]:
    """Build the seating assignment template of an event.

    Returns:
        Tuple of comment lines and data rows, header row included. Group
        participants come first, sorted by parish and last name, then the
        individual registrations.
    """
    capacity = str(getattr(conf_settings, "DEFAULT_SECTION_CAPACITY", 100))
    rows = [SEATING_TEMPLATE_HEADER]

    groups = GroupRegistration.objects.filter(event=event).prefetch_related("participants").order_by("parish_name")
    for group in groups:
        for participant in sorted(group.participants.all(), key=lambda el: el.last_name):
            rows.append(["", capacity, participant.full_name(), group.uuid, group.parish_name or ""])

    for individual in IndividualRegistration.objects.filter(event=event).order_by("last_name"):
        rows.append(["", capacity, individual.full_name(), individual.uuid, ""])

    rows = [[sanitize_csv_value(cell) for cell in row] for row in rows]
    return _seating_template_comments(event), rows


def seating_template_download(event: Event) -> HttpResponse:
    """Return the seating assignment template as a CSV attachment."""
    response = HttpResponse(
        content_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="seating-assignments-template-{event.slug}.csv"',
        },
    )

    comments, rows = export_seating_template(event)
    for comment in comments:
        response.write(comment + "\n")

    writer = csv.writer(response, lineterminator="\n")
    writer.writerows(rows)
    return response
