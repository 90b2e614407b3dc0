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

import json
from typing import TYPE_CHECKING, Any

from chirho.forms.upload import UploadCsvForm
from chirho.models.event import Event
from chirho.utils.common import underscore
from chirho.utils.exceptions import NotFoundError, ValidationError
from chirho.utils.security.csv_validation import validate_csv_size

if TYPE_CHECKING:
    from django.contrib.auth.models import User
    from django.core.files.uploadedfile import UploadedFile
    from django.http import HttpRequest


def get_event(event_id: int) -> Event:
    """Return the event or raise NotFoundError."""
    event = Event.objects.select_related("organization").filter(pk=event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def read_json_body(request: HttpRequest) -> dict:
    """Parse the JSON body of a request, converting its keys to snake_case.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    try:
        data = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError) as err:
        raise ValidationError("Invalid JSON body") from err
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")
    return underscore(data)


def acting_user(request: HttpRequest) -> User | None:
    """User to record in audit fields, if logged in."""
    user: Any = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user
    return None


def get_uploaded_csv(request: HttpRequest, field: str = "file") -> UploadedFile:
    """Validate the CSV sent in a multipart field and return the file.

    Raises:
        ValidationError: If no file was sent or it is not a CSV
    """
    if field not in request.FILES:
        raise ValidationError("No file provided")

    form = UploadCsvForm(request.POST, {"file": request.FILES[field]})
    if not form.is_valid():
        messages = [str(message) for errors in form.errors.values() for message in errors]
        raise ValidationError(messages[0] if messages else "Invalid file")

    uploaded_file = form.cleaned_data["file"]
    validate_csv_size(uploaded_file)
    return uploaded_file
