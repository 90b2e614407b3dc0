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

import logging
from typing import TYPE_CHECKING, Optional

from django.http import JsonResponse

from chirho.utils.exceptions import ChirhoError

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


def _error_response(exception: ChirhoError) -> JsonResponse:
    payload = {"error": exception.message}
    if exception.details:
        payload["errors"] = exception.details
    return JsonResponse(payload, status=exception.status_code)


class ExceptionHandlingMiddleware:
    """Turn errors of the payment and import operations into JSON responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request: HttpRequest, exception: Exception) -> Optional[HttpResponse]:
        """Answer known errors with their status code, and anything else with a generic 500.

        Unexpected errors are logged with their traceback; the response never
        carries their details. Outside the API, unexpected errors are left to
        Django's default handling.

        Args:
            request: The HTTP request object that triggered the exception
            exception: The exception instance that was raised

        Returns:
            JsonResponse for handled exceptions, None otherwise
        """
        if isinstance(exception, ChirhoError) and exception.status_code < 500:
            logger.info("%s on %s: %s", type(exception).__name__, request.path, exception)
            return _error_response(exception)

        if not request.path.startswith(API_PREFIX):
            return None

        logger.exception("Unexpected error on %s", request.path, exc_info=exception)
        return JsonResponse({"error": "Internal server error"}, status=500)
