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

"""Base test case for unit tests with common methods"""

from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from chirho.models.accounting import Payment, PaymentBalance, PaymentMethod, PaymentStatus
from chirho.models.event import Event, Organization
from chirho.models.registration import GroupRegistration, IndividualRegistration, Participant, RegistrationType
from chirho.models.seating import SeatingAssignment, SeatingSection


@pytest.mark.django_db
class BaseTestCase:
    """Base test case with common test object accessors"""

    def organization(self):
        """Get the first organization, or create one"""
        organization = Organization.objects.first()
        if not organization:
            organization = self.create_organization()
        return organization

    def event(self):
        """Get the first event, or create one"""
        event = Event.objects.first()
        if not event:
            event = self.create_event()
        return event

    def user(self):
        """Get the first user, or create one"""
        user = User.objects.first()
        if not user:
            user = self.create_user()
        return user

    # Helper methods for creating specific test objects when needed
    def create_organization(self, **kwargs):
        defaults = {
            "name": "St. Michael Youth Ministry",
            "slug": "st-michael",
            "main_mail": "office@stmichael.org",
        }
        defaults.update(kwargs)
        return Organization.objects.create(**defaults)

    def create_event(self, organization=None, **kwargs):
        if organization is None:
            organization = self.organization()
        defaults = {
            "organization": organization,
            "name": "Summer Retreat",
            "slug": "summer-retreat",
        }
        defaults.update(kwargs)
        return Event.objects.create(**defaults)

    def create_user(self, **kwargs):
        defaults = {
            "username": "admin",
            "email": "admin@example.com",
        }
        defaults.update(kwargs)
        return User.objects.create_user(**defaults)

    def create_group(self, event=None, participants=(), **kwargs):
        """Create a group registration with the given participant names"""
        if event is None:
            event = self.event()
        defaults = {
            "event": event,
            "group_name": "Youth Group",
            "parish_name": "St. Mary",
            "group_leader_name": "Anna Leader",
            "group_leader_email": "leader@example.com",
        }
        defaults.update(kwargs)
        group = GroupRegistration.objects.create(**defaults)
        for full_name in participants:
            first_name, last_name = full_name.split(" ", 1)
            Participant.objects.create(group=group, first_name=first_name, last_name=last_name)
        return group

    def create_individual(self, event=None, **kwargs):
        if event is None:
            event = self.event()
        defaults = {
            "event": event,
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
        }
        defaults.update(kwargs)
        return IndividualRegistration.objects.create(**defaults)

    def create_balance(self, registration, total_amount_due=Decimal("100.00"), **kwargs):
        """Create the balance of a group or individual registration"""
        registration_type = (
            RegistrationType.GROUP if isinstance(registration, GroupRegistration) else RegistrationType.INDIVIDUAL
        )
        defaults = {
            "organization": registration.event.organization,
            "event": registration.event,
            "registration_id": registration.uuid,
            "registration_type": registration_type,
            "total_amount_due": total_amount_due,
            "amount_remaining": total_amount_due,
        }
        defaults.update(kwargs)
        return PaymentBalance.objects.create(**defaults)

    def create_payment(self, balance, amount=Decimal("50.00"), **kwargs):
        """Insert a payment row directly, bypassing the duplicate guard"""
        defaults = {
            "organization": balance.organization,
            "event": balance.event,
            "registration_id": balance.registration_id,
            "registration_type": balance.registration_type,
            "amount": amount,
            "payment_method": PaymentMethod.CASH,
            "status": PaymentStatus.SUCCEEDED,
        }
        defaults.update(kwargs)
        return Payment.objects.create(**defaults)

    def create_section(self, event=None, **kwargs):
        if event is None:
            event = self.event()
        defaults = {
            "event": event,
            "name": "A",
            "capacity": 100,
        }
        defaults.update(kwargs)
        return SeatingSection.objects.create(**defaults)

    def create_assignment(self, section, registration):
        if isinstance(registration, GroupRegistration):
            return SeatingAssignment.objects.create(section=section, group_registration=registration)
        return SeatingAssignment.objects.create(section=section, individual_registration=registration)
