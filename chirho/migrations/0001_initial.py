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

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def base_fields():
    return [
        ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
        ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
        ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ("updated", models.DateTimeField(auto_now=True)),
    ]


REGISTRATION_TYPES = [("group", "Group"), ("individual", "Individual")]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("slug", models.SlugField(max_length=100, unique=True)),
                ("main_mail", models.EmailField(blank=True, max_length=254, null=True, verbose_name="Main mail")),
            ],
            options={"ordering": ["-updated"], "abstract": False},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("slug", models.SlugField(max_length=100)),
                ("start", models.DateField(blank=True, null=True, verbose_name="Start date")),
                ("end", models.DateField(blank=True, null=True, verbose_name="End date")),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="events", to="chirho.organization"
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="event",
            constraint=models.UniqueConstraint(
                condition=models.Q(("deleted", None)),
                fields=("organization", "slug"),
                name="unique_event_slug_per_organization",
            ),
        ),
        migrations.CreateModel(
            name="GroupRegistration",
            fields=[
                *base_fields(),
                ("uuid", models.CharField(db_index=True, editable=False, max_length=12, unique=True)),
                ("search", models.CharField(editable=False, max_length=150)),
                ("group_name", models.CharField(max_length=150, verbose_name="Group name")),
                ("parish_name", models.CharField(blank=True, max_length=150, null=True, verbose_name="Parish name")),
                ("group_leader_name", models.CharField(blank=True, default="", max_length=150)),
                ("group_leader_email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="group_registrations",
                        to="chirho.event",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                *base_fields(),
                ("uuid", models.CharField(db_index=True, editable=False, max_length=12, unique=True)),
                ("search", models.CharField(editable=False, max_length=150)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="chirho.groupregistration",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="IndividualRegistration",
            fields=[
                *base_fields(),
                ("uuid", models.CharField(db_index=True, editable=False, max_length=12, unique=True)),
                ("search", models.CharField(editable=False, max_length=150)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="individual_registrations",
                        to="chirho.event",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                *base_fields(),
                ("uuid", models.CharField(db_index=True, editable=False, max_length=12, unique=True)),
                ("search", models.CharField(editable=False, max_length=150)),
                ("registration_id", models.CharField(db_index=True, max_length=12)),
                ("registration_type", models.CharField(choices=REGISTRATION_TYPES, max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "payment_kind",
                    models.CharField(
                        choices=[("partial", "Partial"), ("full", "Full"), ("deposit", "Deposit")],
                        default="partial",
                        max_length=10,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("card", "Credit Card"),
                            ("check", "Check"),
                            ("cash", "Cash"),
                            ("bank_transfer", "Wire Transfer"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("succeeded", "Succeeded"), ("pending", "Pending")],
                        db_index=True,
                        default="succeeded",
                        max_length=10,
                    ),
                ),
                ("check_number", models.CharField(blank=True, max_length=50, null=True)),
                ("check_date", models.DateField(blank=True, null=True)),
                ("card_last4", models.CharField(blank=True, max_length=4, null=True)),
                ("cardholder_name", models.CharField(blank=True, max_length=150, null=True)),
                ("authorization_code", models.CharField(blank=True, max_length=50, null=True)),
                ("payment_method_details", models.CharField(blank=True, max_length=150, null=True)),
                ("transaction_reference", models.CharField(blank=True, max_length=150, null=True)),
                ("notes", models.JSONField(blank=True, default=dict)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="payments", to="chirho.event"
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="chirho.organization",
                    ),
                ),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["registration_id", "status"], name="chirho_paym_registr_status_idx"),
                    models.Index(fields=["registration_id", "created"], name="chirho_paym_registr_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentBalance",
            fields=[
                *base_fields(),
                ("registration_id", models.CharField(db_index=True, max_length=12, unique=True)),
                ("registration_type", models.CharField(choices=REGISTRATION_TYPES, max_length=10)),
                ("total_amount_due", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("amount_paid", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("amount_remaining", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("unpaid", "Unpaid"),
                            ("partial", "Partial"),
                            ("paid_full", "Paid in full"),
                            ("overpaid", "Overpaid"),
                        ],
                        db_index=True,
                        default="unpaid",
                        max_length=10,
                    ),
                ),
                ("last_payment_date", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_balances",
                        to="chirho.event",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_balances",
                        to="chirho.organization",
                    ),
                ),
            ],
            options={"ordering": ["-updated"], "abstract": False},
        ),
        migrations.CreateModel(
            name="RegistrationEdit",
            fields=[
                *base_fields(),
                ("registration_id", models.CharField(db_index=True, max_length=12)),
                ("registration_type", models.CharField(choices=REGISTRATION_TYPES, max_length=10)),
                (
                    "edit_type",
                    models.CharField(choices=[("payment_updated", "Payment updated")], max_length=20),
                ),
                ("old_total", models.DecimalField(decimal_places=2, max_digits=10)),
                ("new_total", models.DecimalField(decimal_places=2, max_digits=10)),
                ("difference", models.DecimalField(decimal_places=2, max_digits=10)),
                ("changes_made", models.JSONField(blank=True, default=dict)),
                ("admin_notes", models.TextField(blank=True, default="")),
                (
                    "edited_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-updated"], "abstract": False},
        ),
        migrations.CreateModel(
            name="SeatingSection",
            fields=[
                *base_fields(),
                ("search", models.CharField(editable=False, max_length=150)),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("section_code", models.CharField(blank=True, max_length=20, null=True)),
                ("color", models.CharField(default="#1E3A5F", max_length=7)),
                ("capacity", models.PositiveIntegerField(default=100)),
                ("current_occupancy", models.PositiveIntegerField(default=0)),
                ("location_description", models.CharField(blank=True, max_length=300, null=True)),
                ("public_visible", models.BooleanField(default=True)),
                ("display_order", models.IntegerField(blank=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="seating_sections",
                        to="chirho.event",
                    ),
                ),
            ],
            options={"ordering": ["display_order", "name"]},
        ),
        migrations.CreateModel(
            name="SeatingAssignment",
            fields=[
                *base_fields(),
                (
                    "section",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="chirho.seatingsection",
                    ),
                ),
                (
                    "group_registration",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="seating_assignments",
                        to="chirho.groupregistration",
                    ),
                ),
                (
                    "individual_registration",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="seating_assignments",
                        to="chirho.individualregistration",
                    ),
                ),
                (
                    "assigned_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="seatingassignment",
            constraint=models.UniqueConstraint(
                condition=models.Q(("deleted", None), ("group_registration__isnull", False)),
                fields=("group_registration",),
                name="unique_seating_per_group_registration",
            ),
        ),
        migrations.AddConstraint(
            model_name="seatingassignment",
            constraint=models.UniqueConstraint(
                condition=models.Q(("deleted", None), ("individual_registration__isnull", False)),
                fields=("individual_registration",),
                name="unique_seating_per_individual_registration",
            ),
        ),
    ]
