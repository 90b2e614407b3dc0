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

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("chirho", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="groupregistration",
            name="group_leader_phone",
            field=models.CharField(blank=True, default="", max_length=30),
        ),
        migrations.AddField(
            model_name="groupregistration",
            name="external_id",
            field=models.CharField(
                blank=True,
                db_index=True,
                help_text="Identifier of the group in the imported roster",
                max_length=50,
                null=True,
            ),
        ),
        migrations.AddField(
            model_name="participant",
            name="age",
            field=models.PositiveIntegerField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="participant",
            name="gender",
            field=models.CharField(
                blank=True, choices=[("male", "Male"), ("female", "Female")], default="", max_length=10
            ),
        ),
        migrations.AddField(
            model_name="participant",
            name="participant_type",
            field=models.CharField(
                choices=[
                    ("youth_u18", "Youth under 18"),
                    ("youth_o18", "Youth 18 or over"),
                    ("chaperone", "Chaperone"),
                    ("priest", "Priest"),
                ],
                default="youth_u18",
                max_length=10,
            ),
        ),
    ]
