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

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from chirho.models.seating import SeatingAssignment, SeatingSection
from chirho.utils.exceptions import MissingColumnError, ValidationError
from chirho.utils.upload import _parse_capacity, import_seating_assignments, import_seating_sections, parse_csv_line
from chirho.tests.unit.base import BaseTestCase


class TestParseCsvLine:
    def test_quoted_commas(self):
        assert parse_csv_line('A, "Doe, Jane" ,12') == ["A", "Doe, Jane", "12"]

    def test_empty_cells(self):
        assert parse_csv_line(",Jane Doe,") == ["", "Jane Doe", ""]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("50", 50), ("50 seats", 50), (" 7", 7), ("0", 100), ("-5", 100), ("abc", 100), ("", 100)],
    )
    def test_capacity(self, value, expected):
        assert _parse_capacity(value) == expected


class TestImportSeatingAssignments(BaseTestCase):
    """Test seating assignments import from CSV lines"""

    def test_duplicate_rows_keep_first(self):
        self.create_individual()

        result = import_seating_assignments(self.event(), ["Section Name,Participant Name", "A,Jane Doe", "A,Jane Doe"])

        assert result["success"] is True
        assert result["sections_created"] == 1
        assert result["assignments_created"] == 1
        assert result["assignments_updated"] == 0
        assert result["errors"] == []
        assert result["warnings"] == ['Row 3: Duplicate assignment for "Jane Doe" - using first occurrence']

        section = SeatingSection.objects.get(event=self.event(), name="A")
        assert section.capacity == 100
        assert section.current_occupancy == 1

    def test_failing_row_does_not_stop_batch(self):
        self.create_individual()
        self.create_individual(first_name="Mark", last_name="Lee", email="mark@example.com")
        self.create_individual(first_name="Paul", last_name="Ray", email="paul@example.com")
        self.create_individual(first_name="Ruth", last_name="Kim", email="ruth@example.com")
        lines = [
            "Section Name,Participant Name",
            "A,Jane Doe",
            "A,Mark Lee",
            "A,Nobody Here",
            "B,Paul Ray",
            "B,Ruth Kim",
        ]

        result = import_seating_assignments(self.event(), lines)

        assert result["assignments_created"] == 4
        assert result["sections_created"] == 2
        assert result["errors"] == [
            {"row": 4, "message": 'Participant not found: "Nobody Here"', "participant_name": "Nobody Here"}
        ]
        assert SeatingAssignment.objects.count() == 4

    def test_group_members_share_assignment(self):
        """Only the first member of a group decides its section"""
        group = self.create_group(participants=["John Smith", "Mary Smith"])

        result = import_seating_assignments(
            self.event(), ["Section Name,Participant Name", "A,John Smith", "B,Mary Smith"]
        )

        assert result["assignments_created"] == 1
        assert result["warnings"] == ['Row 3: Duplicate assignment for "Mary Smith" - using first occurrence']
        assert SeatingAssignment.objects.get(group_registration=group).section.name == "A"

    def test_capacity_exceeded(self):
        self.create_individual()
        self.create_individual(first_name="Mark", last_name="Lee", email="mark@example.com")
        self.create_individual(first_name="Paul", last_name="Ray", email="paul@example.com")
        lines = [
            "Section Name,Max Capacity,Participant Name",
            "A,2,Jane Doe",
            "A,2,Mark Lee",
            "A,2,Paul Ray",
        ]

        result = import_seating_assignments(self.event(), lines)

        assert result["assignments_created"] == 2
        assert result["errors"] == [
            {"row": 4, "message": 'Section "A" is at capacity (2)', "participant_name": "Paul Ray"}
        ]
        section = SeatingSection.objects.get(name="A")
        assert section.capacity == 2
        assert section.current_occupancy == 2

    def test_existing_section_capacity(self):
        section = self.create_section(capacity=1)
        self.create_assignment(section, self.create_group(participants=["John Smith"]))
        section.current_occupancy = 1
        section.save()
        self.create_individual()

        result = import_seating_assignments(self.event(), ["Section Name,Participant Name", "a,Jane Doe"])

        assert result["sections_created"] == 0, "Section names are matched case-insensitively"
        assert result["errors"][0]["message"] == 'Section "a" is at capacity (1)'

    def test_move_assignment(self):
        individual = self.create_individual()
        old_section = self.create_section(name="A")
        self.create_assignment(old_section, individual)
        old_section.current_occupancy = 1
        old_section.save()

        result = import_seating_assignments(self.event(), ["Section Name,Participant Name", "B,Jane Doe"])

        assert result["assignments_created"] == 0
        assert result["assignments_updated"] == 1
        old_section.refresh_from_db()
        new_section = SeatingSection.objects.get(name="B")
        assert old_section.current_occupancy == 0, "Occupancy of the section moved out of is recounted"
        assert new_section.current_occupancy == 1
        assert SeatingAssignment.objects.get(individual_registration=individual).section == new_section

    def test_registration_id_column(self):
        individual = self.create_individual()

        result = import_seating_assignments(
            self.event(), ["Section Name,Registration ID", f"A,{individual.uuid}", "A,unknown"]
        )

        assert result["assignments_created"] == 1
        assert result["errors"] == [{"row": 3, "message": 'Participant not found with ID: "unknown"'}]

    def test_group_name_disambiguates(self):
        self.create_group(participants=["Jane Doe"], parish_name="St. Joseph")
        self.create_individual()

        result = import_seating_assignments(
            self.event(), ["Section Name,Participant Name,Group Name", "A,Jane Doe,", "B,Jane Doe,joseph"]
        )

        assert result["errors"][0]["row"] == 2
        assert result["errors"][0]["message"].startswith('Multiple participants named "Jane Doe" found.')
        assert result["assignments_created"] == 1
        assert SeatingAssignment.objects.get().section.name == "B"

    def test_row_errors(self):
        self.create_individual()

        result = import_seating_assignments(
            self.event(), ["Section Name,Participant Name,Registration ID", ",Jane Doe,", "A,,"]
        )

        assert result["errors"] == [
            {"row": 2, "message": "Missing section name", "participant_name": "Jane Doe"},
            {"row": 3, "message": "Missing participant name or registration ID"},
        ]
        assert result["sections_created"] == 0

    def test_comments_and_blank_lines(self):
        self.create_individual()
        lines = ["# seating plan", "", "Section Name,Participant Name", "   ", "A,Jane Doe", ""]

        result = import_seating_assignments(self.event(), lines)

        assert result["assignments_created"] == 1
        assert result["errors"] == []

    def test_new_sections_display_order(self):
        self.create_section(name="A")
        self.create_individual()
        self.create_individual(first_name="Mark", last_name="Lee", email="mark@example.com")

        import_seating_assignments(self.event(), ["Section Name,Participant Name", "B,Jane Doe", "C,Mark Lee"])

        orders = dict(SeatingSection.objects.values_list("name", "display_order"))
        assert orders == {"A": 0, "B": 1, "C": 2}

    def test_header_only(self):
        with pytest.raises(ValidationError) as exc_info:
            import_seating_assignments(self.event(), ["Section Name,Participant Name", "# nothing"])
        assert exc_info.value.message == "File must contain header row and at least one data row"

    def test_missing_section_column(self):
        with pytest.raises(MissingColumnError) as exc_info:
            import_seating_assignments(self.event(), ["Area,Participant Name", "A,Jane Doe"])
        assert exc_info.value.message == "Missing required column: Section Name"

    def test_missing_participant_column(self):
        with pytest.raises(MissingColumnError) as exc_info:
            import_seating_assignments(self.event(), ["Section Name,Group Name", "A,St. Mary"])
        assert exc_info.value.message == "Missing required column: Participant Name or Registration ID"


class TestImportSeatingSections(BaseTestCase):
    """Test seating sections import from an uploaded CSV file"""

    def _upload(self, content):
        return SimpleUploadedFile("sections.csv", content.encode(), content_type="text/csv")

    def test_import_with_defaults(self):
        content = (
            "Name,Capacity,Color,Display Order,Public Visible\n"
            "Hall A,,#zzz,,\n"
            "Hall B,40,#FF0000,7,no\n"
            ",10,,,\n"
            "Hall C,abc,,,\n"
        )

        result = import_seating_sections(self.event(), self._upload(content))

        assert result == {"success": True, "sections_created": 3, "errors": ["Row 4: Missing section name"]}
        sections = {section.name: section for section in SeatingSection.objects.filter(event=self.event())}
        assert sections["Hall A"].capacity == 100
        assert sections["Hall A"].color == "#1E3A5F"
        assert sections["Hall A"].display_order == 1
        assert sections["Hall A"].public_visible is True
        assert sections["Hall B"].capacity == 40
        assert sections["Hall B"].color == "#FF0000"
        assert sections["Hall B"].display_order == 7
        assert sections["Hall B"].public_visible is False
        assert sections["Hall C"].capacity == 100
        assert sections["Hall C"].display_order == 3, "Every valid row consumes a display order"

    def test_name_column_only(self):
        result = import_seating_sections(self.event(), self._upload("Name\nHall A\nHall B\n"))

        assert result == {"success": True, "sections_created": 2, "errors": []}
        assert set(SeatingSection.objects.values_list("name", flat=True)) == {"Hall A", "Hall B"}

    def test_semicolons_are_not_separators(self):
        import_seating_sections(self.event(), self._upload("Name\nHall A; North\n"))

        assert SeatingSection.objects.get().name == "Hall A; North"

    def test_display_order_after_existing(self):
        self.create_section(name="Old", display_order=5)

        import_seating_sections(self.event(), self._upload("name,capacity\nNew,\n"))

        assert SeatingSection.objects.get(name="New").display_order == 6

    def test_no_valid_rows(self):
        with pytest.raises(ValidationError) as exc_info:
            import_seating_sections(self.event(), self._upload("name,capacity\n,10\n"))
        assert exc_info.value.message == "No valid seating sections to import"
        assert exc_info.value.details == ["Row 2: Missing section name"]
        assert not SeatingSection.objects.exists()

    def test_missing_name_column(self):
        with pytest.raises(MissingColumnError):
            import_seating_sections(self.event(), self._upload("title,capacity\nHall A,10\n"))
