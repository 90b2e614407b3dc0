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

import io
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pandas as pd
from django.conf import settings as conf_settings
from django.db import transaction
from django.db.models import Max

from chirho.accounting.balance import provision_balance
from chirho.models.registration import (
    Gender,
    GroupRegistration,
    IndividualRegistration,
    Participant,
    ParticipantType,
    RegistrationType,
)
from chirho.models.seating import SeatingAssignment, SeatingSection
from chirho.utils.exceptions import (
    AmbiguousParticipantError,
    CapacityExceededError,
    MissingColumnError,
    MissingIdentifierError,
    ParticipantNotFoundError,
    RowImportError,
    ValidationError,
)
from chirho.utils.security.csv_validation import validate_csv_size

if TYPE_CHECKING:
    from collections.abc import Iterable

    from django.contrib.auth.models import User

    from chirho.models.event import Event

logger = logging.getLogger(__name__)

ENCODINGS = [
    "utf-8",
    "utf-8-sig",
    "latin1",
    "windows-1252",
    "utf-16",
    "utf-32",
    "ascii",
    "mac-roman",
    "cp437",
    "cp850",
]

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


# CSV PARSING


def parse_csv_line(line: str) -> list[str]:
    """Split a CSV line on commas outside double quotes.

    A double quote toggles the in-quotes state and is dropped; escaped quotes
    are not supported. Every cell is stripped.

    Example:
        >>> parse_csv_line('A, "Doe, Jane" ,12')
        ['A', 'Doe, Jane', '12']

    """
    values = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())
    return values


def filter_csv_lines(lines: Iterable[str]) -> list[str]:
    """Drop blank lines and '#' comment lines."""
    return [line for line in lines if line.strip() and not line.startswith("#")]


def decode_uploaded_file(uploaded_file: Any) -> str:
    """Decode an uploaded file trying the usual encodings in turn.

    Raises:
        ValidationError: If no encoding can decode the content
    """
    content = uploaded_file.read()
    if isinstance(content, str):
        return content
    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError as decoding_error:
            logger.debug("Failed to decode upload with encoding %s: %s", encoding, decoding_error)
    raise ValidationError("Could not read input csv")


def _read_uploaded_csv(uploaded_file: Any) -> pd.DataFrame | None:
    """Read a comma separated CSV file with multiple encoding fallbacks.

    Args:
        uploaded_file: Django uploaded file object containing CSV data.

    Returns:
        pandas.DataFrame or None: Parsed CSV data with all columns as strings,
            or None if parsing failed with all attempted encodings.

    """
    if not uploaded_file:
        return None

    for encoding in ENCODINGS:
        try:
            uploaded_file.seek(0)
            decoded_content = uploaded_file.read().decode(encoding)
            string_buffer = io.StringIO(decoded_content)
            return pd.read_csv(string_buffer, sep=",", dtype=str, skip_blank_lines=True)
        except Exception as parsing_error:
            logger.debug("Failed to parse CSV with encoding %s: %s", encoding, parsing_error)
            continue

    return None


# PARTICIPANT MATCHING


def normalize_name(name: str | None) -> str:
    """Lowercase a name and keep only ASCII letters and digits.

    Example:
        >>> normalize_name("O'Brien, Jr.")
        'obrienjr'

    """
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())


@dataclass
class MatchCandidate:
    """A participant a CSV row can be matched to.

    For group participants id is the participant and registration_id the group;
    for individuals both are the registration.
    """

    id: str
    type: str
    registration_id: str
    name: str
    group_name: str | None = None
    registration_pk: int | None = field(default=None, compare=False)
    normalized_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.normalized_name = normalize_name(self.name)


@dataclass
class ImportRow:
    """Cells of one seating assignment row, already stripped."""

    row_number: int
    section_name: str = ""
    max_capacity: int | None = None
    participant_name: str = ""
    registration_id: str = ""
    group_name: str = ""


def build_match_candidates(event: Event) -> list[MatchCandidate]:
    """Collect the participants of an event that a CSV row can name.

    One candidate per participant of each group registration, labelled with the
    parish (or group) name, and one per individual registration.
    """
    candidates = []

    for group in GroupRegistration.objects.filter(event=event).prefetch_related("participants"):
        for participant in group.participants.all():
            candidates.append(
                MatchCandidate(
                    id=participant.uuid,
                    type=RegistrationType.GROUP,
                    registration_id=group.uuid,
                    name=participant.full_name(),
                    group_name=group.parish_name or group.group_name,
                    registration_pk=group.pk,
                )
            )

    for individual in IndividualRegistration.objects.filter(event=event):
        candidates.append(
            MatchCandidate(
                id=individual.uuid,
                type=RegistrationType.INDIVIDUAL,
                registration_id=individual.uuid,
                name=individual.full_name(),
                registration_pk=individual.pk,
            )
        )

    return candidates


def match_participant(row: ImportRow, candidates: list[MatchCandidate]) -> MatchCandidate:
    """Find the candidate a row refers to, never guessing between several.

    The registration id wins when it matches; otherwise the name must match
    exactly one candidate after normalization, possibly narrowed by the group
    name of the row.

    Args:
        row: The row to match
        candidates: Participants of the event

    Returns:
        MatchCandidate: The matched participant

    Raises:
        ParticipantNotFoundError: If nothing matches
        AmbiguousParticipantError: If several candidates remain
        MissingIdentifierError: If the row has neither name nor registration id
    """
    if row.registration_id:
        for candidate in candidates:
            if row.registration_id in (candidate.registration_id, candidate.id):
                return candidate
        if not row.participant_name:
            raise ParticipantNotFoundError(f'Participant not found with ID: "{row.registration_id}"')

    if not row.participant_name:
        raise MissingIdentifierError("Missing participant name or registration ID")

    normalized = normalize_name(row.participant_name)
    matches = [candidate for candidate in candidates if candidate.normalized_name == normalized]

    if not matches:
        raise ParticipantNotFoundError(
            f'Participant not found: "{row.participant_name}"', participant_name=row.participant_name
        )

    if len(matches) == 1:
        return matches[0]

    if row.group_name:
        group = normalize_name(row.group_name)
        narrowed = [el for el in matches if el.group_name and group in normalize_name(el.group_name)]
        if len(narrowed) == 1:
            return narrowed[0]

    raise AmbiguousParticipantError(
        f'Multiple participants named "{row.participant_name}" found. '
        "Please specify Registration ID or Group Name to disambiguate.",
        participant_name=row.participant_name,
    )


# SEATING ASSIGNMENTS IMPORT


def new_import_result() -> dict:
    return {
        "success": True,
        "sections_created": 0,
        "assignments_created": 0,
        "assignments_updated": 0,
        "errors": [],
        "warnings": [],
    }


def _row_error(result: dict, row_number: int, message: str, participant_name: str | None = None) -> None:
    error = {"row": row_number, "message": message}
    if participant_name:
        error["participant_name"] = participant_name
    result["errors"].append(error)


def _find_column(headers: list[str], *words: str, any_of: tuple[str, ...] = ()) -> int | None:
    """Index of the first header containing all the words, or any of any_of."""
    for index, header in enumerate(headers):
        if words and all(word in header for word in words):
            return index
        if any_of and any(word in header for word in any_of):
            return index
    return None


def _parse_capacity(value: str) -> int:
    default = getattr(conf_settings, "DEFAULT_SECTION_CAPACITY", 100)
    match = re.match(r"^\s*([+-]?\d+)", value or "")
    if not match:
        return default
    capacity = int(match.group(1))
    return capacity if capacity > 0 else default


def _read_import_row(row_number: int, cells: list[str], columns: dict) -> ImportRow:
    def cell(key: str) -> str:
        index = columns[key]
        if index is None or index >= len(cells):
            return ""
        return cells[index].strip()

    capacity = None
    if columns["capacity"] is not None:
        capacity = _parse_capacity(cell("capacity"))

    return ImportRow(
        row_number=row_number,
        section_name=cell("section"),
        max_capacity=capacity,
        participant_name=cell("participant"),
        registration_id=cell("registration"),
        group_name=cell("group"),
    )


def _save_assignment(section: SeatingSection, match: MatchCandidate, assigned_by: User | None) -> tuple[bool, int]:
    """Create or move the assignment of the matched registration.

    Returns:
        tuple: (created, previous section id or None)
    """
    if match.type == RegistrationType.GROUP:
        lookup = {"group_registration_id": match.registration_pk}
    else:
        lookup = {"individual_registration_id": match.registration_pk}

    existing = SeatingAssignment.objects.filter(**lookup).first()
    if existing:
        previous_section_id = existing.section_id
        existing.section = section
        existing.save()
        return False, previous_section_id

    SeatingAssignment.objects.create(section=section, assigned_by=assigned_by, **lookup)
    return True, None


def recount_section_occupancy(section_ids: Iterable[int]) -> None:
    """Set the occupancy of the sections to their number of assignments."""
    for section in SeatingSection.objects.filter(pk__in=list(section_ids)):
        section.current_occupancy = section.assignments.count()
        section.save(update_fields=["current_occupancy", "updated"])


def import_seating_assignments(event: Event, lines: Iterable[str], assigned_by: User | None = None) -> dict:
    """Assign registrations to seating sections from CSV lines.

    Rows are processed in order and a failing row never stops the batch: its
    problem is recorded in errors and the next row is processed. Unknown
    sections are created on the fly. Only the first row naming a registration
    is applied, the following ones produce a warning. At the end the occupancy
    of every section involved is recounted from the stored assignments.

    Args:
        event: Event the sections and participants belong to
        lines: Raw CSV lines, header first; blank and '#' lines are ignored
        assigned_by: User performing the import

    Returns:
        dict: success, sections_created, assignments_created,
            assignments_updated, errors (row, message, participant_name) and
            warnings

    Raises:
        ValidationError: If there are no data rows
        MissingColumnError: If required columns are missing
    """
    lines = filter_csv_lines(lines)
    if len(lines) < 2:
        raise ValidationError("File must contain header row and at least one data row")

    headers = [header.lower().strip() for header in parse_csv_line(lines[0])]
    columns = {
        "section": _find_column(headers, "section", "name"),
        "capacity": _find_column(headers, any_of=("capacity", "max")),
        "participant": _find_column(headers, "participant", "name"),
        "registration": _find_column(headers, "registration", "id"),
        "group": _find_column(headers, "group", "name"),
    }

    if columns["section"] is None:
        raise MissingColumnError("Missing required column: Section Name")
    if columns["participant"] is None and columns["registration"] is None:
        raise MissingColumnError("Missing required column: Participant Name or Registration ID")

    existing_sections = list(SeatingSection.objects.filter(event=event))
    sections = {section.name.lower(): section for section in existing_sections}
    capacities = {
        section.name.lower(): {"capacity": section.capacity, "assigned": section.current_occupancy}
        for section in existing_sections
    }
    candidates = build_match_candidates(event)

    result = new_import_result()
    assigned_keys = set()
    touched_sections = set()

    for index, line in enumerate(lines[1:], start=2):
        cells = parse_csv_line(line)
        if not any(cells):
            continue

        row = _read_import_row(index, cells, columns)

        if not row.section_name:
            _row_error(result, index, "Missing section name", row.participant_name)
            continue

        if not row.participant_name and not row.registration_id:
            _row_error(result, index, "Missing participant name or registration ID")
            continue

        section_key = row.section_name.lower()
        section = sections.get(section_key)
        if not section:
            capacity = row.max_capacity or getattr(conf_settings, "DEFAULT_SECTION_CAPACITY", 100)
            section = SeatingSection.objects.create(
                event=event,
                name=row.section_name,
                capacity=capacity,
                display_order=len(existing_sections) + result["sections_created"],
            )
            sections[section_key] = section
            capacities[section_key] = {"capacity": capacity, "assigned": 0}
            result["sections_created"] += 1
        touched_sections.add(section.pk)

        try:
            match = match_participant(row, candidates)

            participant_key = (match.type, match.registration_id)
            if participant_key in assigned_keys:
                result["warnings"].append(f'Row {index}: Duplicate assignment for "{match.name}" - using first occurrence')
                continue
            assigned_keys.add(participant_key)

            stats = capacities[section_key]
            if stats["assigned"] >= stats["capacity"]:
                raise CapacityExceededError(
                    f'Section "{row.section_name}" is at capacity ({stats["capacity"]})', participant_name=match.name
                )

            with transaction.atomic():
                created, previous_section_id = _save_assignment(section, match, assigned_by)
        except RowImportError as row_error:
            _row_error(result, index, row_error.message, row_error.participant_name)
            continue

        if created:
            result["assignments_created"] += 1
            stats["assigned"] += 1
        else:
            result["assignments_updated"] += 1
            if previous_section_id:
                touched_sections.add(previous_section_id)

    recount_section_occupancy(touched_sections)

    logger.info(
        "Seating import for %s: %s sections created, %s assignments created, %s updated, %s errors",
        event.slug,
        result["sections_created"],
        result["assignments_created"],
        result["assignments_updated"],
        len(result["errors"]),
    )
    return result


# SEATING SECTIONS IMPORT


def _cell(csv_row: dict, column: str) -> str:
    value = csv_row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _parse_non_negative(value: str, minimum: int) -> int | None:
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number >= minimum else None


def _section_load(csv_row: dict, next_order: int) -> dict:
    """Turn one row into the fields of a new section, applying defaults."""
    capacity = _parse_non_negative(_cell(csv_row, "capacity"), 1) or getattr(
        conf_settings, "DEFAULT_SECTION_CAPACITY", 100
    )

    display_order = _parse_non_negative(_cell(csv_row, "display order"), 0)
    if display_order is None:
        display_order = next_order

    color = _cell(csv_row, "color")
    if not HEX_COLOR_RE.match(color):
        color = getattr(conf_settings, "DEFAULT_SECTION_COLOR", "#1E3A5F")

    return {
        "name": _cell(csv_row, "name"),
        "section_code": _cell(csv_row, "section code") or None,
        "color": color,
        "capacity": capacity,
        "location_description": _cell(csv_row, "location description") or None,
        "public_visible": _cell(csv_row, "public visible").lower() not in ("no", "false", "0"),
        "display_order": display_order,
    }


def import_seating_sections(event: Event, uploaded_file: Any) -> dict:
    """Create seating sections from an uploaded CSV file.

    Columns are matched by exact, case-insensitive name; only "name" is
    required. Rows without a name are reported and skipped.

    Returns:
        dict: success, sections_created and the list of row errors

    Raises:
        ValidationError: If the file cannot be read or has no valid rows
        MissingColumnError: If the name column is missing
    """
    validate_csv_size(uploaded_file)

    input_dataframe = _read_uploaded_csv(uploaded_file)
    if input_dataframe is None:
        raise ValidationError("Could not read input csv")

    input_dataframe.columns = [str(column).lower().strip() for column in input_dataframe.columns]
    if "name" not in input_dataframe.columns:
        raise MissingColumnError("Missing required column: Name")

    if input_dataframe.empty:
        raise ValidationError("CSV file must have a header row and at least one data row")

    max_order = SeatingSection.objects.filter(event=event).aggregate(max_order=Max("display_order"))["max_order"]
    next_order = (max_order or 0) + 1

    errors = []
    sections = []
    for index, csv_row in enumerate(input_dataframe.to_dict(orient="records"), start=2):
        if not any(_cell(csv_row, column) for column in csv_row):
            continue
        if not _cell(csv_row, "name"):
            errors.append(f"Row {index}: Missing section name")
            continue
        section = _section_load(csv_row, next_order)
        next_order += 1
        sections.append(section)

    if not sections:
        raise ValidationError("No valid seating sections to import", details=errors)

    with transaction.atomic():
        for section in sections:
            SeatingSection.objects.create(event=event, **section)

    logger.info("Imported %s seating sections for %s", len(sections), event.slug)
    return {"success": True, "sections_created": len(sections), "errors": errors}


# REGISTRATIONS IMPORT

GROUP_COLUMNS = ["group_id", "parish_name", "leader_name", "leader_email", "leader_phone"]

PARTICIPANT_COLUMNS = ["group_id", "first_name", "last_name", "age", "gender", "participant_type"]

AMOUNT_OWED_COLUMNS = ["amount_owed", "balance", "amount"]


def new_registrations_result() -> dict:
    return {
        "success": True,
        "groups_created": 0,
        "groups_updated": 0,
        "participants_created": 0,
        "participants_updated": 0,
        "balances_created": 0,
        "errors": [],
        "warnings": [],
    }


def _read_roster(lines: Iterable[str], required: list[str], label: str) -> list[tuple[int, dict]]:
    """Parse roster lines into (row number, cells by column) pairs.

    Headers are lowercased with spaces turned into underscores.

    Raises:
        ValidationError: If there is no header row
        MissingColumnError: If required columns are missing
    """
    lines = filter_csv_lines(lines)
    if not lines:
        raise ValidationError(f"{label} CSV must contain a header row")

    headers = [header.lower().replace(" ", "_") for header in parse_csv_line(lines[0])]
    missing = [column for column in required if column not in headers]
    if missing:
        raise MissingColumnError(f"{label} CSV missing required columns: {', '.join(missing)}")

    rows = []
    for index, line in enumerate(lines[1:], start=2):
        cells = parse_csv_line(line)
        if not any(cells):
            continue
        rows.append((index, {header: cells[pos] if pos < len(cells) else "" for pos, header in enumerate(headers)}))
    return rows


def _group_key(external_id: str) -> str:
    """Group id without leading zeros, so "007" and "7" name the same group."""
    return str(int(external_id)) if external_id.isdecimal() else external_id


def _amount_owed(row: dict) -> str | None:
    """Amount owed read from the first amount column present, without currency signs."""
    for column in AMOUNT_OWED_COLUMNS:
        if row.get(column):
            return row[column].replace("$", "").replace(",", "")
    return None


def _save_group(event: Event, external_id: str, row: dict) -> tuple[GroupRegistration, bool]:
    """Create or update the group with this external id.

    Returns:
        tuple: (group, created)
    """
    values = {
        "group_name": row.get("group_name") or row["parish_name"] or external_id,
        "parish_name": row["parish_name"] or None,
        "group_leader_name": row["leader_name"],
        "group_leader_email": row["leader_email"],
        "group_leader_phone": row["leader_phone"],
    }

    group = GroupRegistration.objects.filter(event=event, external_id=external_id).first()
    if group:
        for key, value in values.items():
            setattr(group, key, value)
        group.save()
        return group, False

    return GroupRegistration.objects.create(event=event, external_id=external_id, **values), True


def _parse_age(value: str) -> int | None:
    match = re.match(r"^\s*(\d{1,3})\b", value or "")
    return int(match.group(1)) if match else None


def _parse_gender(value: str) -> str:
    value = value.lower()
    if value in ("male", "m"):
        return Gender.MALE
    if value in ("female", "f"):
        return Gender.FEMALE
    return ""


def _parse_participant_type(value: str, age: int | None) -> str:
    """Map a free text participant type; youth are split by age."""
    value = value.lower()
    if "chaperone" in value:
        return ParticipantType.CHAPERONE
    if any(word in value for word in ("priest", "clergy", "religious")):
        return ParticipantType.PRIEST
    if "youth" in value and age is not None and age >= 18:
        return ParticipantType.YOUTH_O18
    return ParticipantType.YOUTH_U18


def _save_participant(group: GroupRegistration, row: dict) -> bool:
    """Create or update the participant of the group with the row name.

    Returns:
        bool: True if the participant was created
    """
    age = _parse_age(row["age"])
    values = {
        "age": age,
        "gender": _parse_gender(row["gender"]),
        "participant_type": _parse_participant_type(row["participant_type"], age),
    }
    if row.get("email"):
        values["email"] = row["email"]

    participant = Participant.objects.filter(
        group=group, first_name=row["first_name"], last_name=row["last_name"]
    ).first()
    if participant:
        for key, value in values.items():
            setattr(participant, key, value)
        participant.save()
        return False

    Participant.objects.create(group=group, first_name=row["first_name"], last_name=row["last_name"], **values)
    return True


def _import_groups(event: Event, rows: list[tuple[int, dict]], result: dict, imported_by: User | None) -> None:
    seen = set()
    for index, row in rows:
        external_id = row["group_id"]
        if not external_id:
            _row_error(result, index, "Missing group ID")
            continue
        if len(external_id) > GroupRegistration._meta.get_field("external_id").max_length:
            _row_error(result, index, f'Group ID "{external_id}" is too long')
            continue
        if external_id in seen:
            result["warnings"].append(f'Row {index}: Duplicate group ID "{external_id}" - using first occurrence')
            continue
        seen.add(external_id)

        try:
            with transaction.atomic():
                group, created = _save_group(event, external_id, row)
                balance_created = provision_balance(
                    event,
                    group.uuid,
                    RegistrationType.GROUP,
                    _amount_owed(row),
                    edited_by=imported_by,
                    reason="Registration import",
                )
        except ValidationError as row_error:
            _row_error(result, index, f'Group "{external_id}": {row_error.message}')
            continue

        result["groups_created" if created else "groups_updated"] += 1
        if balance_created:
            result["balances_created"] += 1


def _import_participants(event: Event, rows: list[tuple[int, dict]], result: dict) -> None:
    groups = {}
    for group in GroupRegistration.objects.filter(event=event, external_id__isnull=False).exclude(external_id=""):
        groups[group.external_id] = group
        groups.setdefault(_group_key(group.external_id), group)

    for index, row in rows:
        name = f"{row['first_name']} {row['last_name']}".strip()
        if not row["first_name"] or not row["last_name"]:
            _row_error(result, index, "Missing participant first or last name", name)
            continue

        external_id = row["group_id"]
        group = groups.get(external_id) or groups.get(_group_key(external_id))
        if not group:
            _row_error(result, index, f'Group not found for participant "{name}" (group_id: "{external_id}")', name)
            continue

        with transaction.atomic():
            created = _save_participant(group, row)
        result["participants_created" if created else "participants_updated"] += 1


def import_registrations(
    event: Event,
    groups_lines: Iterable[str] | None = None,
    participants_lines: Iterable[str] | None = None,
    imported_by: User | None = None,
) -> dict:
    """Create or update group registrations and their participants from rosters.

    Groups are matched by their external group_id within the event and get a
    balance owing the amount_owed column (or balance, or amount) of their row.
    Participants are matched by first and last name within their group, which
    is looked up by group_id with or without leading zeros. Groups are imported
    before participants, so a single upload can carry both. Both headers are
    checked before anything is written; a failing row is recorded in errors
    and never stops the batch.

    Args:
        event: Event the registrations belong to
        groups_lines: Raw lines of the groups CSV, header first
        participants_lines: Raw lines of the participants CSV, header first
        imported_by: User performing the import, recorded on total due changes

    Returns:
        dict: success, groups_created, groups_updated, participants_created,
            participants_updated, balances_created, errors (row, message,
            participant_name) and warnings

    Raises:
        ValidationError: If no file is given or a file has no header
        MissingColumnError: If required columns are missing
    """
    if groups_lines is None and participants_lines is None:
        raise ValidationError("No file provided")

    group_rows = _read_roster(groups_lines, GROUP_COLUMNS, "Groups") if groups_lines is not None else []
    participant_rows = []
    if participants_lines is not None:
        participant_rows = _read_roster(participants_lines, PARTICIPANT_COLUMNS, "Participants")

    result = new_registrations_result()
    _import_groups(event, group_rows, result, imported_by)
    _import_participants(event, participant_rows, result)

    logger.info(
        "Registrations import for %s: %s groups created, %s updated, %s participants created, %s updated, %s errors",
        event.slug,
        result["groups_created"],
        result["groups_updated"],
        result["participants_created"],
        result["participants_updated"],
        len(result["errors"]),
    )
    return result
