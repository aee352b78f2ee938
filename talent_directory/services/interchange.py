"""Flat row codec for spreadsheet export and import.

A Profile is nested (contact, social links, availability, capacity, skill and
education lists). Spreadsheets want one row of scalar cells, so each nested
field gets its own hand-picked column and each list packs into one cell:

    skills          name:category:proficiency|name:category:proficiency
    education       institution:degree:field:startDate:endDate|...
    certifications  name:issuer:date:expiryDate|...
    tags            tag|tag

Sub-fields are not escaped. The record model refuses ':' and '|' inside any
value that lands in a packed cell, which is what keeps the round trip exact.
"""

from __future__ import annotations

import csv
import io
import json
import math
from typing import Any, Iterable, Mapping, Optional, Union

from talent_directory.schemas import Profile
from talent_directory.schemas.skill import ENTRY_SEPARATOR, SUBFIELD_SEPARATOR

SOCIAL_PLATFORMS = (
    "linkedin",
    "twitter",
    "facebook",
    "instagram",
    "tiktok",
    "bluesky",
    "youtube",
    "vimeo",
    "behance",
    "dribbble",
    "github",
)

# column -> key inside projectRates
PROJECT_RATE_COLUMNS = {
    "weeklyProjectRate": "weekly",
    "monthlyProjectRate": "monthly",
    "quarterlyProjectRate": "quarterly",
    "yearlyProjectRate": "yearly",
    "minimumProjectDuration": "minimumDuration",
    "maximumProjectDuration": "maximumDuration",
    "projectDiscountPercentage": "discountPercentage",
}

AVAILABILITY_TEXT_COLUMNS = ("availableFrom", "nextAvailable", "preferredHours", "timezone")
CAPACITY_COLUMNS = ("weeklyHours", "maxConcurrentProjects")
# column -> key inside capacity.preferredProjectDuration
DURATION_COLUMNS = {"preferredProjectDurationMin": "min", "preferredProjectDurationMax": "max"}

NUMERIC_COLUMNS = ("hourlyRate", "dayRate", "yearlySalary", "yearsOfExperience")
OPTIONAL_TEXT_COLUMNS = ("bio", "image", "location")
REQUIRED_TEXT_COLUMNS = ("id", "name", "department", "title")

PROFILE_COLUMNS = (
    "id",
    "name",
    "department",
    "title",
    "bio",
    "image",
    "location",
    "yearsOfExperience",
    "email",
    "phone",
    "website",
    "contactLocation",
    *SOCIAL_PLATFORMS,
    "hourlyRate",
    "dayRate",
    "yearlySalary",
    *PROJECT_RATE_COLUMNS,
    "availabilityStatus",
    *AVAILABILITY_TEXT_COLUMNS,
    "bookingLeadTime",
    *CAPACITY_COLUMNS,
    *DURATION_COLUMNS,
    "skills",
    "tags",
    "education",
    "certifications",
)

SKILL_FIELDS = ("name", "category", "proficiency")
EDUCATION_FIELDS = ("institution", "degree", "field", "startDate", "endDate")
CERTIFICATION_FIELDS = ("name", "issuer", "date", "expiryDate")
DEFAULT_PROFICIENCY = "Intermediate"


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------

def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _pack(entries: Iterable[Mapping[str, Any]], fields: tuple) -> str:
    return ENTRY_SEPARATOR.join(
        SUBFIELD_SEPARATOR.join(format_cell(entry.get(name)) for name in fields)
        for entry in entries
    )


def flatten_profile(profile: Profile) -> dict[str, str]:
    """One spreadsheet row for a profile, keyed by PROFILE_COLUMNS."""
    data = profile.model_dump(mode="json", by_alias=True)
    contact = data.get("contact") or {}
    social = contact.get("social") or {}
    rates = data.get("projectRates") or {}
    availability = data.get("availability") or {}
    capacity = availability.get("capacity") or {}
    duration = capacity.get("preferredProjectDuration") or {}

    row = {column: format_cell(data.get(column)) for column in REQUIRED_TEXT_COLUMNS}
    row.update({column: format_cell(data.get(column)) for column in OPTIONAL_TEXT_COLUMNS})
    row.update({column: format_cell(data.get(column)) for column in NUMERIC_COLUMNS})

    row["email"] = format_cell(contact.get("email"))
    row["phone"] = format_cell(contact.get("phone"))
    row["website"] = format_cell(contact.get("website"))
    row["contactLocation"] = format_cell(contact.get("location"))
    for platform in SOCIAL_PLATFORMS:
        row[platform] = format_cell(social.get(platform))

    for column, key in PROJECT_RATE_COLUMNS.items():
        row[column] = format_cell(rates.get(key))

    row["availabilityStatus"] = format_cell(availability.get("status"))
    for column in AVAILABILITY_TEXT_COLUMNS:
        row[column] = format_cell(availability.get(column))
    row["bookingLeadTime"] = format_cell(availability.get("bookingLeadTime"))
    for column in CAPACITY_COLUMNS:
        row[column] = format_cell(capacity.get(column))
    for column, key in DURATION_COLUMNS.items():
        row[column] = format_cell(duration.get(key))

    row["skills"] = _pack(data.get("skills") or [], SKILL_FIELDS)
    row["tags"] = ENTRY_SEPARATOR.join(data.get("tags") or [])
    row["education"] = _pack(data.get("education") or [], EDUCATION_FIELDS)
    row["certifications"] = _pack(data.get("certifications") or [], CERTIFICATION_FIELDS)

    for key, value in (profile.model_extra or {}).items():
        if key not in row:
            row[key] = format_cell(value)

    ordered = {column: row.pop(column) for column in PROFILE_COLUMNS}
    ordered.update(row)
    return ordered


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------

def parse_number(value: Optional[str]) -> Optional[Union[int, float]]:
    """int or float for numeric text, None for anything else."""
    text = (value or "").strip()
    if not text or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _unpack(value: str, fields: tuple) -> list[dict[str, str]]:
    if not value:
        return []
    entries = []
    for chunk in value.split(ENTRY_SEPARATOR):
        parts = chunk.split(SUBFIELD_SEPARATOR)
        parts += [""] * (len(fields) - len(parts))
        entries.append(dict(zip(fields, parts)))
    return entries


def _parse_skills(value: str) -> list[dict]:
    skills = _unpack(value, SKILL_FIELDS)
    for skill in skills:
        skill["proficiency"] = skill["proficiency"] or DEFAULT_PROFICIENCY
    return skills


def _parse_certifications(value: str) -> list[dict]:
    certifications = _unpack(value, CERTIFICATION_FIELDS)
    for certification in certifications:
        if not certification["expiryDate"]:
            del certification["expiryDate"]
    return certifications


def parse_profile_row(row: Mapping[Optional[str], Optional[str]]) -> dict:
    """Rebuild the nested profile dict (camelCase keys) from one row.

    The result is ready for Profile/ProfileCreate.model_validate. Empty cells
    of optional fields are left out; unknown columns are copied as-is.
    """
    profile: dict[str, Any] = {}
    contact: dict[str, Any] = {}
    social: dict[str, str] = {}
    rates: dict[str, Any] = {}
    availability: dict[str, Any] = {}
    capacity: dict[str, Any] = {}
    duration: dict[str, Any] = {}

    for column, raw in row.items():
        if column is None:
            # csv.DictReader puts cells beyond the header under None.
            continue
        value = raw or ""

        if column == "skills":
            profile["skills"] = _parse_skills(value)
        elif column == "tags":
            profile["tags"] = value.split(ENTRY_SEPARATOR) if value else []
        elif column == "education":
            profile["education"] = _unpack(value, EDUCATION_FIELDS)
        elif column == "certifications":
            profile["certifications"] = _parse_certifications(value)
        elif column in ("email", "phone"):
            contact[column] = value
        elif column == "website":
            if value:
                contact["website"] = value
        elif column == "contactLocation":
            if value:
                contact["location"] = value
        elif column in SOCIAL_PLATFORMS:
            if value:
                social[column] = value
        elif column in PROJECT_RATE_COLUMNS:
            number = parse_number(value)
            if number is not None:
                rates[PROJECT_RATE_COLUMNS[column]] = number
        elif column == "availabilityStatus":
            if value:
                availability["status"] = value
        elif column in AVAILABILITY_TEXT_COLUMNS:
            if value:
                availability[column] = value
        elif column == "bookingLeadTime":
            number = parse_number(value)
            if number is not None:
                availability["bookingLeadTime"] = number
        elif column in CAPACITY_COLUMNS:
            number = parse_number(value)
            if number is not None:
                capacity[column] = number
        elif column in DURATION_COLUMNS:
            number = parse_number(value)
            if number is not None:
                duration[DURATION_COLUMNS[column]] = number
        elif column in NUMERIC_COLUMNS:
            number = parse_number(value)
            if number is not None:
                profile[column] = number
        elif column in OPTIONAL_TEXT_COLUMNS:
            if value:
                profile[column] = value
        else:
            profile[column] = value

    if social:
        contact["social"] = social
    if contact:
        profile["contact"] = contact
    if rates:
        profile["projectRates"] = rates
    if duration:
        capacity["preferredProjectDuration"] = duration
    if capacity:
        availability["capacity"] = capacity
    if availability:
        profile["availability"] = availability
    return profile


# ----------------------------------------------------------------------
# CSV documents
# ----------------------------------------------------------------------

def profiles_to_csv(profiles: Iterable[Profile]) -> str:
    """Header plus one row per profile. Empty input gives an empty string."""
    rows = [flatten_profile(profile) for profile in profiles]
    if not rows:
        return ""

    header = list(PROFILE_COLUMNS)
    for row in rows:
        header.extend(key for key in row if key not in header)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=header, restval="")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def read_csv_rows(text: str) -> list[dict[Optional[str], Optional[str]]]:
    """Split a CSV document into header-keyed rows, skipping blank lines.

    Quoted cells may hold commas, doubled quotes and line breaks.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text, newline=""))
    return [row for row in reader if any((cell or "").strip() for key, cell in row.items() if key is not None)]


def parse_profiles_csv(text: str) -> list[dict]:
    return [parse_profile_row(row) for row in read_csv_rows(text)]
