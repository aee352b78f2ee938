import pytest
from pydantic import ValidationError

from talent_directory.schemas import Education, Profile, ProfileSkill
from talent_directory.services.interchange import (
    PROFILE_COLUMNS,
    flatten_profile,
    parse_number,
    parse_profile_row,
    parse_profiles_csv,
    profiles_to_csv,
    read_csv_rows,
)


def _profile(**overrides) -> Profile:
    data = {
        "id": "p-1",
        "name": "Ada Lovelace",
        "title": "Principal Engineer",
        "department": "Engineering",
        "contact": {"email": "ada@example.com", "phone": "555-0100"},
    }
    data.update(overrides)
    return Profile.model_validate(data)


def _full_profile() -> Profile:
    return _profile(
        bio="Writes the first programs.",
        image="https://img.example.com/ada.png",
        location="London",
        yearsOfExperience=12,
        hourlyRate=95.5,
        dayRate=700,
        yearlySalary=150000,
        projectRates={
            "weekly": 3200,
            "monthly": 12000,
            "minimumDuration": 14,
            "discountPercentage": 7.5,
        },
        contact={
            "email": "ada@example.com",
            "phone": "555-0100",
            "website": "https://ada.dev",
            "location": "Marylebone",
            "social": {"linkedin": "https://linkedin.com/in/ada", "github": "https://github.com/ada"},
        },
        skills=[
            {"name": "Python", "category": "Languages", "proficiency": "Expert"},
            {"name": "Mentoring", "category": "Leadership", "proficiency": "Advanced"},
        ],
        tags=["mentor", "remote"],
        availability={
            "status": "On Project",
            "availableFrom": "2026-11-01",
            "nextAvailable": "2027-01-15",
            "preferredHours": "9-17",
            "timezone": "Europe/London",
            "bookingLeadTime": 10,
            "capacity": {
                "weeklyHours": 32,
                "maxConcurrentProjects": 2,
                "preferredProjectDuration": {"min": 30, "max": 180},
            },
        },
        education=[
            {
                "institution": "University of London",
                "degree": "BSc",
                "field": "Mathematics",
                "startDate": "1830-09-01",
                "endDate": "1834-06-30",
            }
        ],
        certifications=[
            {"name": "AWS SA", "issuer": "Amazon", "date": "2024-01-10", "expiryDate": "2027-01-10"},
            {"name": "CKA", "issuer": "CNCF", "date": "2023-05-02"},
        ],
    )


def test_go_languages_expert_row():
    profile = _profile(
        skills=[{"name": "Go", "category": "Languages", "proficiency": "Expert"}],
        education=[],
        certifications=[],
    )
    row = flatten_profile(profile)

    assert row["skills"] == "Go:Languages:Expert"
    assert row["education"] == ""
    assert row["certifications"] == ""

    parsed = parse_profile_row(row)
    assert parsed["skills"] == [{"name": "Go", "category": "Languages", "proficiency": "Expert"}]
    assert parsed["education"] == []
    assert parsed["certifications"] == []


def test_empty_lists_round_trip():
    profile = _profile(skills=[], tags=[], education=[], certifications=[])
    row = flatten_profile(profile)
    assert row["skills"] == row["tags"] == row["education"] == row["certifications"] == ""

    restored = Profile.model_validate(parse_profile_row(row))
    assert restored.skills == []
    assert restored.tags == []
    assert restored.education == []
    assert restored.certifications == []


def test_single_entries_have_no_trailing_separator():
    profile = _profile(
        skills=[{"name": "Go", "category": "Languages"}],
        tags=["solo"],
        certifications=[{"name": "CKA", "issuer": "CNCF", "date": "2023"}],
    )
    row = flatten_profile(profile)
    assert row["skills"] == "Go:Languages:Intermediate"
    assert row["tags"] == "solo"
    assert row["certifications"] == "CKA:CNCF:2023:"


def test_full_profile_round_trip():
    profile = _full_profile()
    restored = Profile.model_validate(parse_profile_row(flatten_profile(profile)))
    assert restored == profile


def test_round_trip_through_csv_text_keeps_quoted_cells():
    profile = _full_profile().model_copy(
        update={"bio": 'Says "hello", then\nleaves.', "name": "Lovelace, Ada"}
    )
    text = profiles_to_csv([profile])

    assert '"Lovelace, Ada"' in text
    assert '"Says ""hello"", then\nleaves."' in text

    [parsed] = parse_profiles_csv(text)
    assert Profile.model_validate(parsed) == profile


def test_header_order_and_empty_document():
    text = profiles_to_csv([_profile()])
    header = text.splitlines()[0].split(",")
    assert header[:4] == ["id", "name", "department", "title"]
    assert header == list(PROFILE_COLUMNS)
    assert profiles_to_csv([]) == ""


def test_flatten_formats_numbers_without_trailing_zero():
    row = flatten_profile(_profile(hourlyRate=80.0, dayRate=612.5, yearsOfExperience=3))
    assert row["hourlyRate"] == "80"
    assert row["dayRate"] == "612.5"
    assert row["yearsOfExperience"] == "3"
    assert row["yearlySalary"] == ""


def test_flatten_defaults_availability_status():
    row = flatten_profile(_profile())
    assert row["availabilityStatus"] == "Available"
    assert row["weeklyHours"] == ""


def test_extra_fields_pass_through_as_columns():
    profile = _profile(team="Platform", clearance="SC")
    text = profiles_to_csv([profile, _profile(id="p-2")])
    header = text.splitlines()[0].split(",")
    assert header[-2:] == ["team", "clearance"]

    first, second = parse_profiles_csv(text)
    assert first["team"] == "Platform"
    assert second["team"] == ""
    assert Profile.model_validate(first).model_extra == {"team": "Platform", "clearance": "SC"}


@pytest.mark.parametrize(
    "text,expected",
    [
        ("12", 12),
        ("-3", -3),
        ("1.25", 1.25),
        (" 7 ", 7),
        ("", None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
        ("1_000", None),
        ("2_5.5", None),
    ],
)
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_unparseable_numbers_are_left_out():
    parsed = parse_profile_row({"name": "Ada", "hourlyRate": "lots", "weeklyHours": "n/a"})
    assert "hourlyRate" not in parsed
    assert "availability" not in parsed


def test_missing_sub_fields_are_padded():
    parsed = parse_profile_row({"skills": "Go", "education": "MIT:BSc"})
    assert parsed["skills"] == [{"name": "Go", "category": "", "proficiency": "Intermediate"}]
    assert parsed["education"] == [
        {"institution": "MIT", "degree": "BSc", "field": "", "startDate": "", "endDate": ""}
    ]
    skill = ProfileSkill.model_validate(parsed["skills"][0])
    assert skill.category == "Uncategorized"


def test_empty_certification_expiry_is_dropped():
    parsed = parse_profile_row({"certifications": "CKA:CNCF:2023:"})
    assert parsed["certifications"] == [{"name": "CKA", "issuer": "CNCF", "date": "2023"}]


def test_empty_optional_cells_are_left_out():
    parsed = parse_profile_row(
        {"name": "Ada", "bio": "", "website": "", "github": "", "availabilityStatus": "", "email": "a@b.c"}
    )
    assert parsed == {"name": "Ada", "contact": {"email": "a@b.c"}}


def test_read_csv_rows_skips_blank_lines_and_bom():
    text = "\ufeffid,name\r\np-1,Ada\r\n,\r\n\r\np-2,Grace\r\n"
    rows = read_csv_rows(text)
    assert [row["name"] for row in rows] == ["Ada", "Grace"]


def test_cells_beyond_header_are_ignored():
    rows = read_csv_rows("id,name\r\np-1,Ada,surplus\r\n")
    assert parse_profile_row(rows[0]) == {"id": "p-1", "name": "Ada"}


@pytest.mark.parametrize(
    "skill",
    [
        {"name": "C++:17", "category": "Languages"},
        {"name": "Go", "category": "Lang|Systems"},
    ],
)
def test_delimiters_are_rejected_in_skill_fields(skill):
    with pytest.raises(ValidationError):
        ProfileSkill.model_validate(skill)


def test_delimiters_are_rejected_in_profile_lists():
    with pytest.raises(ValidationError):
        _profile(tags=["a|b"])
    with pytest.raises(ValidationError):
        Education(institution="MIT: Sloan")
    # Colons are fine in tags; only '|' separates them.
    assert _profile(tags=["ratio 3:1"]).tags == ["ratio 3:1"]
