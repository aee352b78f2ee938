import enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, field_validator
from pydantic.alias_generators import to_camel

UNCATEGORIZED = "Uncategorized"

# Characters the interchange codec uses to pack sub-fields into one column.
SUBFIELD_SEPARATOR = ":"
ENTRY_SEPARATOR = "|"


def has_reserved_delimiter(value: Optional[str]) -> bool:
    return bool(value) and (SUBFIELD_SEPARATOR in value or ENTRY_SEPARATOR in value)


def _reject_reserved_delimiters(value: str) -> str:
    if has_reserved_delimiter(value):
        raise ValueError(
            f"must not contain '{SUBFIELD_SEPARATOR}' or '{ENTRY_SEPARATOR}'"
        )
    return value


def _reject_entry_separator(value: str) -> str:
    if ENTRY_SEPARATOR in value:
        raise ValueError(f"must not contain '{ENTRY_SEPARATOR}'")
    return value


# A string that can be packed as a sub-field of a delimited column.
SubfieldStr = Annotated[str, AfterValidator(_reject_reserved_delimiters)]
# A string that can be packed as one entry of a '|'-joined column.
EntryStr = Annotated[str, AfterValidator(_reject_entry_separator)]


def default_category(cls, value):
    """Missing or blank category means Uncategorized."""
    if value is None:
        return UNCATEGORIZED
    if isinstance(value, str):
        return value.strip() or UNCATEGORIZED
    return value




class Proficiency(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class RecordModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "use_enum_values": True,
        "validate_default": True,
    }


class SkillCreate(RecordModel):
    name: SubfieldStr
    category: SubfieldStr = UNCATEGORIZED

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("skill name must not be empty")
        return value

    _default_category = field_validator("category", mode="before")(default_category)


class Skill(SkillCreate):
    id: str


class SkillPatch(RecordModel):
    name: Optional[SubfieldStr] = None
    category: Optional[SubfieldStr] = None


class ProfileSkill(RecordModel):
    """A skill attached to a profile.

    This is a copy of the taxonomy entry taken at attach time. Renaming,
    recategorizing or deleting the Skill later does not touch it.
    """

    id: Optional[str] = None
    name: SubfieldStr
    category: SubfieldStr = UNCATEGORIZED
    proficiency: Proficiency = Proficiency.INTERMEDIATE

    _default_category = field_validator("category", mode="before")(default_category)

    @classmethod
    def from_skill(cls, skill: Skill, proficiency: Proficiency = Proficiency.INTERMEDIATE) -> "ProfileSkill":
        return cls(id=skill.id, name=skill.name, category=skill.category, proficiency=proficiency)
