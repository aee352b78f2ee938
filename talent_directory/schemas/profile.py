import enum
from typing import Optional

from pydantic import Field, field_validator

from talent_directory.schemas.skill import EntryStr, ProfileSkill, RecordModel, SubfieldStr


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "Available"
    ON_PROJECT = "On Project"
    ON_LEAVE = "On Leave"
    LIMITED = "Limited"
    UNAVAILABLE = "Unavailable"


class SocialProfile(RecordModel):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    bluesky: Optional[str] = None
    youtube: Optional[str] = None
    vimeo: Optional[str] = None
    behance: Optional[str] = None
    dribbble: Optional[str] = None
    github: Optional[str] = None


class ContactInfo(RecordModel):
    email: str
    phone: str
    website: Optional[str] = None
    location: Optional[str] = None
    social: Optional[SocialProfile] = None

    @field_validator("email", "phone")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class ProjectDuration(RecordModel):
    min: Optional[int] = None
    max: Optional[int] = None


class Capacity(RecordModel):
    weekly_hours: Optional[float] = None
    max_concurrent_projects: Optional[int] = None
    preferred_project_duration: Optional[ProjectDuration] = None


class Availability(RecordModel):
    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    available_from: Optional[str] = None
    next_available: Optional[str] = None
    preferred_hours: Optional[str] = None
    timezone: Optional[str] = None
    booking_lead_time: Optional[int] = None
    capacity: Optional[Capacity] = None


class ProjectRates(RecordModel):
    weekly: Optional[float] = None
    monthly: Optional[float] = None
    quarterly: Optional[float] = None
    yearly: Optional[float] = None
    minimum_duration: Optional[int] = None  # days
    maximum_duration: Optional[int] = None  # days
    discount_percentage: Optional[float] = None


class Education(RecordModel):
    institution: SubfieldStr = ""
    degree: SubfieldStr = ""
    field: SubfieldStr = ""
    start_date: SubfieldStr = ""
    end_date: SubfieldStr = ""


class Certification(RecordModel):
    name: SubfieldStr = ""
    issuer: SubfieldStr = ""
    date: SubfieldStr = ""
    expiry_date: Optional[SubfieldStr] = None


class ProfileCreate(RecordModel):
    """Everything a profile carries except its id.

    Unknown fields are kept as-is so records written by newer exports survive
    a load/save cycle.
    """

    model_config = {"extra": "allow"}

    name: str
    title: str = ""
    department: str = ""
    bio: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[float] = None
    hourly_rate: Optional[float] = None
    day_rate: Optional[float] = None
    yearly_salary: Optional[float] = None
    project_rates: Optional[ProjectRates] = None
    contact: ContactInfo
    skills: list[ProfileSkill] = Field(default_factory=list)
    tags: list[EntryStr] = Field(default_factory=list)
    availability: Availability = Field(default_factory=Availability)
    education: list[Education] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value

    @field_validator("skills", "tags", "education", "certifications", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class Profile(ProfileCreate):
    id: str


class ProfilePatch(RecordModel):
    """Partial update. Each field given replaces the stored value whole."""

    model_config = {"extra": "allow"}

    name: Optional[str] = None
    title: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[float] = None
    hourly_rate: Optional[float] = None
    day_rate: Optional[float] = None
    yearly_salary: Optional[float] = None
    project_rates: Optional[ProjectRates] = None
    contact: Optional[ContactInfo] = None
    skills: Optional[list[ProfileSkill]] = None
    tags: Optional[list[EntryStr]] = None
    availability: Optional[Availability] = None
    education: Optional[list[Education]] = None
    certifications: Optional[list[Certification]] = None
