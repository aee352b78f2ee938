from talent_directory.schemas.skill import (
    UNCATEGORIZED,
    Proficiency,
    ProfileSkill,
    Skill,
    SkillCreate,
    SkillPatch,
)
from talent_directory.schemas.profile import (
    Availability,
    AvailabilityStatus,
    Capacity,
    Certification,
    ContactInfo,
    Education,
    Profile,
    ProfileCreate,
    ProfilePatch,
    ProjectDuration,
    ProjectRates,
    SocialProfile,
)
from talent_directory.schemas.transfer import (
    CategoryRequest,
    DeleteResponse,
    ImportReport,
    ImportRowError,
)

__all__ = [
    "UNCATEGORIZED",
    "Proficiency",
    "ProfileSkill",
    "Skill",
    "SkillCreate",
    "SkillPatch",
    "Availability",
    "AvailabilityStatus",
    "Capacity",
    "Certification",
    "ContactInfo",
    "Education",
    "Profile",
    "ProfileCreate",
    "ProfilePatch",
    "ProjectDuration",
    "ProjectRates",
    "SocialProfile",
    "CategoryRequest",
    "DeleteResponse",
    "ImportReport",
    "ImportRowError",
]
