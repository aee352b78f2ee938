from talent_directory.models.profile import ProfileRow, ContactInfoRow, AvailabilityRow, ProfileSkillRow
from talent_directory.models.skill import SkillRow, SkillCategoryRow

__all__ = [
    "ProfileRow",
    "ContactInfoRow",
    "AvailabilityRow",
    "ProfileSkillRow",
    "SkillRow",
    "SkillCategoryRow",
]
