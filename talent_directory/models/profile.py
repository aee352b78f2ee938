from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from talent_directory.database import Base


class ProfileRow(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    title = Column(String(200), nullable=False, default="")
    department = Column(String(200), nullable=False, default="", index=True)
    image = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    years_of_experience = Column(Float, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    day_rate = Column(Float, nullable=True)
    yearly_salary = Column(Float, nullable=True)
    project_rates = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    education = Column(JSON, nullable=True)
    certifications = Column(JSON, nullable=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    contact = relationship(
        "ContactInfoRow", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    availability = relationship(
        "AvailabilityRow", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    skills = relationship(
        "ProfileSkillRow",
        order_by="ProfileSkillRow.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactInfoRow(Base):
    __tablename__ = "contact_info"

    profile_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    website = Column(String(500), nullable=True)
    location = Column(String(200), nullable=True)
    social = Column(JSON, nullable=True)


class AvailabilityRow(Base):
    __tablename__ = "availability"

    profile_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    status = Column(String(50), nullable=False, default="Available")
    available_from = Column(String(50), nullable=True)
    next_available = Column(String(50), nullable=True)
    preferred_hours = Column(String(100), nullable=True)
    timezone = Column(String(100), nullable=True)
    booking_lead_time = Column(Integer, nullable=True)
    # Null means the profile has no capacity block at all.
    capacity = Column(JSON, nullable=True)


class ProfileSkillRow(Base):
    """Embedded skill copy; skill_id is informational and not a foreign key."""

    __tablename__ = "profile_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    skill_id = Column(String(64), nullable=True)
    name = Column(String(200), nullable=False)
    category = Column(String(200), nullable=False)
    proficiency = Column(String(20), nullable=False, default="Intermediate")
