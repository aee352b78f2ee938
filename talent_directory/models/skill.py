from sqlalchemy import Column, Integer, String

from talent_directory.database import Base


class SkillRow(Base):
    __tablename__ = "skills"

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    category = Column(String(200), nullable=False, index=True)


class SkillCategoryRow(Base):
    __tablename__ = "skill_categories"

    name = Column(String(200), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
