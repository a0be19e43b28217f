from sqlalchemy import Column, Integer, String, Boolean, JSON, DateTime, Text
from sqlalchemy.sql import func
from .db import Base


class UserRow(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True)
    name = Column(String)
    avatar = Column(String, nullable=True)
    current_xp = Column(Integer, default=0)
    level = Column(Integer, default=1)
    streak = Column(Integer, default=0)
    unlocked_themes = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class QuestRow(Base):
    __tablename__ = "quests"
    id = Column(String, primary_key=True)
    title = Column(String)
    description = Column(Text, nullable=True)
    xp_value = Column(Integer, default=10)
    category = Column(String, nullable=True)
    date = Column(DateTime, index=True)
    deadline = Column(DateTime, nullable=True)
    is_completed = Column(Boolean, default=False)


class ChallengeRow(Base):
    __tablename__ = "challenges"
    id = Column(String, primary_key=True)
    kind = Column(String, nullable=False)
    description = Column(String)
    reward_xp = Column(Integer)
    date = Column(DateTime)
    is_completed = Column(Boolean, default=False)
