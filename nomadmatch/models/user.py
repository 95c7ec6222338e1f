"""
UserProfile Model - Dating profile document keyed by uid

One row per app user. Known dating fields have typed columns; any other
field a client writes is kept in the `extra` JSON side map so unknown
attributes survive a round trip.

Services never touch the ORM object directly. They work on the plain
mapping returned by profile_to_dict(), which merges the typed columns
with `extra` and always carries `uid`.
"""

from typing import Any, Dict
from sqlalchemy import Column, String, Integer, Boolean, Text, JSON, DateTime
from sqlalchemy.sql import func
from nomadmatch.database import Base


class UserProfile(Base):
    """
    Dating profile for a single user.

    Attributes:
        uid: Stable user identifier issued by the auth provider
        enable_dating: Whether the user opted into matching
        age: Parsed integer age (nullable until answered)
        interests/hobbies: JSON lists of free-text tags
        extra: Fields with no dedicated column
    """

    __tablename__ = "user_profiles"

    uid = Column(String(128), primary_key=True)
    name = Column(String(200), nullable=True)
    photo_url = Column(String(2000), nullable=True)
    enable_dating = Column(Boolean, nullable=False, default=False)
    gender = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    city = Column(String(200), nullable=True)
    orientation = Column(String(50), nullable=True)
    interests = Column(JSON, nullable=True)
    favorite_food = Column(String(200), nullable=True)
    fun_fact = Column(Text, nullable=True)
    relationship_goals = Column(String(200), nullable=True)
    occupation = Column(String(200), nullable=True)
    education = Column(String(200), nullable=True)
    hobbies = Column(JSON, nullable=True)
    favorite_movie = Column(String(200), nullable=True)
    extra = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# Columns exposed to services; bookkeeping columns are left out
PROFILE_FIELDS = (
    "name",
    "photo_url",
    "enable_dating",
    "gender",
    "age",
    "city",
    "orientation",
    "interests",
    "favorite_food",
    "fun_fact",
    "relationship_goals",
    "occupation",
    "education",
    "hobbies",
    "favorite_movie",
)


def profile_to_dict(profile: UserProfile) -> Dict[str, Any]:
    """Flatten a row into the mapping shape the matching services expect."""
    data: Dict[str, Any] = dict(profile.extra or {})
    for field in PROFILE_FIELDS:
        data[field] = getattr(profile, field)
    data["uid"] = profile.uid
    return data


def apply_fields(profile: UserProfile, fields: Dict[str, Any]) -> None:
    """Write fields onto a row, routing unknown keys into `extra`."""
    extra = dict(profile.extra or {})
    for key, value in fields.items():
        if key == "uid":
            continue
        if key in PROFILE_FIELDS:
            setattr(profile, key, value)
        else:
            extra[key] = value
    # Reassign so SQLAlchemy notices the JSON change
    profile.extra = extra
