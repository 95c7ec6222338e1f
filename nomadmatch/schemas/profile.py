from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class ProfileUpdate(BaseModel):
    """Partial profile write. Unknown keys are kept as extra attributes."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    photo_url: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    city: Optional[str] = None
    orientation: Optional[str] = None
    interests: Optional[list[str]] = None
    favorite_food: Optional[str] = None
    fun_fact: Optional[str] = None
    relationship_goals: Optional[str] = None
    occupation: Optional[str] = None
    education: Optional[str] = None
    hobbies: Optional[list[str]] = None
    favorite_movie: Optional[str] = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    uid: str
    name: Optional[str] = None
    photo_url: Optional[str] = None
    enable_dating: bool = False
    gender: Optional[str] = None
    age: Optional[int] = None
    city: Optional[str] = None
    orientation: Optional[str] = None
    interests: Optional[list[str]] = None
    favorite_food: Optional[str] = None
    fun_fact: Optional[str] = None
    relationship_goals: Optional[str] = None
    occupation: Optional[str] = None
    education: Optional[str] = None
    hobbies: Optional[list[str]] = None
    favorite_movie: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: dict[str, Any]) -> "ProfileResponse":
        data = dict(profile)
        data["enable_dating"] = bool(data.get("enable_dating"))
        return cls.model_validate(data)
