from pydantic import BaseModel
from typing import Optional

from nomadmatch.schemas.profile import ProfileResponse
from nomadmatch.services.questions import ParserKind


class QuestionResponse(BaseModel):
    field: str
    question: str
    placeholder: str
    parser: ParserKind


class DatingToggle(BaseModel):
    enabled: bool


class DatingToggleResponse(BaseModel):
    enabled: bool
    missing_questions: list[QuestionResponse]


class WizardSubmission(BaseModel):
    """Raw answers, one per missing question, in question order."""

    answers: list[str]


class MatchCard(BaseModel):
    uid: str
    name: Optional[str] = None
    reason: Optional[str] = None
    profile: ProfileResponse


class MatchListResponse(BaseModel):
    matches: list[MatchCard]
