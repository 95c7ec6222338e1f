from nomadmatch.schemas.profile import ProfileUpdate, ProfileResponse
from nomadmatch.schemas.auth import LoginRequest, LoginResponse
from nomadmatch.schemas.dating import (
    QuestionResponse,
    DatingToggle,
    DatingToggleResponse,
    WizardSubmission,
    MatchCard,
    MatchListResponse,
)

__all__ = [
    "ProfileUpdate",
    "ProfileResponse",
    "LoginRequest",
    "LoginResponse",
    "QuestionResponse",
    "DatingToggle",
    "DatingToggleResponse",
    "WizardSubmission",
    "MatchCard",
    "MatchListResponse",
]
