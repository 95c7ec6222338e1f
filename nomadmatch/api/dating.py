from fastapi import APIRouter, Depends
from nomadmatch.api.deps import get_matchmaking_service, get_or_create_profile
from nomadmatch.auth import get_current_user
from nomadmatch.schemas import (
    DatingToggle,
    DatingToggleResponse,
    MatchCard,
    MatchListResponse,
    ProfileResponse,
    QuestionResponse,
    WizardSubmission,
)
from nomadmatch.services.matchmaking import MatchmakingService
from nomadmatch.services.questions import WizardQuestion

router = APIRouter()


def _question(q: WizardQuestion) -> QuestionResponse:
    return QuestionResponse(
        field=q.field,
        question=q.question,
        placeholder=q.placeholder,
        parser=q.parser,
    )


@router.put("/enabled", response_model=DatingToggleResponse)
async def set_dating_enabled(
    toggle: DatingToggle,
    service: MatchmakingService = Depends(get_matchmaking_service),
    uid: str = Depends(get_current_user),
):
    await get_or_create_profile(service.store, uid)
    missing = await service.set_dating_enabled(uid, toggle.enabled)
    return DatingToggleResponse(
        enabled=toggle.enabled,
        missing_questions=[_question(q) for q in missing],
    )


@router.get("/questions", response_model=list[QuestionResponse])
async def list_missing_questions(
    service: MatchmakingService = Depends(get_matchmaking_service),
    uid: str = Depends(get_current_user),
):
    await get_or_create_profile(service.store, uid)
    missing = await service.missing_questions(uid)
    return [_question(q) for q in missing]


@router.post("/wizard", response_model=ProfileResponse)
async def submit_wizard(
    submission: WizardSubmission,
    service: MatchmakingService = Depends(get_matchmaking_service),
    uid: str = Depends(get_current_user),
):
    await get_or_create_profile(service.store, uid)
    profile = await service.complete_wizard(uid, submission.answers)
    return ProfileResponse.from_profile(profile)


@router.get("/matches", response_model=MatchListResponse)
async def list_matches(
    service: MatchmakingService = Depends(get_matchmaking_service),
    uid: str = Depends(get_current_user),
):
    bundle = await service.find_matches(uid)
    cards = [
        MatchCard(
            uid=match.uid,
            name=match.name or profile.get("name"),
            reason=match.reason,
            profile=ProfileResponse.from_profile(profile),
        )
        for match, profile in bundle.pairs()
    ]
    return MatchListResponse(matches=cards)
