from fastapi import APIRouter, Depends
from nomadmatch.api.deps import get_or_create_profile, get_profile_store
from nomadmatch.auth import get_current_user
from nomadmatch.schemas import ProfileResponse, ProfileUpdate
from nomadmatch.services.profile_store import ProfileStore

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    store: ProfileStore = Depends(get_profile_store),
    uid: str = Depends(get_current_user),
):
    profile = await get_or_create_profile(store, uid)
    return ProfileResponse.from_profile(profile)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    update: ProfileUpdate,
    store: ProfileStore = Depends(get_profile_store),
    uid: str = Depends(get_current_user),
):
    await get_or_create_profile(store, uid)

    update_data = {**update.model_dump(exclude_unset=True), **(update.model_extra or {})}
    # The dating toggle has its own endpoint
    update_data.pop("enable_dating", None)
    update_data.pop("uid", None)

    profile = await store.update(uid, update_data)
    return ProfileResponse.from_profile(profile)
