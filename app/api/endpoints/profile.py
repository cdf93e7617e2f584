from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_profile_repository
from app.core.security import get_current_user_id
from app.profiles.repository import ProfileRepository
from app.schemas.profile import ProfileUpsert, UserProfile

router = APIRouter()


@router.get("", response_model=UserProfile)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    profile = profiles.get(user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="No profile")
    return profile


@router.put("", response_model=UserProfile)
def upsert_profile(
    body: ProfileUpsert,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    return profiles.upsert(user_id, body)
