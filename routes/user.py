from fastapi import APIRouter, Depends, status

from config.dependencies import get_directory, get_profiles
from config.security import ensure_self_or_admin, get_current_user
from model.user import Users
from schema.user import ProfileOut, SettingsOut, SettingsUpdate, UserOut, UserUpdate
from src.social.profiles import ProfileService
from src.social.user_directory import UserDirectory

router = APIRouter(prefix="/v1/users", tags=["Users"])


@router.get("/me", response_model=UserOut)
def get_me(current_user: Users = Depends(get_current_user)):
    """
    Returns the currently authenticated user.
    Requires a valid Bearer token.
    """
    return current_user


@router.put("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def update_me(
    payload: UserUpdate,
    current_user: Users = Depends(get_current_user),
    directory: UserDirectory = Depends(get_directory),
):
    return directory.update_profile(current_user.id, payload.model_dump(exclude_unset=True))


@router.get("/{username}/profile", response_model=ProfileOut)
def get_profile(
    username: str,
    current_user: Users = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    """
    Profile of `username` as seen by the caller.
    Details, posts and connections are omitted where the owner's privacy hides them.
    """
    return profiles.get_profile(username, current_user.id)


# --------------------------
# Settings
# --------------------------

@router.get("/{user_id}/settings", response_model=SettingsOut)
def get_settings(
    user_id: int,
    current_user: Users = Depends(get_current_user),
    directory: UserDirectory = Depends(get_directory),
):
    ensure_self_or_admin(current_user, user_id)
    return directory.get_settings(user_id)


@router.put("/{user_id}/settings", response_model=SettingsOut)
def update_settings(
    user_id: int,
    payload: SettingsUpdate,
    current_user: Users = Depends(get_current_user),
    directory: UserDirectory = Depends(get_directory),
):
    ensure_self_or_admin(current_user, user_id)
    changes = {
        field: value.value if hasattr(value, "value") else value
        for field, value in payload.model_dump(exclude_unset=True).items()
    }
    return directory.upsert_settings(user_id, changes)
