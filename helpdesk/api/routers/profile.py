"""
Endpoints para consultar y actualizar el perfil del usuario autenticado.

La API delega en `services/profile_service.py` (API delgada, servicios con la lógica).
"""

from fastapi import APIRouter, Depends, HTTPException, status
from helpdesk.api.deps import get_current_user
from helpdesk.api.schemas.user import ProfileOut, UserProfileUpdate
from helpdesk.services import profile_service

router = APIRouter(tags=["Profile"])


@router.get("/profile", response_model=ProfileOut)
def get_my_profile(user=Depends(get_current_user)) -> ProfileOut:
    return ProfileOut(profile=profile_service.get_my_profile(user))


@router.post("/update-profile", response_model=ProfileOut, status_code=status.HTTP_200_OK)
def update_my_profile(payload: UserProfileUpdate, user=Depends(get_current_user)) -> ProfileOut:
    try:
        data = payload.model_dump(exclude_none=True)
        new_profile = profile_service.update_my_profile(str(user["_id"]), data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ProfileOut(message="ok", profile=new_profile)
