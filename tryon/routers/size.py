from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from ..security import verify_client
from ..schemas.size import Measurements, SizeRecommendation
from ..services.avatar_store import AvatarNotFound, AvatarStore, MeasurementsUnavailable, recommendations_for_avatar
from ..services.recommender import recommend
from .avatar import get_avatar_store


router = APIRouter(prefix="/size", tags=["size"], dependencies=[Depends(verify_client)])


@router.get("/recommendations/{avatar_id}", response_model=List[SizeRecommendation])
async def avatar_recommendations(avatar_id: str, store: AvatarStore = Depends(get_avatar_store)):
    """Recommended size per category for a previously generated avatar."""
    try:
        return recommendations_for_avatar(store, avatar_id)
    except AvatarNotFound:
        raise HTTPException(status_code=404, detail="Avatar not found")
    except MeasurementsUnavailable:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="No measurements available")


@router.post("/recommendations", response_model=List[SizeRecommendation])
async def measurement_recommendations(measurements: Measurements):
    """Recommended size per category for measurements supplied directly."""
    return recommend(measurements)
