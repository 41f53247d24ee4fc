from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


SizeLabel = Literal["XS", "S", "M", "L", "XL", "XXL", "XXXL"]
Category = Literal["tops", "bottoms", "dresses", "outerwear"]


class Measurements(BaseModel):
    """Body measurements in cm (weight in kg). Any field may be missing."""

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    height: Optional[float] = None
    weight: Optional[float] = None
    bust: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    inseam: Optional[float] = None
    shoulder_width: Optional[float] = Field(None, alias="shoulderWidth")


class SizeRecommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    category: Category
    recommended_size: SizeLabel = Field(..., alias="recommendedSize")
    confidence: float = Field(..., ge=0.0, le=1.0)
