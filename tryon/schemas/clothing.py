from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

from .size import SizeLabel


ClothingCategory = Literal[
    "tops",
    "bottoms",
    "dresses",
    "outerwear",
    "footwear",
    "accessories",
    "hijabs",
    "scarves",
]


class ClothingItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    category: ClothingCategory
    description: str = ""
    price: float = Field(..., ge=0.0)
    sizes: List[SizeLabel] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    mesh_url: str = Field("", alias="meshUrl")
    texture_url: str = Field("", alias="textureUrl")
    thumbnail_url: str = Field("", alias="thumbnailUrl")
    brand_name: str = Field("", alias="brandName")
    affiliate_link: str = Field("", alias="affiliateLink")
