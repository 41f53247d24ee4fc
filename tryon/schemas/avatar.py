from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .size import Measurements


class Avatar(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    mesh_url: str = Field(..., alias="meshUrl")
    texture_url: str = Field(..., alias="textureUrl")
    created_at: str = Field(..., alias="createdAt")
    measurements: Optional[Measurements] = None
