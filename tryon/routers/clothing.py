from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..security import verify_client
from ..schemas.clothing import ClothingItem
from ..services.catalog import Catalog, ClothingItemNotFound, InvalidCategory


router = APIRouter(prefix="/clothing", tags=["clothing"], dependencies=[Depends(verify_client)])


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


@router.get("", response_model=List[ClothingItem])
async def list_clothing(catalog: Catalog = Depends(get_catalog)):
    return catalog.all()


@router.get("/category/{category}", response_model=List[ClothingItem])
async def clothing_by_category(category: str, catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.by_category(category)
    except InvalidCategory as e:
        raise HTTPException(status_code=400, detail=str(e))


# Registered before /{item_id} so "search" is not taken for an id
@router.get("/search", response_model=List[ClothingItem])
async def search_clothing(
    category: Optional[str] = Query(None),
    query: Optional[str] = Query(None),
    catalog: Catalog = Depends(get_catalog),
):
    """Keyword search over name, description and brand, optionally within a category."""
    if not query and not category:
        raise HTTPException(status_code=400, detail="At least one search parameter (category or query) is required")
    return catalog.search(category=category, query=query)


@router.get("/{item_id}", response_model=ClothingItem)
async def get_clothing_item(item_id: str, catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.get(item_id)
    except ClothingItemNotFound:
        raise HTTPException(status_code=404, detail="Clothing item not found")
