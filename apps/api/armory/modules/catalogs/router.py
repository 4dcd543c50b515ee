from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends

from armory.core.errors import NotFoundError

from .schemas import CatalogCountsOut, Definition, ItemDefinition
from .service import Catalogs, get_catalogs

router = APIRouter(prefix="/catalogs", tags=["catalogs"])


@router.get("", response_model=CatalogCountsOut)
def api_catalog_counts(catalogs: Catalogs = Depends(get_catalogs)) -> CatalogCountsOut:
    return CatalogCountsOut(**catalogs.counts())


@router.get("/items/{item_id}", response_model=ItemDefinition)
def api_get_item(item_id: str, catalogs: Catalogs = Depends(get_catalogs)) -> ItemDefinition:
    found = catalogs.items.get(item_id)
    if found is None:
        raise NotFoundError("item not found", {"kind": "items", "id": item_id})
    return found


@router.get("/{kind}/{def_id}", response_model=Definition)
def api_get_definition(
    kind: Literal["spells", "skills"],
    def_id: str,
    catalogs: Catalogs = Depends(get_catalogs),
) -> Definition:
    found = catalogs.by_kind(kind).get(def_id)
    if found is None:
        raise NotFoundError(f"{kind[:-1]} not found", {"kind": kind, "id": def_id})
    return found
