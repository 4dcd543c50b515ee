from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from armory.core.errors import NotFoundError, ValidationError
from armory.modules.catalogs.service import Catalogs, get_catalogs

from .schemas import (
    CharacterOut,
    CharacterSheetOut,
    CharacterSummaryOut,
    DeleteIn,
    DeleteOut,
    UploadOut,
)
from .service import CharacterRepository, get_repository
from .sheet import build_sheet
from .validator import max_upload_bytes, validate_upload

router = APIRouter(tags=["characters"])


def _parse_index(raw: str) -> int:
    # a non-numeric index names no character
    try:
        return int(raw)
    except ValueError:
        raise NotFoundError("Character not found", {"index": raw})


@router.post("/upload", response_model=UploadOut)
def api_upload(
    file: Optional[UploadFile] = File(None),
    key: Optional[str] = Form(None),
    discord_id: Optional[str] = Form(None, alias="DiscordId"),
    discord_id_lower: Optional[str] = Form(None, alias="discordId"),
    repo: CharacterRepository = Depends(get_repository),
) -> UploadOut:
    if not key:
        raise ValidationError("Missing key")
    if file is None:
        raise ValidationError("Missing file")

    # read one byte past the ceiling so oversize bodies are measurable
    raw = file.file.read(max_upload_bytes() + 1)
    candidate = validate_upload(raw, declared_size=file.size)
    candidate["DiscordId"] = discord_id or discord_id_lower or ""

    record, updated = repo.upsert(candidate, key)
    return UploadOut(
        message="Character updated" if updated else "Character added",
        index=record["index"],
        updated=updated,
    )


@router.get("/characters", response_model=List[CharacterSummaryOut])
def api_list_characters(
    q: Optional[str] = Query(None, description="Case-insensitive CharName filter"),
    repo: CharacterRepository = Depends(get_repository),
) -> List[CharacterSummaryOut]:
    return repo.list_summaries(query=q)


@router.get("/character/{index}", response_model=CharacterOut)
def api_get_character(index: str, repo: CharacterRepository = Depends(get_repository)) -> CharacterOut:
    return repo.get_by_index(_parse_index(index))


@router.get("/character/{index}/sheet", response_model=CharacterSheetOut)
def api_get_character_sheet(
    index: str,
    repo: CharacterRepository = Depends(get_repository),
    catalogs: Catalogs = Depends(get_catalogs),
) -> CharacterSheetOut:
    return build_sheet(repo.get_by_index(_parse_index(index)), catalogs)


@router.delete("/character", response_model=DeleteOut)
def api_delete_character(
    body: Optional[DeleteIn] = None,
    repo: CharacterRepository = Depends(get_repository),
) -> DeleteOut:
    name = body.characterName if body is not None else None
    key = body.key if body is not None else None
    if not isinstance(name, str) or not name or not isinstance(key, str) or not key:
        raise ValidationError("Missing character name or key")
    repo.delete_by_authorization(name, key)
    return DeleteOut(message="Character deleted successfully")
