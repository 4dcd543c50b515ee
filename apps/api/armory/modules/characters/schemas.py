from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Field names follow the save file format (CharName, CharacterEquip, ...),
# which is also the persisted and wire format.


class CharacterSummaryOut(BaseModel):
    index: int
    CharName: str
    CharClass: Optional[Any] = None
    CharLevel: Optional[Any] = None
    DiscordId: str = ""


class CharacterOut(BaseModel):
    # no hashedKey field: the secret hash can never be serialized from here
    index: int
    CharName: str
    CharClass: Optional[Any] = None
    CharLevel: Optional[Any] = None
    DiscordId: str = ""
    CharacterInv: Optional[Any] = None
    CharacterEquip: Optional[Any] = None
    EquipSlotQuantities: Optional[Any] = None
    CharacterSpells: Optional[Any] = None
    CharacterSkills: Optional[Any] = None
    TutorialsDone: Optional[Any] = None
    CurHP: Optional[Any] = None
    CurMana: Optional[Any] = None
    CurrentXP: Optional[Any] = None
    Gold: Optional[Any] = None
    CompletedQuests: Optional[Any] = None
    ActiveQuests: Optional[Any] = None
    Keyring: Optional[Any] = None
    AuraItem: Optional[Any] = None
    CharmItem: Optional[Any] = None
    CharmQual: Optional[Any] = None


class UploadOut(BaseModel):
    success: bool = True
    message: str
    index: int
    updated: bool


class DeleteIn(BaseModel):
    # loosely typed so wrong types surface as a 400, not a 422
    characterName: Optional[Any] = None
    key: Optional[Any] = None


class DeleteOut(BaseModel):
    success: bool = True
    message: str


class DisplayEntry(BaseModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None


class CharacterSheetOut(BaseModel):
    character: CharacterOut
    equipment: Dict[str, Optional[DisplayEntry]]
    layout: List[List[str]]
    spells: List[DisplayEntry] = Field(default_factory=list)
    skills: List[DisplayEntry] = Field(default_factory=list)
    completed_quests: List[Any] = Field(default_factory=list)
    active_quests: List[Any] = Field(default_factory=list)
