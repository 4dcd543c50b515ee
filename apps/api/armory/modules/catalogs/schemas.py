from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Definition(BaseModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None


class ItemDefinition(Definition):
    slot: Optional[str] = None


class SpellDefinition(Definition):
    pass


class SkillDefinition(Definition):
    pass


class CatalogCountsOut(BaseModel):
    items: int
    spells: int
    skills: int
