"""Pydantic request models for API endpoints."""

from pydantic import BaseModel

from vanguard.models import CampaignPhase, CampaignSettings, CharacterType


class CreateCampaign(BaseModel):
    title: str
    settings: CampaignSettings | None = None


class TransitionPhase(BaseModel):
    to_phase: CampaignPhase


class CreateCharacter(BaseModel):
    name: str
    type: CharacterType = "pc"
    user_id: str | None = None


class UpdateCharacter(BaseModel):
    name: str | None = None
    user_id: str | None = None
    archived: bool | None = None


class CreateScene(BaseModel):
    title: str
    character_ids: list[str] = []


class SceneCharacterBody(BaseModel):
    character_id: str


class SubmitPost(BaseModel):
    character_id: str | None = None  # omit for narrator posts
    text: str
    ooc_text: str | None = None
    hidden: bool = False


class UnhideBody(BaseModel):
    witnesses: list[str] | None = None


class WitnessesBody(BaseModel):
    witnesses: list[str]
