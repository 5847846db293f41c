"""Core domain models.

The visibility resolver, the posting rules and the JSON store all operate on
these types. Pydantic is used for validation and serialisation at every data
boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer

OocVisibility = Literal["all", "gm_only"]
TimeGatePreset = Literal["24h", "2d", "3d", "4d", "5d"]
CharacterLimit = Literal[1000, 3000, 6000, 10000]
CharacterType = Literal["pc", "npc"]
CampaignPhase = Literal["pc_phase", "gm_phase"]


def new_id() -> str:
    return uuid4().hex


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class CampaignSettings(BaseModel):
    """Per-campaign secrecy and pacing configuration, owned by the GM."""

    model_config = ConfigDict(extra="forbid")

    fog_of_war: bool = True
    hidden_posts: bool = True
    ooc_visibility: OocVisibility = "gm_only"
    time_gate_preset: TimeGatePreset = "3d"
    character_limit: CharacterLimit = 3000


class Campaign(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    gm_user_id: str
    settings: CampaignSettings = Field(default_factory=CampaignSettings)
    current_phase: CampaignPhase = "gm_phase"
    phase_expires_at: datetime | None = None  # PC-phase time gate deadline
    created_at: datetime = Field(default_factory=now_utc)


class Character(BaseModel):
    """A PC or NPC belonging to exactly one campaign."""

    id: str = Field(default_factory=new_id)
    campaign_id: str
    name: str
    type: CharacterType = "pc"
    user_id: str | None = None  # controlling user; None while unassigned
    archived: bool = False


class Post(BaseModel):
    """A single entry in a scene's ordered post stream."""

    id: str = Field(default_factory=new_id)
    scene_id: str
    author_user_id: str
    character_id: str | None = None  # None for narrator posts
    text: str = ""
    ooc_text: str | None = None
    hidden: bool = False
    witnesses: set[str] = Field(default_factory=set)
    created_at: datetime = Field(default_factory=now_utc)

    @field_serializer("witnesses")
    def _dump_witnesses(self, witnesses: set[str]) -> list[str]:
        return sorted(witnesses)


class Scene(BaseModel):
    id: str = Field(default_factory=new_id)
    campaign_id: str
    title: str
    archived: bool = False
    character_ids: list[str] = Field(default_factory=list)  # characters present
    posts: list[Post] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now_utc)


class Viewer(BaseModel):
    """The requesting actor.

    Built by the request layer once identity is known. The selected
    character is caller-supplied state; nothing here remembers it between
    requests.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    character_ids: frozenset[str] = frozenset()
    selected_character_id: str | None = None

    @classmethod
    def for_campaign(
        cls,
        user_id: str,
        characters: Iterable[Character],
        selected_character_id: str | None = None,
    ) -> Viewer:
        """Collect the characters `user_id` controls out of a campaign roster."""
        owned = frozenset(c.id for c in characters if c.user_id == user_id)
        return cls(
            user_id=user_id,
            character_ids=owned,
            selected_character_id=selected_character_id,
        )

    def is_gm(self, campaign: Campaign) -> bool:
        return campaign.gm_user_id == self.user_id

    def acting_characters(self) -> frozenset[str]:
        """Characters whose witness records count for this request.

        With a selection only that character counts (and only if the viewer
        controls it); otherwise every controlled character does.
        """
        if self.selected_character_id is not None:
            return self.character_ids & {self.selected_character_id}
        return self.character_ids
