"""JSON file storage.

All state is stored in flat JSON files under a configurable base directory.
There is no database or ORM. Reads and writes go through plain helper
methods that validate with the pydantic models on the way in and out.

Directory layout:

    {base}/
      campaigns/
        {campaign_id}.json          ← campaign metadata + settings
        {campaign_id}/
          characters.json           ← list of Character objects
          scenes/
            {scene_id}.json         ← Scene, including its ordered posts

Missing records come back as None (or []), never as exceptions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from vanguard.models import Campaign, CampaignSettings, Character, Post, Scene

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._camp_root = base_path / "campaigns"
        self._camp_root.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _camp_file(self, campaign_id: str) -> Path:
        return self._camp_root / f"{campaign_id}.json"

    def _camp_dir(self, campaign_id: str) -> Path:
        return self._camp_root / campaign_id

    def _scenes_dir(self, campaign_id: str) -> Path:
        return self._camp_dir(campaign_id) / "scenes"

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def create_campaign(
        self,
        title: str,
        gm_user_id: str,
        settings: CampaignSettings | None = None,
    ) -> Campaign:
        campaign = Campaign(
            title=title,
            gm_user_id=gm_user_id,
            settings=settings if settings is not None else CampaignSettings(),
        )
        self._scenes_dir(campaign.id).mkdir(parents=True, exist_ok=True)
        self.save_campaign(campaign)
        logger.info("campaign created id=%s gm=%s", campaign.id, gm_user_id)
        return campaign

    def save_campaign(self, campaign: Campaign) -> None:
        self._camp_file(campaign.id).write_text(campaign.model_dump_json(indent=2))

    def get_campaign(self, campaign_id: str) -> Campaign | None:
        path = self._camp_file(campaign_id)
        if not path.is_file():
            return None
        return Campaign.model_validate_json(path.read_text())

    def list_campaigns(self) -> list[Campaign]:
        return [
            Campaign.model_validate_json(p.read_text())
            for p in sorted(self._camp_root.glob("*.json"))
        ]

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    def save_character(self, character: Character) -> None:
        """Upsert a character by id."""
        chars = self.get_characters(character.campaign_id)
        for i, c in enumerate(chars):
            if c.id == character.id:
                chars[i] = character
                break
        else:
            chars.append(character)
        path = self._camp_dir(character.campaign_id) / "characters.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps([c.model_dump(mode="json") for c in chars], indent=2))

    def get_characters(self, campaign_id: str) -> list[Character]:
        path = self._camp_dir(campaign_id) / "characters.json"
        if not path.is_file():
            return []
        return [Character.model_validate(c) for c in json.loads(path.read_text())]

    def get_character(self, campaign_id: str, character_id: str) -> Character | None:
        for char in self.get_characters(campaign_id):
            if char.id == character_id:
                return char
        return None

    # ------------------------------------------------------------------
    # Scenes (posts live inside their scene file)
    # ------------------------------------------------------------------

    def save_scene(self, scene: Scene) -> None:
        scenes_dir = self._scenes_dir(scene.campaign_id)
        scenes_dir.mkdir(parents=True, exist_ok=True)
        (scenes_dir / f"{scene.id}.json").write_text(scene.model_dump_json(indent=2))

    def get_scene(self, campaign_id: str, scene_id: str) -> Scene | None:
        path = self._scenes_dir(campaign_id) / f"{scene_id}.json"
        if not path.is_file():
            return None
        return Scene.model_validate_json(path.read_text())

    def get_scenes(self, campaign_id: str) -> list[Scene]:
        """All scenes of a campaign, oldest first."""
        scenes_dir = self._scenes_dir(campaign_id)
        if not scenes_dir.is_dir():
            return []
        scenes = [Scene.model_validate_json(p.read_text()) for p in scenes_dir.glob("*.json")]
        scenes.sort(key=lambda s: s.created_at)
        return scenes

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def append_post(self, scene: Scene, post: Post) -> Scene:
        """Append `post` to `scene` and persist. Returns the updated scene."""
        updated = scene.model_copy(update={"posts": [*scene.posts, post]})
        self.save_scene(updated)
        logger.debug("post appended scene=%s post=%s", scene.id, post.id)
        return updated

    def replace_post(self, scene: Scene, post: Post) -> Scene | None:
        """Swap the stored post with the same id for `post`.

        Returns the updated scene, or None if `scene` holds no such post.
        """
        if self.find_post(scene, post.id) is None:
            return None
        posts = [post if p.id == post.id else p for p in scene.posts]
        updated = scene.model_copy(update={"posts": posts})
        self.save_scene(updated)
        logger.debug("post replaced scene=%s post=%s", scene.id, post.id)
        return updated

    @staticmethod
    def find_post(scene: Scene, post_id: str) -> Post | None:
        for post in scene.posts:
            if post.id == post_id:
                return post
        return None
