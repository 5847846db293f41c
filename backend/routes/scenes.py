"""Scene endpoints. Listings go through the visibility resolver.

Scene payloads never include posts; those are served by the posts endpoints,
filtered per viewer.
"""

from fastapi import APIRouter, Depends, HTTPException

from vanguard.models import Scene
from vanguard.storage import Storage
from vanguard.visibility import can_see_scene, visible_scenes

from .deps import (
    current_user,
    get_storage,
    load_campaign,
    load_scene,
    member_viewer,
    require_gm,
)
from .models import CreateScene, SceneCharacterBody

router = APIRouter()


def _summary(scene: Scene) -> dict:
    data = scene.model_dump(mode="json", exclude={"posts"})
    data["post_count"] = len(scene.posts)
    return data


@router.get("/campaigns/{campaign_id}/scenes")
async def list_scenes(
    campaign_id: str,
    character_id: str | None = None,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List the scenes the caller may see, newest first."""
    campaign = load_campaign(storage, campaign_id)
    viewer = member_viewer(storage, campaign, user_id, character_id)
    scenes = visible_scenes(viewer, campaign, storage.get_scenes(campaign_id))
    scenes.sort(key=lambda s: s.created_at, reverse=True)
    return [_summary(s) for s in scenes]


@router.get("/campaigns/{campaign_id}/scenes/archived")
async def list_archived_scenes(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List archived scenes (GM only)."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    return [_summary(s) for s in storage.get_scenes(campaign_id) if s.archived]


@router.post("/campaigns/{campaign_id}/scenes", status_code=201)
async def create_scene(
    campaign_id: str,
    body: CreateScene,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Create a scene (GM only) with an initial cast."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    known = {c.id for c in storage.get_characters(campaign_id)}
    unknown = [cid for cid in body.character_ids if cid not in known]
    if unknown:
        raise HTTPException(400, f"Unknown characters: {', '.join(unknown)}")
    scene = Scene(
        campaign_id=campaign_id,
        title=body.title,
        character_ids=list(dict.fromkeys(body.character_ids)),
    )
    storage.save_scene(scene)
    return _summary(scene)


@router.get("/campaigns/{campaign_id}/scenes/{scene_id}")
async def get_scene(
    campaign_id: str,
    scene_id: str,
    character_id: str | None = None,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Get a single scene, if the caller may see it."""
    campaign = load_campaign(storage, campaign_id)
    viewer = member_viewer(storage, campaign, user_id, character_id)
    scene = load_scene(storage, campaign_id, scene_id)
    if not viewer.is_gm(campaign) and not can_see_scene(viewer, campaign, scene):
        raise HTTPException(404, "Scene not found")
    return _summary(scene)


async def _set_archived(
    campaign_id: str, scene_id: str, archived: bool, user_id: str, storage: Storage
) -> dict:
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    scene = load_scene(storage, campaign_id, scene_id)
    scene = scene.model_copy(update={"archived": archived})
    storage.save_scene(scene)
    return _summary(scene)


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/archive")
async def archive_scene(
    campaign_id: str,
    scene_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Archive a scene (GM only). Archived scenes drop out of player listings."""
    return await _set_archived(campaign_id, scene_id, True, user_id, storage)


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/unarchive")
async def unarchive_scene(
    campaign_id: str,
    scene_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Restore an archived scene (GM only)."""
    return await _set_archived(campaign_id, scene_id, False, user_id, storage)


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/characters")
async def add_scene_character(
    campaign_id: str,
    scene_id: str,
    body: SceneCharacterBody,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Bring a character into a scene (GM only). Earlier posts stay unwitnessed."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    scene = load_scene(storage, campaign_id, scene_id)
    char = storage.get_character(campaign_id, body.character_id)
    if not char or char.archived:
        raise HTTPException(404, "Character not found")
    if char.id in scene.character_ids:
        raise HTTPException(409, "Character already in scene")
    scene = scene.model_copy(update={"character_ids": [*scene.character_ids, char.id]})
    storage.save_scene(scene)
    return _summary(scene)
