"""Post stream, submission, and GM witness endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from vanguard import posting
from vanguard.errors import VanguardError
from vanguard.models import Campaign, Post, Scene
from vanguard.storage import Storage
from vanguard.visibility import can_see_scene, redact_post, visible_posts

from .deps import (
    current_user,
    get_storage,
    http_error,
    load_campaign,
    load_scene,
    member_viewer,
    require_gm,
)
from .models import SubmitPost, UnhideBody, WitnessesBody

router = APIRouter()


def _load_post(scene: Scene, post_id: str) -> Post:
    post = Storage.find_post(scene, post_id)
    if not post:
        raise HTTPException(404, "Post not found")
    return post


def _gm_context(
    storage: Storage, campaign_id: str, scene_id: str, user_id: str
) -> tuple[Campaign, Scene]:
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    return campaign, load_scene(storage, campaign_id, scene_id)


@router.get("/campaigns/{campaign_id}/scenes/{scene_id}/posts")
async def list_posts(
    campaign_id: str,
    scene_id: str,
    character_id: str | None = None,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List the posts the caller may see, with OOC text redacted as configured."""
    campaign = load_campaign(storage, campaign_id)
    viewer = member_viewer(storage, campaign, user_id, character_id)
    scene = load_scene(storage, campaign_id, scene_id)
    if not viewer.is_gm(campaign) and not can_see_scene(viewer, campaign, scene):
        raise HTTPException(404, "Scene not found")
    posts = visible_posts(viewer, campaign, scene)
    return [redact_post(viewer, campaign, scene, p) for p in posts]


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/posts", status_code=201)
async def create_post(
    campaign_id: str,
    scene_id: str,
    body: SubmitPost,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Submit a post as a character (or as narrator, GM only)."""
    campaign = load_campaign(storage, campaign_id)
    viewer = member_viewer(storage, campaign, user_id)
    scene = load_scene(storage, campaign_id, scene_id)
    character = None
    if body.character_id is not None:
        character = storage.get_character(campaign_id, body.character_id)
        if not character:
            raise HTTPException(404, "Character not found")
    try:
        post = posting.submit_post(
            viewer, campaign, scene,
            character=character,
            text=body.text,
            ooc_text=body.ooc_text,
            hidden=body.hidden,
        )
    except VanguardError as e:
        raise http_error(e)
    storage.append_post(scene, post)
    return post


@router.get("/campaigns/{campaign_id}/scenes/{scene_id}/posts/hidden")
async def list_hidden_posts(
    campaign_id: str,
    scene_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List hidden posts in a scene (GM only)."""
    _, scene = _gm_context(storage, campaign_id, scene_id, user_id)
    return [p for p in scene.posts if p.hidden]


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/posts/{post_id}/unhide")
async def unhide_post(
    campaign_id: str,
    scene_id: str,
    post_id: str,
    body: UnhideBody | None = None,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Reveal a hidden post. Witnesses default to everyone in the scene."""
    campaign, scene = _gm_context(storage, campaign_id, scene_id, user_id)
    post = _load_post(scene, post_id)
    viewer = member_viewer(storage, campaign, user_id)
    try:
        post = posting.reveal_post(
            viewer, campaign, scene, post, body.witnesses if body else None
        )
    except VanguardError as e:
        raise http_error(e)
    storage.replace_post(scene, post)
    return post


@router.post("/campaigns/{campaign_id}/scenes/{scene_id}/posts/{post_id}/witnesses")
async def add_post_witnesses(
    campaign_id: str,
    scene_id: str,
    post_id: str,
    body: WitnessesBody,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Add witnesses to a post without changing its hidden flag."""
    campaign, scene = _gm_context(storage, campaign_id, scene_id, user_id)
    post = _load_post(scene, post_id)
    viewer = member_viewer(storage, campaign, user_id)
    try:
        post = posting.add_witnesses(viewer, campaign, scene, post, body.witnesses)
    except VanguardError as e:
        raise http_error(e)
    storage.replace_post(scene, post)
    return post


@router.put("/campaigns/{campaign_id}/scenes/{scene_id}/posts/{post_id}/witnesses")
async def replace_post_witnesses(
    campaign_id: str,
    scene_id: str,
    post_id: str,
    body: WitnessesBody,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Replace a post's witness set outright."""
    campaign, scene = _gm_context(storage, campaign_id, scene_id, user_id)
    post = _load_post(scene, post_id)
    viewer = member_viewer(storage, campaign, user_id)
    try:
        post = posting.set_witnesses(viewer, campaign, scene, post, body.witnesses)
    except VanguardError as e:
        raise http_error(e)
    storage.replace_post(scene, post)
    return post
