"""Character CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from vanguard.models import Character
from vanguard.storage import Storage

from .deps import current_user, get_storage, load_campaign, member_viewer, require_gm
from .models import CreateCharacter, UpdateCharacter

router = APIRouter()


@router.get("/campaigns/{campaign_id}/characters")
async def list_characters(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List all characters in a campaign."""
    campaign = load_campaign(storage, campaign_id)
    member_viewer(storage, campaign, user_id)
    return storage.get_characters(campaign_id)


@router.post("/campaigns/{campaign_id}/characters", status_code=201)
async def create_character(
    campaign_id: str,
    body: CreateCharacter,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Create a character (GM only), optionally assigned to a player."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    char = Character(
        campaign_id=campaign_id,
        name=body.name,
        type=body.type,
        user_id=body.user_id,
    )
    storage.save_character(char)
    return char


@router.patch("/campaigns/{campaign_id}/characters/{character_id}")
async def update_character(
    campaign_id: str,
    character_id: str,
    body: UpdateCharacter,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Rename, (re)assign or archive a character (GM only)."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    char = storage.get_character(campaign_id, character_id)
    if not char:
        raise HTTPException(404, "Character not found")
    fields = body.model_dump(exclude_unset=True)
    if fields.get("name") is None:
        fields.pop("name", None)
    if fields.get("archived") is None:
        fields.pop("archived", None)
    char = char.model_copy(update=fields)
    storage.save_character(char)
    return char
