"""Campaign CRUD endpoints."""

from fastapi import APIRouter, Depends

from vanguard.storage import Storage

from .deps import current_user, get_storage, load_campaign, member_viewer
from .models import CreateCampaign

router = APIRouter()


@router.get("/campaigns")
async def list_campaigns(
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """List campaigns the caller runs or has a character in."""
    result = []
    for campaign in storage.list_campaigns():
        if campaign.gm_user_id == user_id or any(
            c.user_id == user_id for c in storage.get_characters(campaign.id)
        ):
            result.append(campaign)
    return result


@router.post("/campaigns", status_code=201)
async def create_campaign(
    body: CreateCampaign,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Create a campaign; the caller becomes its GM."""
    return storage.create_campaign(body.title, user_id, body.settings)


@router.get("/campaigns/{campaign_id}")
async def get_campaign(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Get a single campaign."""
    campaign = load_campaign(storage, campaign_id)
    member_viewer(storage, campaign, user_id)
    return campaign
