"""Health check, campaign settings, and composer option endpoints."""

import logging

from fastapi import APIRouter, Depends

from vanguard.errors import InvalidSettingsError
from vanguard.settings import update_settings
from vanguard.storage import Storage
from vanguard.visibility import can_submit_hidden_post

from .deps import (
    current_user,
    get_storage,
    http_error,
    load_campaign,
    member_viewer,
    require_gm,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/campaigns/{campaign_id}/settings")
async def get_settings(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Get a campaign's settings."""
    campaign = load_campaign(storage, campaign_id)
    member_viewer(storage, campaign, user_id)
    return campaign.settings


@router.patch("/campaigns/{campaign_id}/settings")
async def patch_settings(
    campaign_id: str,
    body: dict,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Update campaign settings (partial merge, GM only)."""
    campaign = load_campaign(storage, campaign_id)
    require_gm(user_id, campaign)
    try:
        settings = update_settings(campaign.settings, body)
    except InvalidSettingsError as e:
        raise http_error(e)
    campaign = campaign.model_copy(update={"settings": settings})
    storage.save_campaign(campaign)
    logger.info("campaign settings updated id=%s", campaign_id)
    return settings


@router.get("/campaigns/{campaign_id}/composer")
async def composer_options(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Which optional controls the post composer should offer."""
    campaign = load_campaign(storage, campaign_id)
    member_viewer(storage, campaign, user_id)
    return {
        "hidden_posts": can_submit_hidden_post(campaign),
        "character_limit": campaign.settings.character_limit,
    }
