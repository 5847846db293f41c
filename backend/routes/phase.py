"""Campaign phase status and GM phase transitions."""

import logging

from fastapi import APIRouter, Depends

from vanguard.errors import VanguardError
from vanguard.phase import phase_status, transition_phase
from vanguard.storage import Storage

from .deps import current_user, get_storage, http_error, load_campaign, member_viewer
from .models import TransitionPhase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/campaigns/{campaign_id}/phase")
async def get_phase(
    campaign_id: str,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Current phase, time gate deadline, and whether it has run out."""
    campaign = load_campaign(storage, campaign_id)
    member_viewer(storage, campaign, user_id)
    return phase_status(campaign)


@router.post("/campaigns/{campaign_id}/phase")
async def post_phase(
    campaign_id: str,
    body: TransitionPhase,
    user_id: str = Depends(current_user),
    storage: Storage = Depends(get_storage),
):
    """Move the campaign to the other phase (GM only)."""
    campaign = load_campaign(storage, campaign_id)
    viewer = member_viewer(storage, campaign, user_id)
    try:
        campaign = transition_phase(viewer, campaign, body.to_phase)
    except VanguardError as e:
        raise http_error(e)
    storage.save_campaign(campaign)
    return phase_status(campaign)
