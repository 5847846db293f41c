"""Campaign phases and the PC-phase time gate.

A campaign alternates between two phases:
  gm_phase  → the GM resolves; players cannot post
  pc_phase  → players post until the time gate runs out

Entering the PC phase sets a deadline of now + the campaign's
`time_gate_preset`. Once it has passed, players are locked out until the GM
moves the campaign on. Changing the preset mid-phase leaves the running
deadline alone. The GM is never gated.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from vanguard.errors import (
    AlreadyInPhaseError,
    NotGMError,
    NotInPCPhaseError,
    TimeGateExpiredError,
)
from vanguard.models import Campaign, CampaignPhase, TimeGatePreset, Viewer, now_utc

logger = logging.getLogger(__name__)

TIME_GATE_PRESETS: dict[str, timedelta] = {
    "24h": timedelta(hours=24),
    "2d": timedelta(hours=48),
    "3d": timedelta(hours=72),
    "4d": timedelta(hours=96),
    "5d": timedelta(hours=120),
}


def time_gate_duration(preset: TimeGatePreset) -> timedelta:
    return TIME_GATE_PRESETS[preset]


def is_time_gate_expired(campaign: Campaign, now: datetime | None = None) -> bool:
    """True once a running PC phase has passed its deadline."""
    if campaign.current_phase != "pc_phase" or campaign.phase_expires_at is None:
        return False
    return (now or now_utc()) > campaign.phase_expires_at


def check_can_post(viewer: Viewer, campaign: Campaign, now: datetime | None = None) -> None:
    """Raise unless `viewer` may write posts in `campaign` right now."""
    if viewer.is_gm(campaign):
        return
    if campaign.current_phase != "pc_phase":
        raise NotInPCPhaseError("posts can only be created during the PC phase")
    if is_time_gate_expired(campaign, now):
        raise TimeGateExpiredError("time gate has expired; waiting for the GM")


def transition_phase(
    viewer: Viewer,
    campaign: Campaign,
    to_phase: CampaignPhase,
    now: datetime | None = None,
) -> Campaign:
    """Move `campaign` to `to_phase` (GM only). Returns the updated campaign."""
    if not viewer.is_gm(campaign):
        raise NotGMError("only the GM can change the phase")
    if campaign.current_phase == to_phase:
        raise AlreadyInPhaseError(f"campaign is already in {to_phase}")

    expires_at = None
    if to_phase == "pc_phase":
        expires_at = (now or now_utc()) + time_gate_duration(campaign.settings.time_gate_preset)
    logger.info(
        "phase transition campaign=%s %s -> %s expires=%s",
        campaign.id, campaign.current_phase, to_phase, expires_at,
    )
    return campaign.model_copy(
        update={"current_phase": to_phase, "phase_expires_at": expires_at}
    )


def phase_status(campaign: Campaign, now: datetime | None = None) -> dict:
    return {
        "current_phase": campaign.current_phase,
        "expires_at": campaign.phase_expires_at,
        "is_expired": is_time_gate_expired(campaign, now),
        "time_gate_preset": campaign.settings.time_gate_preset,
    }
