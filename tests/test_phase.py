"""Tests for vanguard.phase: phase transitions and the PC-phase time gate."""

from datetime import datetime, timedelta, timezone

import pytest

from vanguard.errors import (
    AlreadyInPhaseError,
    NotGMError,
    NotInPCPhaseError,
    TimeGateExpiredError,
)
from vanguard.models import Campaign, CampaignSettings, Viewer
from vanguard.phase import (
    TIME_GATE_PRESETS,
    check_can_post,
    is_time_gate_expired,
    phase_status,
    transition_phase,
)

GM = Viewer(user_id="gm")
ALICE = Viewer(user_id="alice", character_ids=frozenset({"mira"}))

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _campaign(preset: str = "3d") -> Campaign:
    return Campaign(id="camp", title="Ironhold", gm_user_id="gm",
                    settings=CampaignSettings(time_gate_preset=preset))


class TestTransition:
    def test_new_campaign_starts_in_gm_phase(self) -> None:
        campaign = _campaign()
        assert campaign.current_phase == "gm_phase"
        assert campaign.phase_expires_at is None

    @pytest.mark.parametrize("preset,hours", [("24h", 24), ("2d", 48), ("3d", 72),
                                              ("4d", 96), ("5d", 120)])
    def test_pc_phase_deadline_follows_preset(self, preset: str, hours: int) -> None:
        opened = transition_phase(GM, _campaign(preset), "pc_phase", now=T0)
        assert opened.current_phase == "pc_phase"
        assert opened.phase_expires_at == T0 + timedelta(hours=hours)

    def test_gm_phase_clears_deadline(self) -> None:
        opened = transition_phase(GM, _campaign(), "pc_phase", now=T0)
        closed = transition_phase(GM, opened, "gm_phase", now=T0)
        assert closed.current_phase == "gm_phase"
        assert closed.phase_expires_at is None

    def test_returns_copy(self) -> None:
        campaign = _campaign()
        transition_phase(GM, campaign, "pc_phase", now=T0)
        assert campaign.current_phase == "gm_phase"

    def test_requires_gm(self) -> None:
        with pytest.raises(NotGMError):
            transition_phase(ALICE, _campaign(), "pc_phase")

    def test_same_phase_rejected(self) -> None:
        with pytest.raises(AlreadyInPhaseError):
            transition_phase(GM, _campaign(), "gm_phase")

    def test_every_preset_has_a_duration(self) -> None:
        assert set(TIME_GATE_PRESETS) == {"24h", "2d", "3d", "4d", "5d"}


class TestTimeGate:
    def test_not_expired_before_deadline(self) -> None:
        opened = transition_phase(GM, _campaign("24h"), "pc_phase", now=T0)
        assert is_time_gate_expired(opened, T0 + timedelta(hours=23)) is False
        check_can_post(ALICE, opened, T0 + timedelta(hours=23))

    def test_expired_after_deadline(self) -> None:
        opened = transition_phase(GM, _campaign("24h"), "pc_phase", now=T0)
        later = T0 + timedelta(hours=25)
        assert is_time_gate_expired(opened, later) is True
        with pytest.raises(TimeGateExpiredError):
            check_can_post(ALICE, opened, later)

    def test_gm_phase_blocks_players(self) -> None:
        with pytest.raises(NotInPCPhaseError):
            check_can_post(ALICE, _campaign(), T0)

    def test_gm_never_gated(self) -> None:
        opened = transition_phase(GM, _campaign("24h"), "pc_phase", now=T0)
        check_can_post(GM, opened, T0 + timedelta(days=30))
        check_can_post(GM, _campaign(), T0)

    def test_pc_phase_without_deadline_stays_open(self) -> None:
        campaign = _campaign().model_copy(update={"current_phase": "pc_phase"})
        assert is_time_gate_expired(campaign, T0 + timedelta(days=365)) is False

    def test_preset_change_keeps_running_deadline(self) -> None:
        opened = transition_phase(GM, _campaign("24h"), "pc_phase", now=T0)
        changed = opened.model_copy(
            update={"settings": CampaignSettings(time_gate_preset="5d")}
        )
        assert changed.phase_expires_at == T0 + timedelta(hours=24)

    def test_status(self) -> None:
        opened = transition_phase(GM, _campaign("2d"), "pc_phase", now=T0)
        status = phase_status(opened, T0 + timedelta(days=3))
        assert status == {
            "current_phase": "pc_phase",
            "expires_at": T0 + timedelta(hours=48),
            "is_expired": True,
            "time_gate_preset": "2d",
        }
