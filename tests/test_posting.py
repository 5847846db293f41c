"""Tests for vanguard.posting: submission rules and GM witness management."""

from datetime import datetime, timedelta, timezone

import pytest

from vanguard.errors import (
    CharacterNotInSceneError,
    CharacterNotOwnedError,
    HiddenPostsDisabledError,
    NotGMError,
    NotInPCPhaseError,
    PostNotHiddenError,
    PostTooLongError,
    SceneArchivedError,
    TimeGateExpiredError,
    WitnessNotInSceneError,
)
from vanguard.models import Campaign, CampaignSettings, Character, Scene, Viewer
from vanguard.posting import add_witnesses, reveal_post, set_witnesses, submit_post

GM = Viewer(user_id="gm")
ALICE = Viewer(user_id="alice", character_ids=frozenset({"mira"}))
BOB = Viewer(user_id="bob", character_ids=frozenset({"tor"}))

MIRA = Character(id="mira", campaign_id="camp", name="Mira", user_id="alice")
TOR = Character(id="tor", campaign_id="camp", name="Tor", user_id="bob")
GUARD = Character(id="guard", campaign_id="camp", name="Gate Guard", type="npc")


@pytest.fixture
def campaign() -> Campaign:
    return Campaign(id="camp", title="Ironhold", gm_user_id="gm",
                    current_phase="pc_phase")


@pytest.fixture
def scene() -> Scene:
    return Scene(id="gate", campaign_id="camp", title="The Gate",
                 character_ids=["mira", "tor", "guard"])


# ── submit_post ───────────────────────────────────────────


def test_regular_post_witnessed_by_everyone_present(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="I knock.")
    assert post.witnesses == {"mira", "tor", "guard"}
    assert post.hidden is False
    assert post.author_user_id == "alice"
    assert post.character_id == "mira"
    assert post.scene_id == "gate"


def test_hidden_post_witnessed_by_author_only(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA,
                       text="I pocket the key.", hidden=True)
    assert post.hidden is True
    assert post.witnesses == {"mira"}


def test_hidden_narrator_post_has_no_witnesses(campaign, scene):
    post = submit_post(GM, campaign, scene, character=None,
                       text="Something stirs below.", hidden=True)
    assert post.witnesses == set()
    assert post.character_id is None


def test_narrator_post_requires_gm(campaign, scene):
    with pytest.raises(NotGMError):
        submit_post(ALICE, campaign, scene, character=None, text="The sky darkens.")


def test_ooc_text_kept(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="...",
                       ooc_text="back tomorrow")
    assert post.ooc_text == "back tomorrow"


def test_cannot_post_as_someone_elses_character(campaign, scene):
    with pytest.raises(CharacterNotOwnedError):
        submit_post(ALICE, campaign, scene, character=TOR, text="Hi.")


def test_npc_is_gm_only(campaign, scene):
    with pytest.raises(CharacterNotOwnedError):
        submit_post(ALICE, campaign, scene, character=GUARD, text="Halt!")
    post = submit_post(GM, campaign, scene, character=GUARD, text="Halt!")
    assert post.author_user_id == "gm"


def test_gm_may_post_as_player_character(campaign, scene):
    post = submit_post(GM, campaign, scene, character=MIRA, text="(moved for Mira)")
    assert post.character_id == "mira"


def test_character_must_be_in_scene(campaign, scene):
    scene.character_ids.remove("tor")
    with pytest.raises(CharacterNotInSceneError):
        submit_post(BOB, campaign, scene, character=TOR, text="I arrive.")


def test_archived_scene_rejects_posts(campaign, scene):
    scene.archived = True
    with pytest.raises(SceneArchivedError):
        submit_post(ALICE, campaign, scene, character=MIRA, text="Hello?")


def test_hidden_post_rejected_when_disabled(scene):
    campaign = Campaign(id="camp", title="Open Table", gm_user_id="gm",
                        current_phase="pc_phase",
                        settings=CampaignSettings(hidden_posts=False))
    with pytest.raises(HiddenPostsDisabledError):
        submit_post(ALICE, campaign, scene, character=MIRA, text="psst", hidden=True)
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="hello")
    assert post.hidden is False


# ── reveal_post ───────────────────────────────────────────


def test_reveal_defaults_to_scene_characters(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    revealed = reveal_post(GM, campaign, scene, post)
    assert revealed.hidden is False
    assert revealed.witnesses == {"mira", "tor", "guard"}
    assert post.hidden is True


def test_reveal_with_custom_witnesses_keeps_existing(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    revealed = reveal_post(GM, campaign, scene, post, ["tor"])
    assert revealed.witnesses == {"mira", "tor"}


def test_reveal_requires_gm(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    with pytest.raises(NotGMError):
        reveal_post(ALICE, campaign, scene, post)


def test_reveal_rejects_visible_post(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x")
    with pytest.raises(PostNotHiddenError):
        reveal_post(GM, campaign, scene, post)


def test_reveal_rejects_witness_outside_scene(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    with pytest.raises(WitnessNotInSceneError):
        reveal_post(GM, campaign, scene, post, ["stranger"])


# ── add_witnesses / set_witnesses ─────────────────────────


def test_add_witnesses_grows_and_keeps_hidden(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    updated = add_witnesses(GM, campaign, scene, post, ["tor"])
    assert updated.witnesses == {"mira", "tor"}
    assert updated.hidden is True


def test_add_witnesses_idempotent(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    once = add_witnesses(GM, campaign, scene, post, ["tor"])
    twice = add_witnesses(GM, campaign, scene, once, ["tor"])
    assert twice.witnesses == once.witnesses


def test_add_witnesses_requires_gm(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x", hidden=True)
    with pytest.raises(NotGMError):
        add_witnesses(BOB, campaign, scene, post, ["tor"])


def test_add_witnesses_validates_scene_membership(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x")
    with pytest.raises(WitnessNotInSceneError, match="ghost"):
        add_witnesses(GM, campaign, scene, post, ["tor", "ghost"])


def test_set_witnesses_replaces(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x")
    updated = set_witnesses(GM, campaign, scene, post, ["mira"])
    assert updated.witnesses == {"mira"}
    assert updated.hidden is False


def test_set_witnesses_requires_gm(campaign, scene):
    post = submit_post(ALICE, campaign, scene, character=MIRA, text="x")
    with pytest.raises(NotGMError):
        set_witnesses(ALICE, campaign, scene, post, [])


# ── phase gate and length limit ───────────────────────────


def test_players_cannot_post_in_gm_phase(campaign, scene):
    closed = campaign.model_copy(update={"current_phase": "gm_phase"})
    with pytest.raises(NotInPCPhaseError):
        submit_post(ALICE, closed, scene, character=MIRA, text="Anyone there?")
    post = submit_post(GM, closed, scene, character=None, text="Night falls.")
    assert post.author_user_id == "gm"


def test_expired_time_gate_blocks_players_only(campaign, scene):
    deadline = datetime(2025, 3, 1, tzinfo=timezone.utc)
    gated = campaign.model_copy(update={"phase_expires_at": deadline})
    before, after = deadline - timedelta(minutes=1), deadline + timedelta(minutes=1)

    assert submit_post(ALICE, gated, scene, character=MIRA, text="Just in time.", now=before)
    with pytest.raises(TimeGateExpiredError):
        submit_post(ALICE, gated, scene, character=MIRA, text="Too late.", now=after)
    assert submit_post(GM, gated, scene, character=GUARD, text="Halt!", now=after)


def test_text_over_character_limit_rejected(scene):
    campaign = Campaign(id="camp", title="Terse", gm_user_id="gm", current_phase="pc_phase",
                        settings=CampaignSettings(character_limit=1000))
    submit_post(ALICE, campaign, scene, character=MIRA, text="x" * 1000)
    with pytest.raises(PostTooLongError):
        submit_post(ALICE, campaign, scene, character=MIRA, text="x" * 1001)
