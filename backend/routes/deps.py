"""Shared request plumbing: storage access, caller identity, record lookup.

Identity comes from the X-User-Id header, which the identity provider in
front of this service sets after authenticating the request. Nothing here
checks credentials.
"""

from fastapi import Header, HTTPException, Request

from vanguard import errors
from vanguard.models import Campaign, Scene, Viewer
from vanguard.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def current_user(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(401, "Missing X-User-Id header")
    return x_user_id


def load_campaign(storage: Storage, campaign_id: str) -> Campaign:
    campaign = storage.get_campaign(campaign_id)
    if not campaign:
        raise HTTPException(404, "Campaign not found")
    return campaign


def load_scene(storage: Storage, campaign_id: str, scene_id: str) -> Scene:
    scene = storage.get_scene(campaign_id, scene_id)
    if not scene:
        raise HTTPException(404, "Scene not found")
    return scene


def member_viewer(
    storage: Storage,
    campaign: Campaign,
    user_id: str,
    character_id: str | None = None,
) -> Viewer:
    """Build the Viewer for a campaign member, optionally acting as a character.

    Non-members get 403. A player may only select a character they control.
    The GM may name any character of the campaign but still sees everything.
    """
    characters = storage.get_characters(campaign.id)
    viewer = Viewer.for_campaign(user_id, characters, character_id)
    is_gm = viewer.is_gm(campaign)
    if not is_gm and not viewer.character_ids:
        raise HTTPException(403, "Not a member of this campaign")
    if character_id is not None:
        if is_gm:
            if not any(c.id == character_id for c in characters):
                raise HTTPException(404, "Character not found")
        elif character_id not in viewer.character_ids:
            raise HTTPException(403, "Character is not yours")
    return viewer


def require_gm(viewer_id: str, campaign: Campaign) -> None:
    if campaign.gm_user_id != viewer_id:
        raise HTTPException(403, "Only the GM can perform this action")


_STATUS = {
    errors.NotGMError: 403,
    errors.CharacterNotOwnedError: 403,
    errors.CharacterNotInSceneError: 400,
    errors.WitnessNotInSceneError: 400,
    errors.InvalidSettingsError: 400,
    errors.PostTooLongError: 400,
    errors.NotInPCPhaseError: 400,
    errors.AlreadyInPhaseError: 400,
    errors.HiddenPostsDisabledError: 409,
    errors.PostNotHiddenError: 409,
    errors.SceneArchivedError: 409,
    errors.TimeGateExpiredError: 409,
}


def http_error(e: errors.VanguardError) -> HTTPException:
    """Translate a rule violation into the matching HTTP error."""
    return HTTPException(_STATUS.get(type(e), 400), str(e))
