"""Post submission and GM witness management.

Witness capture at submission:
  hidden post   → only the author's character (nothing for narrator posts)
  regular post  → every character present in the scene

After submission a witness set only grows. The GM can reveal a hidden post
(unhide, defaulting to everyone present), add witnesses while keeping the
post hidden, or, as an explicit edit, replace the set outright.

Every function returns a new Post; callers persist it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from vanguard.errors import (
    CharacterNotInSceneError,
    CharacterNotOwnedError,
    HiddenPostsDisabledError,
    NotGMError,
    PostNotHiddenError,
    PostTooLongError,
    SceneArchivedError,
    WitnessNotInSceneError,
)
from vanguard.models import Campaign, Character, Post, Scene, Viewer
from vanguard.phase import check_can_post
from vanguard.visibility import can_submit_hidden_post

logger = logging.getLogger(__name__)


def _require_gm(viewer: Viewer, campaign: Campaign) -> None:
    if not viewer.is_gm(campaign):
        raise NotGMError("only the GM can perform this action")


def _scene_witnesses(scene: Scene, witnesses: Iterable[str]) -> set[str]:
    present = set(scene.character_ids)
    result = set(witnesses)
    missing = sorted(result - present)
    if missing:
        raise WitnessNotInSceneError(f"witness not in scene: {', '.join(missing)}")
    return result


def submit_post(
    viewer: Viewer,
    campaign: Campaign,
    scene: Scene,
    *,
    character: Character | None,
    text: str,
    ooc_text: str | None = None,
    hidden: bool = False,
    now: datetime | None = None,
) -> Post:
    """Build a new post for `scene` with its initial witness set.

    `character` is None for narrator posts, which only the GM may write.
    Players may only post during an unexpired PC phase.
    """
    is_gm = viewer.is_gm(campaign)
    if scene.archived:
        raise SceneArchivedError(f"scene {scene.id} is archived")
    check_can_post(viewer, campaign, now)

    if character is None:
        if not is_gm:
            raise NotGMError("narrator posts require the GM")
    else:
        if character.id not in scene.character_ids:
            raise CharacterNotInSceneError(
                f"character {character.id} is not in scene {scene.id}"
            )
        if not is_gm and (character.type == "npc" or character.user_id != viewer.user_id):
            raise CharacterNotOwnedError(f"character {character.id} is not yours")

    limit = campaign.settings.character_limit
    if len(text) > limit:
        raise PostTooLongError(f"post text is {len(text)} characters; the limit is {limit}")
    if hidden and not can_submit_hidden_post(campaign):
        raise HiddenPostsDisabledError("hidden posts are disabled for this campaign")

    if hidden:
        witnesses = {character.id} if character is not None else set()
    else:
        witnesses = set(scene.character_ids)

    post = Post(
        scene_id=scene.id,
        author_user_id=viewer.user_id,
        character_id=character.id if character is not None else None,
        text=text,
        ooc_text=ooc_text,
        hidden=hidden,
        witnesses=witnesses,
    )
    logger.info(
        "post submitted scene=%s post=%s hidden=%s witnesses=%d",
        scene.id, post.id, hidden, len(witnesses),
    )
    return post


def reveal_post(
    viewer: Viewer,
    campaign: Campaign,
    scene: Scene,
    post: Post,
    witnesses: Iterable[str] | None = None,
) -> Post:
    """Unhide `post`. Without explicit witnesses, everyone in the scene sees it."""
    _require_gm(viewer, campaign)
    if not post.hidden:
        raise PostNotHiddenError(f"post {post.id} is not hidden")
    added = _scene_witnesses(scene, witnesses) if witnesses else set(scene.character_ids)
    logger.info("post revealed post=%s added=%d", post.id, len(added - post.witnesses))
    return post.model_copy(update={"hidden": False, "witnesses": post.witnesses | added})


def add_witnesses(
    viewer: Viewer,
    campaign: Campaign,
    scene: Scene,
    post: Post,
    witnesses: Iterable[str],
) -> Post:
    """Grow the witness set of `post`; a hidden post stays hidden."""
    _require_gm(viewer, campaign)
    added = _scene_witnesses(scene, witnesses)
    logger.info("witnesses added post=%s added=%d", post.id, len(added - post.witnesses))
    return post.model_copy(update={"witnesses": post.witnesses | added})


def set_witnesses(
    viewer: Viewer,
    campaign: Campaign,
    scene: Scene,
    post: Post,
    witnesses: Iterable[str],
) -> Post:
    """Replace the witness set of `post` with exactly `witnesses`."""
    _require_gm(viewer, campaign)
    replaced = _scene_witnesses(scene, witnesses)
    logger.info(
        "witnesses replaced post=%s before=%d after=%d",
        post.id, len(post.witnesses), len(replaced),
    )
    return post.model_copy(update={"witnesses": replaced})
