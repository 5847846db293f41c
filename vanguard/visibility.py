"""Visibility resolution: which scenes, posts and OOC text a viewer may see.

Inputs are already-fetched records; nothing here reads storage, logs, or
remembers anything between calls. Same inputs always give the same answer.

Scene rules:
  GM                    → every non-archived scene
  fog of war off        → every non-archived scene
  fog on + selection    → scenes where the selected character witnessed a post
  fog on, no selection  → union over every character the viewer controls
  archived              → never returned

Post rules:
  GM                    → always visible
  not hidden            → visible iff the containing scene is visible
  hidden                → author and GM only, until the GM adds witnesses;
                          an added witness then follows the not-hidden rule
  archived scene        → nothing, not even the author's own hidden posts

A hidden post's author still needs the scene to be open for the character
they are viewing as; the post's own witnesses count towards that.

OOC rules:
  "all"      → visible wherever the post is visible
  "gm_only"  → GM and the post's author only

Results keep input order. Callers sort (e.g. newest first) after filtering.
"""

from __future__ import annotations

from typing import Iterable

from vanguard.models import Campaign, Post, Scene, Viewer


def _scene_open(
    viewer: Viewer,
    campaign: Campaign,
    scene: Scene,
    extra_witnesses: Iterable[str] = (),
) -> bool:
    if scene.archived:
        return False
    if viewer.is_gm(campaign) or not campaign.settings.fog_of_war:
        return True
    acting = viewer.acting_characters()
    if not acting:
        return False
    if not acting.isdisjoint(extra_witnesses):
        return True
    return any(not acting.isdisjoint(p.witnesses) for p in scene.posts)


def _post_visible(viewer: Viewer, post: Post, scene_open: bool) -> bool:
    if not scene_open:
        return False
    if not post.hidden or post.author_user_id == viewer.user_id:
        return True
    # The author's own character is always on a hidden post; only
    # witnesses the GM added on top of it unlock the post for others.
    revealed = post.witnesses - {post.character_id}
    return not viewer.acting_characters().isdisjoint(revealed)


def can_see_scene(viewer: Viewer, campaign: Campaign, scene: Scene) -> bool:
    """Single-scene form of `visible_scenes`."""
    return _scene_open(viewer, campaign, scene)


def visible_scenes(
    viewer: Viewer, campaign: Campaign, scenes: Iterable[Scene]
) -> list[Scene]:
    """Return the scenes `viewer` may see, in input order."""
    return [s for s in scenes if _scene_open(viewer, campaign, s)]


def visible_post(viewer: Viewer, campaign: Campaign, scene: Scene, post: Post) -> bool:
    """Decide whether `viewer` may see `post`, which belongs to `scene`."""
    if viewer.is_gm(campaign):
        return True
    # A post counts towards its own scene even if `scene.posts` predates it.
    return _post_visible(
        viewer, post, _scene_open(viewer, campaign, scene, post.witnesses)
    )


def visible_posts(viewer: Viewer, campaign: Campaign, scene: Scene) -> list[Post]:
    """Filter a scene's posts down to the ones `viewer` may see, keeping order."""
    if viewer.is_gm(campaign):
        return list(scene.posts)
    scene_open = _scene_open(viewer, campaign, scene)
    return [p for p in scene.posts if _post_visible(viewer, p, scene_open)]


def can_submit_hidden_post(campaign: Campaign) -> bool:
    """Whether the composer should offer the hidden-post option.

    Offering the option enforces nothing; `visible_post` does.
    """
    return campaign.settings.hidden_posts


def resolve_ooc_visibility(
    viewer: Viewer, campaign: Campaign, scene: Scene, post: Post
) -> bool:
    """Decide whether `viewer` may see the out-of-character part of `post`."""
    if not visible_post(viewer, campaign, scene, post):
        return False
    if campaign.settings.ooc_visibility == "all":
        return True
    return viewer.is_gm(campaign) or post.author_user_id == viewer.user_id


def redact_post(viewer: Viewer, campaign: Campaign, scene: Scene, post: Post) -> Post:
    """Return `post` with its OOC text removed if `viewer` may not read it."""
    if post.ooc_text is None or resolve_ooc_visibility(viewer, campaign, scene, post):
        return post
    return post.model_copy(update={"ooc_text": None})
