"""FastAPI API endpoints under /api.

Endpoint groups: health + settings, campaigns, phase, characters, scenes,
posts. Each campaign's child resources (characters, scenes, posts) are nested under
/api/campaigns/{campaign_id}/. Every read of scenes or posts is filtered
through vanguard.visibility for the calling user.
"""

from fastapi import APIRouter

from .campaigns import router as campaigns_router
from .characters import router as characters_router
from .phase import router as phase_router
from .posts import router as posts_router
from .scenes import router as scenes_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(campaigns_router)
router.include_router(phase_router)
router.include_router(characters_router)
router.include_router(scenes_router)
router.include_router(posts_router)
