"""Campaign settings: defaults and partial updates.

update_settings() applies a partial update on top of the current settings:
only the keys present in `fields` change, everything else is kept. The merged
result is validated as a whole, so an invalid value leaves the campaign's
stored settings untouched.
"""

import logging
from typing import Any

from pydantic import ValidationError

from vanguard.errors import InvalidSettingsError
from vanguard.models import CampaignSettings

logger = logging.getLogger(__name__)


def default_settings() -> CampaignSettings:
    return CampaignSettings()


def update_settings(current: CampaignSettings, fields: dict[str, Any]) -> CampaignSettings:
    """Merge `fields` into `current` and return the validated result."""
    merged = current.model_dump()
    merged.update(fields)
    try:
        settings = CampaignSettings.model_validate(merged)
    except ValidationError as e:
        raise InvalidSettingsError(str(e)) from e
    logger.debug("settings updated keys=%s", sorted(fields))
    return settings
