"""Exceptions raised by campaign, posting and witness operations.

The visibility resolver never raises; these cover the write paths around it.
Missing records are not errors at this level: storage returns None and the
HTTP layer turns that into a 404.
"""


class VanguardError(RuntimeError):
    """Base class for rule violations on the write paths."""


class NotGMError(VanguardError):
    """Raised when a GM-only action is attempted by someone else."""


class CharacterNotOwnedError(VanguardError):
    """Raised when a player acts as a character they do not control."""


class CharacterNotInSceneError(VanguardError):
    """Raised when a post is written as a character absent from the scene."""


class WitnessNotInSceneError(VanguardError):
    """Raised when a witness id does not name a character present in the scene."""


class HiddenPostsDisabledError(VanguardError):
    """Raised when a hidden post is submitted to a campaign that disallows them."""


class PostNotHiddenError(VanguardError):
    """Raised when revealing a post that is already visible."""


class SceneArchivedError(VanguardError):
    """Raised when writing to an archived scene."""


class InvalidSettingsError(VanguardError):
    """Raised when a campaign settings update fails validation."""


class PostTooLongError(VanguardError):
    """Raised when post text exceeds the campaign's character limit."""


class NotInPCPhaseError(VanguardError):
    """Raised when a player posts while the campaign is in the GM phase."""


class TimeGateExpiredError(VanguardError):
    """Raised when a player posts after the PC phase's time gate ran out."""


class AlreadyInPhaseError(VanguardError):
    """Raised when transitioning a campaign to the phase it is already in."""
