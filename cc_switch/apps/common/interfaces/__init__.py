from cc_switch.apps.common.interfaces.projector import IAppProjector
from cc_switch.apps.common.interfaces.repositories import (
    IAppConfigRepository,
    IPromptRepository,
)

__all__ = [
    "IAppConfigRepository",
    "IAppProjector",
    "IPromptRepository",
]
