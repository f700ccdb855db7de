from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    create_registered_projector,
    format_schema_error,
    list_registered_projectors,
)
from cc_switch.apps.common.interfaces import IAppProjector

__all__ = [
    "IAppProjector",
    "RegisteredAppProjector",
    "create_registered_projector",
    "format_schema_error",
    "list_registered_projectors",
]
