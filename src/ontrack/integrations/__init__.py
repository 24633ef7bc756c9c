"""Time tracking service integrations."""

from ontrack.integrations.toggl import TogglClient, TogglError

__all__ = [
    "TogglClient",
    "TogglError",
]
