"""Client-side dashboard: API client, state, actions and view models."""

from channeldesk.dashboard.client import ApiError, DashboardClient
from channeldesk.dashboard.controller import DashboardController
from channeldesk.dashboard.state import DashboardState, Notification

__all__ = [
    "ApiError",
    "DashboardClient",
    "DashboardController",
    "DashboardState",
    "Notification",
]
