"""Session state containers."""

from .session_state import NavigationState, SessionContext

__all__ = ["NavigationState", "SessionContext"]
