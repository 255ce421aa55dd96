"""Browser controllers, notifications and session state."""
