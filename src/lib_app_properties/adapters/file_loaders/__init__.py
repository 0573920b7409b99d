"""Properties file parsing adapter."""
