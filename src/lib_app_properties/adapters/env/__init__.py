"""Environment and system property providers."""
