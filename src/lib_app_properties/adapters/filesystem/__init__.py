"""Working-directory filesystem adapter."""
