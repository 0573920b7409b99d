"""Domain layer: configuration, path specs, the merged store, and errors."""
