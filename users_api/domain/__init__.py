"""Domain layer - entities, errors and protocols with no framework dependencies."""
