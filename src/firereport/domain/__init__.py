"""Domain layer for firereport: entities, errors and report services."""
