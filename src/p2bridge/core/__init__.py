"""Core data model and resolution engine."""
