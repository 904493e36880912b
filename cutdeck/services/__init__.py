"""Persistence, autosave, serialization, notification and library services."""
