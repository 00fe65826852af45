"""Persistence: whole-collection JSON files under DATA_ROOT."""
