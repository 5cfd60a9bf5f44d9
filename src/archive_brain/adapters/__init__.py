"""Adapters for storage, the AI service and rendering."""
