"""Batch rendering and render settings."""
