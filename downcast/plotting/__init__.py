"""Depth-time profile plots."""
