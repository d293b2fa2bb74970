"""Sampling coverage analysis."""
