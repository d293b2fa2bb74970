"""Observation table loading."""
