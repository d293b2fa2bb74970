"""Data models for observations, measured variables, and plot settings."""

from downcast.models.core import (
    MeasuredVariable,
    Observation,
    ProfileRenderConfig,
    as_frame,
    observations_to_frame,
)

__all__ = [
    "MeasuredVariable",
    "Observation",
    "ProfileRenderConfig",
    "as_frame",
    "observations_to_frame",
]
