"""Coverage summaries and depth-time plots for sonde downcast profiles."""

__version__ = "0.1.0"
