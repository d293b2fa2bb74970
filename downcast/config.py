"""Column names, constants, and plotting defaults."""

from __future__ import annotations

# Canonical observation columns
SITE_COL = "site_id"
DATE_COL = "sample_date"
TIME_COL = "sample_time"
DEPTH_COL = "depth"
YEAR_COL = "year"
MONTH_COL = "month"
HOUR_COL = "hour"
TURBIDITY_FLAG_COL = "turbidity_flag"
TURBIDITY_CENSORED_COL = "turbidity_censored"

# A sampling event needs more than one valid depth reading
MIN_DEPTH_READINGS = 2

# Flag values marking a left-censored turbidity reading
CENSORED_FLAGS = ("<",)

# Plotting
FIG_DPI = 120
PROFILE_FIGSIZE = (8, 4.5)
DEFAULT_PALETTE = "viridis"
DEFAULT_MISSING_COLOR = "grey"
DEFAULT_POINT_SIZE = 18.0
