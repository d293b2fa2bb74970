"""Coverage figures. Each function saves one PNG and closes the figure."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from downcast.config import FIG_DPI


def plot_coverage_heatmap(table: pd.DataFrame, save_path: Path, title: str = "Successful sampling dates") -> None:
    """Annotated heatmap: sites (rows) x years (columns)."""
    if table.empty:
        return

    fig, ax = plt.subplots(figsize=(max(5, len(table.columns) * 0.9), max(3, len(table) * 0.35)))
    sns.heatmap(table, annot=True, fmt="d", cmap="Blues", linewidths=0.5,
                ax=ax, cbar_kws={"label": "Sampling dates"})
    ax.set_title(title)
    ax.set_xlabel("Year")
    ax.set_ylabel("Site")

    fig.tight_layout()
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=FIG_DPI)
    plt.close(fig)
