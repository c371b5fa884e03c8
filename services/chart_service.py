"""
services/chart_service.py
--------------------------
Generates chart images for the customer reports.
Uses matplotlib to draw bar charts and returns them as BytesIO buffers.
"""

import io
from typing import Optional

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend, no display needed
import matplotlib.pyplot as plt

from repositories.customer_repo import CustomerRepository
from utils.logger import get_logger

logger = get_logger(__name__)

plt.rcParams["figure.facecolor"] = "#1a1a2e"
plt.rcParams["text.color"] = "#e0e0e0"
plt.rcParams["axes.facecolor"] = "#1a1a2e"

_BAR_COLOR = "#4ECDC4"
_HIGHLIGHT_COLOR = "#FF6B6B"


class ChartService:
    """Generates visual charts for customer data."""

    def __init__(self, repo: Optional[CustomerRepository] = None):
        self.repo = repo or CustomerRepository()

    def country_bar(self) -> Optional[io.BytesIO]:
        """
        Bar chart of customer counts per country, largest first.

        Returns:
            BytesIO buffer with PNG image, or None if there are no customers.
        """
        tallies = self.repo.count_by_country()
        if not tallies:
            return None

        labels = [t.country for t in tallies]
        values = [t.customer_count for t in tallies]
        buf = self._bar_chart(
            labels, values,
            title=f"Customers by Country\nTotal: {sum(values)}",
            ylabel="Customers",
            value_format="{:.0f}",
        )
        logger.info(f"Generated country chart with {len(labels)} bars")
        return buf

    def top_spenders_bar(self, limit: int = 10) -> Optional[io.BytesIO]:
        """
        Bar chart of the ``limit`` biggest spenders.

        Returns:
            BytesIO buffer with PNG image, or None if there are no invoices.
        """
        rankings = self.repo.get_top_spenders(limit)
        if not rankings:
            return None

        labels = [r.customer_name for r in rankings]
        values = [float(r.total_spent) for r in rankings]
        buf = self._bar_chart(
            labels, values,
            title=f"Top {len(rankings)} Spenders",
            ylabel="Total spent",
            value_format="{:.2f}",
        )
        logger.info(f"Generated top spenders chart with {len(labels)} bars")
        return buf

    @staticmethod
    def _bar_chart(labels: list[str], values: list[float], title: str,
                   ylabel: str, value_format: str) -> io.BytesIO:
        fig, ax = plt.subplots(figsize=(max(8, len(labels) * 0.6), 5))

        top = max(values)
        bars = ax.bar(
            range(len(labels)), values,
            color=[_HIGHLIGHT_COLOR if v == top else _BAR_COLOR for v in values],
            edgecolor="#1a1a2e",
            linewidth=1.5,
            width=0.6,
            zorder=3,
        )

        for bar, value in zip(bars, values):
            ax.text(
                bar.get_x() + bar.get_width() / 2, bar.get_height(),
                value_format.format(value),
                ha="center", va="bottom",
                color="#e0e0e0", fontsize=9, fontweight="bold",
            )

        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=9, color="#e0e0e0")
        ax.set_ylabel(ylabel, fontsize=11, color="#e0e0e0")
        ax.set_title(title, fontsize=13, fontweight="bold", pad=15)

        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.spines["left"].set_color("#444")
        ax.spines["bottom"].set_color("#444")
        ax.tick_params(colors="#e0e0e0")
        ax.grid(axis="y", alpha=0.2, color="#888")
        ax.set_axisbelow(True)

        plt.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                    facecolor=fig.get_facecolor())
        buf.seek(0)
        plt.close(fig)
        return buf
