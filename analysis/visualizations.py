"""
Visualization and PDF export for race reports.

Provides charts for:
- Segment pacing strategy
- Performance projections by distance
- Hydration timeline

and a multi-page PDF export combining the text report with the charts.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import numpy as np

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter

from core.report import RaceReport
from core.segments import Effort
from core.timecodec import parse_time_to_seconds, format_seconds, PACE_MODE
from data.records import RaceInputs
from .reports import generate_race_report_text


EFFORT_COLORS = {
    Effort.WARM_UP: 'tab:blue',
    Effort.CONTROLLED: 'tab:green',
    Effort.INTENSE: 'tab:red',
}

LINES_PER_PAGE = 60


def _pace_tick(seconds: float, _pos=None) -> str:
    return format_seconds(seconds, PACE_MODE)


def plot_segment_paces(
    report: RaceReport,
    title: str = "Pacing Strategy by Segment",
    figsize: Tuple[int, int] = (10, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Bar chart of target pace per segment, coloured by effort.

    Args:
        report: Race report
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    segments = report.segment_strategy
    starts = np.array([s.start_km for s in segments])
    widths = np.array([s.end_km - s.start_km for s in segments])
    paces = np.array([parse_time_to_seconds(s.pace) for s in segments])
    colors = [EFFORT_COLORS[s.effort] for s in segments]

    ax.bar(starts, paces, width=widths, align='edge', color=colors,
           edgecolor='white', alpha=0.8)

    base = parse_time_to_seconds(report.metadata.base_pace)
    if base > 0:
        ax.axhline(base, color='black', linestyle='--', linewidth=1,
                   label=f"Base pace {report.metadata.base_pace}/km")
        ax.legend(loc='upper right')

    if len(paces) and paces.max() > 0:
        ax.set_ylim(paces.min() * 0.9, paces.max() * 1.05)
    ax.yaxis.set_major_formatter(FuncFormatter(_pace_tick))
    ax.set_xlabel('Distance (km)')
    ax.set_ylabel('Pace (min/km)')
    ax.set_title(title)
    ax.grid(True, axis='y', alpha=0.3)

    return fig


def plot_projections(
    report: RaceReport,
    title: str = "Projected Finish Times",
    figsize: Tuple[int, int] = (10, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Projected finish time against distance (Riegel curve).

    Args:
        report: Race report
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    comparison = report.performance_comparison
    if not comparison.has_data:
        ax.text(0.5, 0.5, 'No personal bests provided', ha='center', va='center',
                transform=ax.transAxes)
        ax.set_title(title)
        return fig

    projections = sorted(comparison.projections, key=lambda p: p.distance_km)
    distances = np.array([p.distance_km for p in projections])
    minutes = np.array([p.projected_seconds for p in projections]) / 60

    ax.plot(distances, minutes, 'o-', color='tab:blue')
    for p, y in zip(projections, minutes):
        ax.annotate(f"{p.label}\n{p.projected_time}", (p.distance_km, y),
                    textcoords='offset points', xytext=(0, 8), ha='center', fontsize=8)

    base = comparison.base_record
    ax.scatter([base.distance_km], [base.seconds / 60], s=120, color='tab:orange',
               zorder=3, label=f"Reference {base.label} ({base.time})")

    ax.set_xlabel('Distance (km)')
    ax.set_ylabel('Finish time (minutes)')
    ax.set_title(title)
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)

    return fig


def plot_hydration_timeline(
    report: RaceReport,
    title: str = "Hydration Checkpoints",
    figsize: Tuple[int, int] = (10, 3),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Checkpoints along the course, sized by fluid volume.

    Args:
        report: Race report
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    distance = report.metadata.distance_km
    ax.hlines(0, 0, distance, color='grey', linewidth=2)

    for checkpoint in report.hydration_plan:
        color = 'tab:orange' if checkpoint.nutrition else 'tab:blue'
        ax.scatter([checkpoint.km], [0], s=checkpoint.fluid_ml, color=color, zorder=3)
        ax.annotate(checkpoint.time, (checkpoint.km, 0), textcoords='offset points',
                    xytext=(0, 12), ha='center', fontsize=8)

    ax.set_xlim(0, distance * 1.02)
    ax.set_yticks([])
    ax.set_xlabel('Distance (km)')
    ax.set_title(title)

    return fig


def export_report_pdf(
    report: RaceReport,
    path: Union[str, Path],
    inputs: Optional[RaceInputs] = None
) -> Path:
    """
    Export the report as a multi-page PDF.

    Text pages come first, followed by one page of charts.

    Args:
        report: Race report
        path: Output PDF path
        inputs: Inputs the report was generated from

    Returns:
        Path of the written PDF
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = generate_race_report_text(report, inputs).strip('\n').split('\n')

    with PdfPages(path) as pdf:
        for start in range(0, len(lines), LINES_PER_PAGE):
            fig = plt.figure(figsize=(8.27, 11.69))  # A4
            fig.text(0.05, 0.97, '\n'.join(lines[start:start + LINES_PER_PAGE]),
                     family='monospace', fontsize=7, va='top')
            pdf.savefig(fig)
            plt.close(fig)

        fig, axes = plt.subplots(3, 1, figsize=(8.27, 11.69),
                                 gridspec_kw={'height_ratios': [3, 3, 1.5]})
        plot_segment_paces(report, ax=axes[0])
        plot_projections(report, ax=axes[1])
        plot_hydration_timeline(report, ax=axes[2])
        plt.tight_layout()
        pdf.savefig(fig)
        plt.close(fig)

    return path
