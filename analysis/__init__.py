"""Report rendering, charts and PDF export."""

from .reports import (
    generate_race_report_text,
    generate_post_race_text,
    report_to_frames,
    summarize_reports,
)
from .visualizations import (
    plot_segment_paces,
    plot_projections,
    plot_hydration_timeline,
    export_report_pdf,
)

__all__ = [
    'generate_race_report_text',
    'generate_post_race_text',
    'report_to_frames',
    'summarize_reports',
    'plot_segment_paces',
    'plot_projections',
    'plot_hydration_timeline',
    'export_report_pdf',
]
