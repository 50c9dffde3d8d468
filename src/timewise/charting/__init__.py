"""Charting layer: chart resources bound to named surfaces.

``ChartRegistry`` owns the resources; drawing goes through a narrow
``RenderBackend`` protocol so the registry can be exercised headless.
``MatplotlibChartBackend`` is the real backend, drawing on host figures
(embedded in Qt through ``FigureCanvasQTAgg``).
"""

from .backends import MatplotlibChartBackend, MatplotlibHandle  # noqa: F401
from .options import default_options, merge_options  # noqa: F401
from .palette import PALETTE, assign_colors, color_for_index  # noqa: F401
from .registry import ChartRegistry  # noqa: F401
from .types import (  # noqa: F401
    ChartData,
    ChartKind,
    ChartResource,
    RenderBackend,
    Series,
    SeriesPatch,
)
from .validation import validate_patch, validate_series  # noqa: F401
