"""
Visualization module for the sparse Life simulator.

Provides visualization tools:
- World rendering (text, dense array, image)
- Population time series
"""

from .world_viz import (
    to_array,
    render_text,
    common_rect,
    plot_world,
)
from .timeseries_viz import plot_population

__all__ = [
    # World
    'to_array',
    'render_text',
    'common_rect',
    'plot_world',
    # Time series
    'plot_population',
]
