"""
Visualization module for cosmogen.
"""

from .system_plot import plot_system_overview, plot_generation_stats

__all__ = [
    'plot_system_overview',
    'plot_generation_stats',
]
