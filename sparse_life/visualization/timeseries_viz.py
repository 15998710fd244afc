"""
Time series visualization functions.
"""

from __future__ import annotations
from typing import Any, Optional
import numpy as np

from ..core import SequenceResult

_plt = None
def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


def plot_population(
    result: SequenceResult,
    ax: Optional[Any] = None,
    title: str = "",
    color: str = "black",
    **kwargs,
) -> Any:
    """
    Plot population against generation for the retained Worlds of a run.

    Args:
        result: Run to plot
        ax: Matplotlib axis
        title: Plot title (stop reason if empty)
        color: Line color

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    generations = result.generation_indices()
    populations = result.populations()
    ax.plot(generations, populations, color=color, marker='.', **kwargs)
    ax.set_xlabel('Generation')
    ax.set_ylabel('Population')

    if len(populations):
        ax.axhline(float(np.mean(populations)), color='gray', linestyle='--',
                   linewidth=0.8, label='mean')

    ax.set_title(title or f"Population ({result.stop_reason.value})")
    return ax
