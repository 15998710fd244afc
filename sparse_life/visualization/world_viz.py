"""
World visualization functions.

Renders the bounding-box window of a World as text, as a dense array or
as a matplotlib image. The dense forms exist for display only; the
simulation itself never uses a bounded grid.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, Tuple
import numpy as np

from ..core import Rect, World, bounding_box

# Lazy import for matplotlib
_plt = None

def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


def to_array(world: World, rect: Optional[Rect] = None) -> Tuple[np.ndarray, Rect]:
    """
    Dense 0/1 array of the cells inside rect.

    Args:
        world: Non-empty World (or any World when rect is given)
        rect: Window to render (bounding box of world if None)

    Returns:
        (array of shape (height, width), window rect); row i is y = min.y + i
    """
    if rect is None:
        rect = bounding_box(world)
    grid = np.zeros((rect.height, rect.width), dtype=np.uint8)
    x0, y0 = rect.min_corner.x, rect.min_corner.y
    for cell in world.cells:
        if rect.contains(cell):
            grid[cell.y - y0, cell.x - x0] = 1
    return grid, rect


def render_text(world: World, alive: str = "O", dead: str = ".", rect: Optional[Rect] = None) -> str:
    """Plaintext picture of the World; empty string for an extinct World."""
    if world.is_extinct and rect is None:
        return ""
    grid, _ = to_array(world, rect)
    return "\n".join("".join(alive if v else dead for v in row) for row in grid)


def common_rect(worlds: Sequence[World]) -> Rect:
    """Bounding box covering every non-empty World in worlds."""
    rects: List[Rect] = [bounding_box(w) for w in worlds if not w.is_extinct]
    if not rects:
        raise ValueError("common_rect needs at least one non-empty world")
    rect = rects[0]
    for r in rects[1:]:
        rect = r.min_corner.extreme(r.max_corner.extreme(rect))
    return rect


def plot_world(
    world: World,
    ax: Optional[Any] = None,
    title: str = "",
    cmap: str = "Greys",
    rect: Optional[Rect] = None,
) -> Any:
    """
    Plot a World as an image.

    Args:
        world: World to draw
        ax: Matplotlib axis (created if None)
        title: Plot title (generation and population if empty)
        cmap: Colormap for dead/alive
        rect: Window to draw (bounding box if None)

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))

    if world.is_extinct and rect is None:
        ax.set_xticks([])
        ax.set_yticks([])
    else:
        grid, rect = to_array(world, rect)
        ax.imshow(grid, cmap=cmap, vmin=0, vmax=1, interpolation='nearest',
                  extent=[rect.min_corner.x - 0.5, rect.max_corner.x + 0.5,
                          rect.max_corner.y + 0.5, rect.min_corner.y - 0.5])
        ax.set_xlabel('x')
        ax.set_ylabel('y')

    ax.set_title(title or f"Generation {world.generation} (population {world.population})")
    return ax
