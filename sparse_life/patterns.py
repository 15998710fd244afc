"""
Seed patterns for the sparse Life simulator.

Parsers for the two common Life notations:
- Plaintext (.cells): '!' comment lines, 'O' or '*' alive, '.' dead
- RLE (.rle): '#' comment lines, "x = .., y = .., rule = .." header,
  run-length encoded rows of b/o terminated by '!'

Row index maps to y, column index to x, both starting at 0.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union
import re

from .core import CoordinateCache, World


Cell = Tuple[int, int]

_RLE_HEADER = re.compile(r"^\s*x\s*=\s*\d+\s*,\s*y\s*=\s*\d+(\s*,\s*rule\s*=\s*(?P<rule>\S+))?", re.IGNORECASE)
_RLE_TOKEN = re.compile(r"(\d*)([a-zA-Z.$!])")


def parse_plaintext(text: str) -> Set[Cell]:
    """Parse plaintext notation into a set of (x, y) cells."""
    cells: Set[Cell] = set()
    y = 0
    for line in text.splitlines():
        if line.startswith("!"):
            continue
        for x, char in enumerate(line.rstrip()):
            if char in "O*":
                cells.add((x, y))
            elif char not in ". ":
                raise ValueError(f"Unexpected character {char!r} at row {y}, column {x}")
        y += 1
    return cells


def parse_rle(text: str) -> Tuple[Set[Cell], Optional[str]]:
    """
    Parse RLE notation.

    Returns:
        (cells, rulestring) where rulestring is None if the header has no rule
    """
    cells: Set[Cell] = set()
    rule: Optional[str] = None
    body: List[str] = []

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        header = _RLE_HEADER.match(stripped)
        if header is not None:
            rule = header.group("rule")
            continue
        body.append(stripped)

    x = y = 0
    for count_text, tag in _RLE_TOKEN.findall("".join(body)):
        count = int(count_text) if count_text else 1
        if tag == "!":
            break
        if tag == "$":
            y += count
            x = 0
        elif tag in "b.":
            x += count
        else:
            # 'o' and multi-state letters are all alive
            for i in range(count):
                cells.add((x + i, y))
            x += count
    return cells, rule


def load_pattern(path: Union[str, Path]) -> Tuple[Set[Cell], Optional[str]]:
    """
    Load a pattern file.

    Returns:
        (cells, rulestring) - rulestring only comes from RLE headers
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".rle":
        return parse_rle(text)
    if path.suffix.lower() in (".cells", ".txt"):
        return parse_plaintext(text), None
    raise ValueError(f"Unknown pattern format: {path.suffix!r} (expected .rle or .cells)")


# ===== Pattern catalog =====

PATTERNS: Dict[str, str] = {
    # Still lifes
    "block": "OO\nOO",
    "beehive": ".OO.\nO..O\n.OO.",
    "loaf": ".OO.\nO..O\n.O.O\n..O.",
    "boat": "OO.\nO.O\n.O.",
    # Oscillators
    "blinker": "OOO",
    "toad": ".OOO\nOOO.",
    "beacon": "OO..\nOO..\n..OO\n..OO",
    # Spaceships
    "glider": ".O.\n..O\nOOO",
    "lwss": ".O..O\nO....\nO...O\nOOOO.",
    # Methuselahs
    "r_pentomino": ".OO\nOO.\n.O.",
    "diehard": "......O.\nOO......\n.O...OOO",
    "acorn": ".O.....\n...O...\nOO..OOO",
}


def pattern_cells(name: str) -> Set[Cell]:
    """Cells of a catalog pattern."""
    try:
        return parse_plaintext(PATTERNS[name])
    except KeyError:
        raise KeyError(f"Unknown pattern {name!r}; available: {sorted(PATTERNS)}") from None


def get_pattern(
    name: str,
    cache: Optional[CoordinateCache] = None,
    generation: int = 0,
) -> World:
    """Build a seed World from a catalog pattern."""
    return World.from_cells(pattern_cells(name), cache=cache, generation=generation)
