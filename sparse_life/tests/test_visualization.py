"""
Tests for visualization and the command-line entry point.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
from sparse_life.core import Coordinate, Rect, SequenceResult, StopReason, World
from sparse_life.visualization import (
    to_array, render_text, common_rect, plot_world, plot_population,
)
from sparse_life.main import main


BLINKER = World.from_cells([(-1, 0), (0, 0), (1, 0)])


class TestRender:
    """Tests for text and array rendering."""

    def test_render_text(self):
        assert render_text(BLINKER) == "OOO"
        vertical = World.from_cells([(0, -1), (0, 0), (0, 1)])
        assert render_text(vertical, alive="#", dead=" ") == "#\n#\n#"

    def test_render_glider(self):
        glider = World.from_cells([(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)])
        assert render_text(glider) == ".O.\n..O\nOOO"

    def test_render_empty(self):
        assert render_text(World()) == ""

    def test_to_array(self):
        grid, rect = to_array(World.from_cells([(2, 3), (4, 4)]))
        assert grid.shape == (2, 3)
        assert rect == Rect(Coordinate(2, 3), Coordinate(4, 4))
        np.testing.assert_array_equal(grid, [[1, 0, 0], [0, 0, 1]])

    def test_to_array_window_clips(self):
        grid, _ = to_array(BLINKER, Rect(Coordinate(0, 0), Coordinate(2, 0)))
        np.testing.assert_array_equal(grid, [[1, 1, 0]])

    def test_common_rect(self):
        rect = common_rect([BLINKER, World(), World.from_cells([(0, 5)])])
        assert rect == Rect(Coordinate(-1, 0), Coordinate(1, 5))
        with pytest.raises(ValueError):
            common_rect([World()])


class TestPlots:
    """Tests for matplotlib figures."""

    def test_plot_world(self):
        import matplotlib.pyplot as plt
        ax = plot_world(BLINKER)
        assert "population 3" in ax.get_title()
        plt.close(ax.figure)

    def test_plot_empty_world(self):
        import matplotlib.pyplot as plt
        ax = plot_world(World(generation=4))
        assert "Generation 4" in ax.get_title()
        plt.close(ax.figure)

    def test_plot_population(self):
        import matplotlib.pyplot as plt
        result = SequenceResult(
            worlds=[BLINKER, World(BLINKER.cells, 1)],
            stop_reason=StopReason.CYCLE,
            generations=1,
        )
        ax = plot_population(result)
        assert "cycle" in ax.get_title()
        plt.close(ax.figure)


class TestMain:
    """Tests for the CLI."""

    def test_builtin_pattern(self, capsys):
        assert main(["--pattern", "blinker", "--window", "2", "--workers", "1", "--show"]) == 0
        out = capsys.readouterr().out
        assert "Generation 2 (population 3)" in out

    def test_pattern_file_with_rule(self, tmp_path):
        path = tmp_path / "glider.rle"
        path.write_text("x = 3, y = 3, rule = B3/S23\nbo$2bo$3o!", encoding="utf-8")
        assert main(["--file", str(path), "--window", "4", "--workers", "1"]) == 0

    def test_plot_output(self, tmp_path):
        out = tmp_path / "figures" / "run.png"
        assert main(["--pattern", "r_pentomino", "--max-generations", "20",
                     "--workers", "1", "--plot", str(out)]) == 0
        assert out.exists()

    def test_stop_population(self, capsys):
        assert main(["--pattern", "acorn", "--stop-population", "20",
                     "--workers", "1", "--window", "3", "--show"]) == 0

    def test_pattern_file_with_survival_birth_rule(self, tmp_path):
        path = tmp_path / "glider.rle"
        path.write_text("x = 3, y = 3, rule = 23/3\nbo$2bo$3o!", encoding="utf-8")
        assert main(["--file", str(path), "--window", "4", "--workers", "1"]) == 0

    def test_pattern_file_with_bounded_rule(self, tmp_path, capsys):
        path = tmp_path / "glider.rle"
        path.write_text("x = 3, y = 3, rule = B3/S23:T20,20\nbo$2bo$3o!", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["--file", str(path), "--workers", "1"])
        assert exc.value.code == 2
        assert "bounded grids" in capsys.readouterr().err

    def test_invalid_rule(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--pattern", "blinker", "--rule", "nonsense"])
        assert exc.value.code == 2
        assert "Invalid rulestring" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
