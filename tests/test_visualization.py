import matplotlib.pyplot as plt
import pytest

from corrscan import Pose2D, RealTimeCorrelativeScanMatcher, ScanMatcherOptions
from corrscan.visualization import plot_match, plot_score_surface


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestPlotMatch:
    @pytest.mark.parametrize("grid_fixture", ["room_probability_grid", "room_tsdf"])
    def test_saves_figure(self, request, grid_fixture, room_scan, tmp_path):
        grid = request.getfixturevalue(grid_fixture)
        initial_pose = Pose2D(2.1, 1.8, 0.1)
        save_path = tmp_path / "match.png"
        fig = plot_match(grid, room_scan, initial_pose, Pose2D(2.0, 1.8, 0.1), score=0.9,
                         save_path=str(save_path), show=False)
        assert save_path.exists()
        assert "Score: 0.9000" in fig.axes[0].get_title()

    def test_skips_saving_without_path(self, room_probability_grid, room_scan, tmp_path):
        fig = plot_match(room_probability_grid, room_scan, Pose2D(), Pose2D(),
                         save_path=None, show=False)
        assert fig is not None
        assert list(tmp_path.iterdir()) == []


class TestPlotScoreSurface:
    def test_saves_surface_of_best_step(self, uniform_grid, small_scan, tmp_path):
        matcher = RealTimeCorrelativeScanMatcher(ScanMatcherOptions(
            linear_search_window=0.2, angular_search_window=0.1))
        params, candidates = matcher.evaluate_search_space(Pose2D(1.0, 1.0, 0.0), small_scan,
                                                           uniform_grid)
        save_path = tmp_path / "surface.png"
        fig = plot_score_surface(candidates, params, save_path=str(save_path), show=False)
        assert save_path.exists()
        assert "Angular step" in fig.axes[0].get_title()

    def test_explicit_scan_index(self, uniform_grid, small_scan):
        matcher = RealTimeCorrelativeScanMatcher(ScanMatcherOptions(
            linear_search_window=0.1, angular_search_window=0.1))
        params, candidates = matcher.evaluate_search_space(Pose2D(1.0, 1.0, 0.0), small_scan,
                                                           uniform_grid)
        fig = plot_score_surface(candidates, params, scan_index=0, save_path=None, show=False)
        image = fig.axes[0].images[0].get_array()
        assert image.shape == (params.linear_bounds[0].num_y, params.linear_bounds[0].num_x)
