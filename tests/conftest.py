import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from corrscan import MapLimits, PointCloud, Pose2D, ProbabilityGrid, TSDF2D

# Room walls run through cell centers so small numeric errors never move a
# projected wall point into a neighbouring cell.
ROOM_RESOLUTION = 0.1
ROOM_TRUE_POSE = Pose2D(2.0, 1.8, 0.1)


def _segment(start, end, spacing):
    start, end = np.asarray(start, dtype=float), np.asarray(end, dtype=float)
    n = int(round(np.linalg.norm(end - start) / spacing)) + 1
    return start + np.linspace(0.0, 1.0, n)[:, np.newaxis] * (end - start)


@pytest.fixture
def room_walls():
    """Wall points of a 4m x 3m room, one per cell center."""
    corners = [(0.55, 0.55), (4.55, 0.55), (4.55, 3.55), (0.55, 3.55)]
    return np.vstack([_segment(corners[i], corners[(i + 1) % 4], ROOM_RESOLUTION)
                      for i in range(4)])


@pytest.fixture
def room_limits():
    return MapLimits(ROOM_RESOLUTION, origin=(0.0, 0.0), num_x_cells=60, num_y_cells=50)


@pytest.fixture
def room_probability_grid(room_walls, room_limits):
    grid = ProbabilityGrid(room_limits)
    for index in room_limits.get_cell_indices(room_walls):
        grid.set_probability(index, 0.9)
    return grid


@pytest.fixture
def room_tsdf(room_walls, room_limits):
    truncation = 0.3
    tsdf = TSDF2D(room_limits, truncation_distance=truncation)
    for ix in range(room_limits.num_x_cells):
        for iy in range(room_limits.num_y_cells):
            center = room_limits.get_cell_center((ix, iy))
            distance = np.min(np.linalg.norm(room_walls - center, axis=1))
            tsdf.set_cell((ix, iy), min(distance, truncation), 1.0)
    return tsdf


@pytest.fixture
def room_scan(room_walls):
    """The room walls seen from ROOM_TRUE_POSE, in the sensor frame."""
    return PointCloud(ROOM_TRUE_POSE.inverse().transform_points(room_walls))


@pytest.fixture
def small_limits():
    return MapLimits(0.1, origin=(0.0, 0.0), num_x_cells=20, num_y_cells=20)


@pytest.fixture
def uniform_grid(small_limits):
    grid = ProbabilityGrid(small_limits)
    grid.fill(0.5)
    return grid


@pytest.fixture
def small_scan():
    return PointCloud([[0.3, 0.0], [0.0, 0.25], [-0.2, -0.1], [0.1, -0.3]])
