"""
Discretized 2D maps used as scan matching targets.

Cells are addressed by integer indices (ix, iy) with ix along the map x axis
and iy along the map y axis. Cell (0, 0) covers
[origin_x, origin_x + resolution) x [origin_y, origin_y + resolution).
"""

from enum import Enum

import numpy as np

MIN_PROBABILITY = 0.1
MAX_PROBABILITY = 0.9


class GridType(Enum):
    PROBABILITY_GRID = "probability_grid"
    TSDF = "tsdf"


class MapLimits:
    """Resolution, origin and cell extent of a grid."""

    def __init__(self, resolution, origin, num_x_cells, num_y_cells):
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")
        if num_x_cells <= 0 or num_y_cells <= 0:
            raise ValueError(f"Grid must have at least one cell, got {num_x_cells}x{num_y_cells}")
        self.resolution = float(resolution)
        self.origin = np.asarray(origin, dtype=np.float64).reshape(2)
        self.num_x_cells = int(num_x_cells)
        self.num_y_cells = int(num_y_cells)

    @property
    def shape(self):
        return (self.num_x_cells, self.num_y_cells)

    @property
    def max(self):
        """Upper corner of the mapped area in meters."""
        return self.origin + self.resolution * np.array(self.shape)

    def get_cell_index(self, point):
        """Cell index (ix, iy) containing a point."""
        ix, iy = np.floor((np.asarray(point, dtype=np.float64) - self.origin) / self.resolution)
        return int(ix), int(iy)

    def get_cell_indices(self, points):
        """Vectorized cell lookup for points (N, 2), returns int array (N, 2)."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        return np.floor((points - self.origin) / self.resolution).astype(np.int64)

    def get_cell_center(self, index):
        return self.origin + (np.asarray(index, dtype=np.float64) + 0.5) * self.resolution

    def contains(self, index):
        ix, iy = index
        return 0 <= ix < self.num_x_cells and 0 <= iy < self.num_y_cells

    def contains_all(self, indices):
        """Boolean mask of which indices (N, 2) lie inside the grid."""
        indices = np.asarray(indices).reshape(-1, 2)
        return ((indices[:, 0] >= 0) & (indices[:, 0] < self.num_x_cells) &
                (indices[:, 1] >= 0) & (indices[:, 1] < self.num_y_cells))


class Grid2D:
    """Base class for the grid variants understood by the scorer."""

    def __init__(self, limits):
        self.limits = limits

    @property
    def resolution(self):
        return self.limits.resolution

    def get_grid_type(self):
        raise NotImplementedError


class ProbabilityGrid(Grid2D):
    """Occupancy grid storing the probability that each cell is occupied."""

    def __init__(self, limits, probabilities=None):
        super().__init__(limits)
        if probabilities is None:
            self._probabilities = np.full(limits.shape, MIN_PROBABILITY)
        else:
            probabilities = np.asarray(probabilities, dtype=np.float64)
            if probabilities.shape != limits.shape:
                raise ValueError(f"Probability array shape {probabilities.shape} "
                                 f"does not match grid shape {limits.shape}")
            self._probabilities = np.clip(probabilities, MIN_PROBABILITY, MAX_PROBABILITY)

    def get_grid_type(self):
        return GridType.PROBABILITY_GRID

    def set_probability(self, index, probability):
        if not self.limits.contains(index):
            raise ValueError(f"Cell {index} is outside the grid")
        self._probabilities[tuple(index)] = min(max(probability, MIN_PROBABILITY), MAX_PROBABILITY)

    def fill(self, probability):
        self._probabilities.fill(min(max(probability, MIN_PROBABILITY), MAX_PROBABILITY))

    def get_probability(self, index):
        """Occupancy probability of a cell; cells outside the grid read as unknown."""
        if not self.limits.contains(index):
            return MIN_PROBABILITY
        return float(self._probabilities[tuple(index)])

    def get_probabilities(self, indices):
        indices = np.asarray(indices).reshape(-1, 2)
        inside = self.limits.contains_all(indices)
        values = np.full(indices.shape[0], MIN_PROBABILITY)
        values[inside] = self._probabilities[indices[inside, 0], indices[inside, 1]]
        return values

    def as_array(self):
        return self._probabilities.copy()


class TSDF2D(Grid2D):
    """
    Truncated signed distance field.

    Each cell holds a signed distance to the nearest surface, clamped to
    [-truncation_distance, truncation_distance], and an accumulation weight.
    Unobserved cells have zero weight.
    """

    def __init__(self, limits, truncation_distance, max_weight=10.0):
        super().__init__(limits)
        if truncation_distance <= 0:
            raise ValueError(f"Truncation distance must be positive, got {truncation_distance}")
        self.truncation_distance = float(truncation_distance)
        self.max_weight = float(max_weight)
        self._tsd = np.full(limits.shape, self.truncation_distance)
        self._weight = np.zeros(limits.shape)

    def get_grid_type(self):
        return GridType.TSDF

    def get_max_correspondence_cost(self):
        return self.truncation_distance

    def set_cell(self, index, tsd, weight):
        if not self.limits.contains(index):
            raise ValueError(f"Cell {index} is outside the grid")
        self._tsd[tuple(index)] = np.clip(tsd, -self.truncation_distance, self.truncation_distance)
        self._weight[tuple(index)] = np.clip(weight, 0.0, self.max_weight)

    def get_tsd_and_weight(self, index):
        if not self.limits.contains(index):
            return self.truncation_distance, 0.0
        return float(self._tsd[tuple(index)]), float(self._weight[tuple(index)])

    def get_tsds_and_weights(self, indices):
        indices = np.asarray(indices).reshape(-1, 2)
        inside = self.limits.contains_all(indices)
        tsds = np.full(indices.shape[0], self.truncation_distance)
        weights = np.zeros(indices.shape[0])
        tsds[inside] = self._tsd[indices[inside, 0], indices[inside, 1]]
        weights[inside] = self._weight[indices[inside, 0], indices[inside, 1]]
        return tsds, weights

    def as_arrays(self):
        return self._tsd.copy(), self._weight.copy()
