"""
Search space construction for correlative scan matching.

The scan is rotated once per angular step and projected into the grid. The
linear part of the search then shifts these discrete scans by whole cells,
which is why the angular step is chosen so that the farthest point moves by
less than one cell between neighbouring steps.
"""

import math

import numpy as np

# Keeps the angular step strictly inside the half-cell bound.
ANGULAR_STEP_SAFETY_MARGIN = 1.0 - 1e-3


class LinearBounds:
    """Inclusive x/y cell offset range searched for one angular step."""

    __slots__ = ("min_x", "max_x", "min_y", "max_y")

    def __init__(self, min_x, max_x, min_y, max_y):
        self.min_x = int(min_x)
        self.max_x = int(max_x)
        self.min_y = int(min_y)
        self.max_y = int(max_y)

    @property
    def num_x(self):
        return self.max_x - self.min_x + 1

    @property
    def num_y(self):
        return self.max_y - self.min_y + 1

    def __len__(self):
        return self.num_x * self.num_y

    def __repr__(self):
        return (f"LinearBounds(x=[{self.min_x}, {self.max_x}], "
                f"y=[{self.min_y}, {self.max_y}])")


def max_angular_step(resolution, max_scan_range):
    """
    Largest rotation that moves a point at `max_scan_range` by less than
    one cell of size `resolution`.
    """
    return ANGULAR_STEP_SAFETY_MARGIN * math.acos(
        1.0 - resolution ** 2 / (2.0 * max_scan_range ** 2))


class SearchParameters:
    """Angular steps and per-step linear bounds of one match call."""

    def __init__(self, linear_search_window, angular_search_window, point_cloud, resolution):
        """
        Build the search space.

        Args:
            linear_search_window: Half-width of the translation window in meters
            angular_search_window: Half-width of the rotation window in radians
            point_cloud: PointCloud already rotated to the initial orientation
            resolution: Grid resolution in meters
        """
        if linear_search_window < 0 or angular_search_window < 0:
            raise ValueError("Search windows must be non-negative")
        self.resolution = float(resolution)

        max_scan_range = max(3.0 * resolution, point_cloud.max_range())
        step = max_angular_step(resolution, max_scan_range)
        self.num_angular_perturbations = int(math.ceil(angular_search_window / step))
        if self.num_angular_perturbations > 0:
            # Spread the steps evenly so the window edges are searched exactly.
            step = angular_search_window / self.num_angular_perturbations
        self.angular_perturbation_step_size = step
        self.num_scans = 2 * self.num_angular_perturbations + 1

        num_linear_perturbations = int(math.ceil(linear_search_window / resolution))
        self.linear_bounds = [
            LinearBounds(-num_linear_perturbations, num_linear_perturbations,
                         -num_linear_perturbations, num_linear_perturbations)
            for _ in range(self.num_scans)
        ]

    @classmethod
    def from_perturbations(cls, num_linear_perturbations, num_angular_perturbations,
                           angular_perturbation_step_size, resolution):
        """Build a search space directly from step counts."""
        params = cls.__new__(cls)
        params.resolution = float(resolution)
        params.num_angular_perturbations = int(num_angular_perturbations)
        params.angular_perturbation_step_size = float(angular_perturbation_step_size)
        params.num_scans = 2 * params.num_angular_perturbations + 1
        params.linear_bounds = [
            LinearBounds(-num_linear_perturbations, num_linear_perturbations,
                         -num_linear_perturbations, num_linear_perturbations)
            for _ in range(params.num_scans)
        ]
        return params

    def angle(self, scan_index):
        """Rotation applied to the scan at `scan_index`."""
        return (scan_index - self.num_angular_perturbations) * self.angular_perturbation_step_size

    @property
    def num_candidates(self):
        return sum(len(bounds) for bounds in self.linear_bounds)

    def shrink_to_fit(self, discrete_scans, limits):
        """
        Clip the linear bounds so shifted scans stay inside the grid.

        Zero is never clipped away, so bounds can collapse to a single
        offset but never invert.
        """
        if len(discrete_scans) != self.num_scans:
            raise ValueError(f"Expected {self.num_scans} discrete scans, got {len(discrete_scans)}")
        for bounds, scan in zip(self.linear_bounds, discrete_scans):
            if scan.shape[0] == 0:
                continue
            lowest = scan.min(axis=0)
            highest = scan.max(axis=0)
            bounds.min_x = min(0, max(bounds.min_x, int(-lowest[0])))
            bounds.max_x = max(0, min(bounds.max_x, int(limits.num_x_cells - 1 - highest[0])))
            bounds.min_y = min(0, max(bounds.min_y, int(-lowest[1])))
            bounds.max_y = max(0, min(bounds.max_y, int(limits.num_y_cells - 1 - highest[1])))


def generate_rotated_scans(point_cloud, search_parameters):
    """One rotated copy of the cloud per angular step, in scan_index order."""
    return [point_cloud.rotate(search_parameters.angle(scan_index))
            for scan_index in range(search_parameters.num_scans)]


def discretize_scans(limits, rotated_scans, initial_translation):
    """
    Project rotated scans into grid cells.

    Args:
        limits: MapLimits of the target grid
        rotated_scans: List of PointCloud, one per angular step
        initial_translation: (x, y) of the initial pose estimate

    Returns:
        List of int arrays (N, 2) of cell indices
    """
    initial_translation = np.asarray(initial_translation, dtype=np.float64)
    return [limits.get_cell_indices(scan.points + initial_translation)
            for scan in rotated_scans]


def build_discrete_scans(point_cloud, search_parameters, limits, initial_translation):
    """Rotate, project and clip in one go; returns the discrete scans."""
    rotated_scans = generate_rotated_scans(point_cloud, search_parameters)
    discrete_scans = discretize_scans(limits, rotated_scans, initial_translation)
    search_parameters.shrink_to_fit(discrete_scans, limits)
    return discrete_scans
