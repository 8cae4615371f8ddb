"""Real-time correlative scan matching (Olson, "Real-Time Correlative Scan Matching")."""

import time

from .candidates import generate_exhaustive_search_candidates, select_best_candidate
from .grid import Grid2D
from .options import ScanMatcherOptions
from .point_cloud import PointCloud
from .scoring import score_candidates
from .search import SearchParameters, build_discrete_scans
from .transforms import Pose2D


class RealTimeCorrelativeScanMatcher:
    """
    Exhaustive scan-to-map matcher over a bounded window around an initial pose.

    The scan is rotated and projected once per angular step; translations are
    searched by shifting the projected cells, and every hypothesis is scored
    against the grid with a penalty for moving away from the initial estimate.
    The matcher keeps no state between calls and can be shared across threads.
    """

    __slots__ = ("_options",)

    def __init__(self, options=None):
        """
        Args:
            options: ScanMatcherOptions, a parameter dict for
                ScanMatcherOptions.from_dict, or None for defaults
        """
        if options is None:
            options = ScanMatcherOptions()
        elif isinstance(options, dict):
            options = ScanMatcherOptions.from_dict(options)
        elif not isinstance(options, ScanMatcherOptions):
            raise ValueError(f"Expected ScanMatcherOptions or dict, got {type(options).__name__}")
        object.__setattr__(self, "_options", options)

    def __setattr__(self, name, value):
        raise AttributeError("RealTimeCorrelativeScanMatcher is immutable")

    @property
    def options(self):
        return self._options

    def match(self, initial_pose_estimate, point_cloud, grid, verbose=False):
        """
        Align a scan to a grid.

        Args:
            initial_pose_estimate: Pose2D of the sensor in the grid frame
            point_cloud: PointCloud in the sensor frame
            grid: ProbabilityGrid or TSDF2D
            verbose: Print the search benchmark

        Returns:
            Tuple of (pose_estimate, score). The score is the mean occupancy
            probability for a ProbabilityGrid and a normalized distance score
            for a TSDF2D, both scaled by the displacement penalty; scores from
            different grid variants must not be compared. The heading is not
            re-wrapped, so a zero-offset result equals the initial pose exactly.
            A score of 0.0 means nothing in the grid supported any candidate
            (e.g. an empty cloud, or only zero-weight TSDF cells); the pose is
            then the first enumerated candidate and carries no information.

        Raises:
            ValueError: If an argument is missing or of the wrong kind, or the
                point cloud is empty and the grid is a ProbabilityGrid.
        """
        search_parameters, candidates = self.evaluate_search_space(
            initial_pose_estimate, point_cloud, grid, verbose=verbose)
        best_candidate = select_best_candidate(candidates)

        pose_estimate = Pose2D(
            initial_pose_estimate.x + best_candidate.x,
            initial_pose_estimate.y + best_candidate.y,
            initial_pose_estimate.theta + best_candidate.orientation)

        if verbose:
            print(f"Best candidate:          {best_candidate}")
            print(f"Pose estimate:           {pose_estimate}")
            print(f"{'='*70}\n")
        return pose_estimate, best_candidate.score

    def evaluate_search_space(self, initial_pose_estimate, point_cloud, grid, verbose=False):
        """
        Score the whole search window without selecting a winner.

        Returns:
            Tuple of (search_parameters, scored candidates in enumeration order)
        """
        self._check_arguments(initial_pose_estimate, point_cloud, grid)
        total_start = time.time()

        # Zero the orientation so angular steps are measured from the initial estimate.
        rotated_point_cloud = point_cloud.rotate(initial_pose_estimate.theta)
        search_parameters = SearchParameters(
            self._options.linear_search_window, self._options.angular_search_window,
            rotated_point_cloud, grid.limits.resolution)

        discretize_start = time.time()
        discrete_scans = build_discrete_scans(
            rotated_point_cloud, search_parameters, grid.limits,
            initial_pose_estimate.translation)
        discretize_time = time.time() - discretize_start

        candidates = generate_exhaustive_search_candidates(search_parameters)

        score_start = time.time()
        candidates = score_candidates(grid, discrete_scans, search_parameters,
                                      candidates, self._options)
        score_time = time.time() - score_start
        total_time = time.time() - total_start

        if verbose:
            print(f"\n{'='*70}")
            print(f"CORRELATIVE SCAN MATCH - {grid.get_grid_type().name}")
            print(f"{'='*70}")
            print(f"Scan points:             {len(point_cloud):,}")
            print(f"Angular steps:           {search_parameters.num_scans} "
                  f"(step {search_parameters.angular_perturbation_step_size:.5f} rad)")
            print(f"Candidates:              {len(candidates):,}")
            print(f"Discretization time:     {discretize_time:.3f}s")
            print(f"Scoring time:            {score_time:.3f}s (n_jobs={self._options.n_jobs})")
            print(f"Total runtime:           {total_time:.3f}s")
        return search_parameters, candidates

    @staticmethod
    def _check_arguments(initial_pose_estimate, point_cloud, grid):
        if not isinstance(initial_pose_estimate, Pose2D):
            raise ValueError(f"initial_pose_estimate must be a Pose2D, "
                             f"got {type(initial_pose_estimate).__name__}")
        if not isinstance(point_cloud, PointCloud):
            raise ValueError(f"point_cloud must be a PointCloud, got {type(point_cloud).__name__}")
        if grid is None:
            raise ValueError("grid must not be None")
        if not isinstance(grid, Grid2D):
            raise TypeError(f"Unsupported grid object: {type(grid).__name__}")
