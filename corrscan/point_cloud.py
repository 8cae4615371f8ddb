"""2D point cloud container."""

import numpy as np

from .transforms import apply_rotation


class PointCloud:
    """Ordered set of 2D points in a local (sensor) frame."""

    def __init__(self, points):
        """
        Initialize a point cloud.

        Args:
            points: Array-like of shape (N, 2). An empty sequence gives an
                empty cloud.
        """
        points = np.asarray(points, dtype=np.float64)
        if points.size == 0:
            points = points.reshape(0, 2)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Expected points of shape (N, 2), got {points.shape}")
        self.points = points

    @classmethod
    def from_ranges(cls, ranges, angle_min, angle_increment,
                    min_range=0.0, max_range=np.inf):
        """
        Convert a planar laser scan into a point cloud.

        Beams that are not finite or fall outside [min_range, max_range]
        are dropped; the remaining points keep beam order.
        """
        ranges = np.asarray(ranges, dtype=np.float64)
        angles = angle_min + angle_increment * np.arange(ranges.shape[0])
        valid = np.isfinite(ranges) & (ranges >= min_range) & (ranges <= max_range)
        r = ranges[valid]
        a = angles[valid]
        return cls(np.column_stack([r * np.cos(a), r * np.sin(a)]))

    def transform(self, pose):
        """Return a new cloud with the rigid transform `pose` applied."""
        return PointCloud(pose.transform_points(self.points))

    def rotate(self, theta):
        """Return a new cloud rotated about the sensor origin."""
        return PointCloud(apply_rotation(self.points, theta))

    def ranges(self):
        """Distance of every point to the sensor origin."""
        return np.hypot(self.points[:, 0], self.points[:, 1])

    def max_range(self):
        if len(self) == 0:
            return 0.0
        return float(np.max(self.ranges()))

    def __len__(self):
        return self.points.shape[0]
