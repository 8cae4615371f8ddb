"""Planar rigid transforms for scan matching."""

import math

import numpy as np


def normalize_angle(angle):
    """
    Wrap an angle into [-pi, pi].

    Angles already inside the interval are returned unchanged so that
    composing with a zero rotation is exact.
    """
    if -math.pi <= angle <= math.pi:
        return angle
    return math.atan2(math.sin(angle), math.cos(angle))


def rotation_matrix(theta):
    """2x2 rotation matrix for an angle in radians."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s],
                     [s, c]])


def apply_transformation(points, transformation):
    """
    Apply a homogeneous transformation to points.

    Args:
        points: Points array (N, 2)
        transformation: 3x3 transformation matrix

    Returns:
        Transformed points
    """
    R = transformation[:2, :2]
    t = transformation[:2, 2]
    return points @ R.T + t


def apply_rotation(points, theta):
    """Rotate points (N, 2) about the origin."""
    return points @ rotation_matrix(theta).T


class Pose2D:
    """2D rigid transform (x, y, theta), theta in radians."""

    __slots__ = ("x", "y", "theta")

    def __init__(self, x=0.0, y=0.0, theta=0.0):
        self.x = float(x)
        self.y = float(y)
        self.theta = float(theta)

    @property
    def translation(self):
        return np.array([self.x, self.y])

    def as_matrix(self):
        """3x3 homogeneous matrix of this pose."""
        transformation = np.eye(3)
        transformation[:2, :2] = rotation_matrix(self.theta)
        transformation[:2, 2] = [self.x, self.y]
        return transformation

    def compose(self, other):
        """Return self * other (apply other first, then self)."""
        c, s = math.cos(self.theta), math.sin(self.theta)
        return Pose2D(self.x + c * other.x - s * other.y,
                      self.y + s * other.x + c * other.y,
                      normalize_angle(self.theta + other.theta))

    def __mul__(self, other):
        return self.compose(other)

    def inverse(self):
        c, s = math.cos(self.theta), math.sin(self.theta)
        return Pose2D(-(c * self.x + s * self.y),
                      -(-s * self.x + c * self.y),
                      normalize_angle(-self.theta))

    def transform_points(self, points):
        """Map points (N, 2) from this pose's local frame into its parent frame."""
        return apply_transformation(points, self.as_matrix())

    def __eq__(self, other):
        if not isinstance(other, Pose2D):
            return NotImplemented
        return (self.x, self.y, self.theta) == (other.x, other.y, other.theta)

    def __hash__(self):
        return hash((self.x, self.y, self.theta))

    def __repr__(self):
        return f"Pose2D(x={self.x:.4f}, y={self.y:.4f}, theta={self.theta:.4f})"
