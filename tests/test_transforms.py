import math

import numpy as np
import pytest

from corrscan.point_cloud import PointCloud
from corrscan.transforms import (Pose2D, apply_rotation, normalize_angle,
                                 rotation_matrix)


class TestNormalizeAngle:
    def test_in_range_angle_is_unchanged(self):
        assert normalize_angle(0.3) == 0.3
        assert normalize_angle(-math.pi) == -math.pi

    def test_wraps_out_of_range_angles(self):
        assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert normalize_angle(-5 * math.pi / 2) == pytest.approx(-math.pi / 2)


class TestPose2D:
    def test_compose_with_inverse_is_identity(self):
        pose = Pose2D(1.5, -0.7, 2.1)
        result = pose * pose.inverse()
        assert result.x == pytest.approx(0.0, abs=1e-12)
        assert result.y == pytest.approx(0.0, abs=1e-12)
        assert result.theta == pytest.approx(0.0, abs=1e-12)

    def test_compose_applies_right_operand_first(self):
        a = Pose2D(1.0, 0.0, math.pi / 2)
        b = Pose2D(1.0, 0.0, 0.0)
        result = a.compose(b)
        assert result.x == pytest.approx(1.0)
        assert result.y == pytest.approx(1.0)
        assert result.theta == pytest.approx(math.pi / 2)

    def test_transform_points_rotates_then_translates(self):
        pose = Pose2D(0.4, 0.2, math.pi / 2)
        points = np.array([[1.0, 0.0], [0.5, -2.0], [0.0, 0.0]])
        np.testing.assert_allclose(pose.transform_points(points),
                                   [[0.4, 1.2], [2.4, 0.7], [0.4, 0.2]], atol=1e-12)

    def test_matrix_layout(self):
        matrix = Pose2D(3.0, -1.0, 1.2).as_matrix()
        np.testing.assert_allclose(matrix[:2, 2], [3.0, -1.0])
        np.testing.assert_allclose(matrix[:2, :2], rotation_matrix(1.2))
        np.testing.assert_allclose(matrix[2], [0.0, 0.0, 1.0])

    def test_equality_is_exact(self):
        assert Pose2D(1.0, 2.0, 0.5) == Pose2D(1.0, 2.0, 0.5)
        assert Pose2D(1.0, 2.0, 0.5) != Pose2D(1.0, 2.0, 0.5 + 1e-12)


class TestRotation:
    def test_rotation_matrix_is_orthonormal(self):
        R = rotation_matrix(0.7)
        np.testing.assert_allclose(R @ R.T, np.eye(2), atol=1e-12)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_quarter_turn(self):
        rotated = apply_rotation(np.array([[1.0, 0.0]]), math.pi / 2)
        np.testing.assert_allclose(rotated, [[0.0, 1.0]], atol=1e-12)


class TestPointCloud:
    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            PointCloud(np.zeros((3, 3)))

    def test_empty_cloud(self):
        cloud = PointCloud([])
        assert len(cloud) == 0
        assert cloud.max_range() == 0.0

    def test_transform_returns_new_cloud(self):
        cloud = PointCloud([[1.0, 0.0]])
        moved = cloud.transform(Pose2D(1.0, 1.0, math.pi))
        np.testing.assert_allclose(moved.points, [[0.0, 1.0]], atol=1e-12)
        np.testing.assert_allclose(cloud.points, [[1.0, 0.0]])

    def test_from_ranges_drops_invalid_beams(self):
        ranges = [1.0, np.inf, 0.01, 2.0, np.nan]
        cloud = PointCloud.from_ranges(ranges, angle_min=0.0, angle_increment=math.pi / 2,
                                       min_range=0.05, max_range=10.0)
        assert len(cloud) == 2
        np.testing.assert_allclose(cloud.points, [[1.0, 0.0], [0.0, -2.0]], atol=1e-12)

    def test_max_range(self):
        cloud = PointCloud([[3.0, 4.0], [1.0, 0.0]])
        assert cloud.max_range() == pytest.approx(5.0)
