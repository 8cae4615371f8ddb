"""Visualization utilities for scan matching results."""

import matplotlib.pyplot as plt
import numpy as np

from .candidates import select_best_candidate
from .grid import GridType


def _grid_image(grid):
    """2D array to draw for a grid, indexed [iy, ix] for imshow."""
    if grid.get_grid_type() == GridType.PROBABILITY_GRID:
        return grid.as_array().T, 'Occupancy probability', 'Greys'
    if grid.get_grid_type() == GridType.TSDF:
        tsd, weight = grid.as_arrays()
        return np.where(weight > 0, np.abs(tsd), np.nan).T, '|TSD| (m)', 'viridis_r'
    raise TypeError(f"Unsupported grid type: {grid.get_grid_type()!r}")


def plot_match(grid, point_cloud, initial_pose, pose_estimate, score=None,
               save_path='scan_match.png', show=True):
    """
    Overlay the scan at the initial and corrected poses on the grid.

    Args:
        grid: ProbabilityGrid or TSDF2D
        point_cloud: PointCloud in the sensor frame
        initial_pose: Pose2D used to seed the match
        pose_estimate: Pose2D returned by the matcher
        score: Optional match score shown in the title
        save_path: Path to save the plot (None to skip saving)
        show: Whether to open a window
    """
    fig, ax = plt.subplots(figsize=(10, 10))

    image, label, cmap = _grid_image(grid)
    lower = grid.limits.origin
    upper = grid.limits.max
    im = ax.imshow(image, origin='lower', cmap=cmap,
                   extent=[lower[0], upper[0], lower[1], upper[1]])
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04, label=label)

    initial_points = point_cloud.transform(initial_pose).points
    matched_points = point_cloud.transform(pose_estimate).points
    ax.scatter(initial_points[:, 0], initial_points[:, 1], s=6, color='red',
               alpha=0.6, label='Initial estimate')
    ax.scatter(matched_points[:, 0], matched_points[:, 1], s=6, color='#2E86AB',
               label='Match result')

    for pose, color in ((initial_pose, 'red'), (pose_estimate, '#2E86AB')):
        ax.arrow(pose.x, pose.y, 0.3 * np.cos(pose.theta), 0.3 * np.sin(pose.theta),
                 width=0.02, color=color)

    title = 'Correlative Scan Match'
    if score is not None:
        title += f"\nScore: {score:.4f}"
    title += (f"\nInitial: ({initial_pose.x:.3f}, {initial_pose.y:.3f}, {initial_pose.theta:.3f})"
              f" → Result: ({pose_estimate.x:.3f}, {pose_estimate.y:.3f}, {pose_estimate.theta:.3f})")

    ax.set_xlabel('x (m)', fontsize=12)
    ax.set_ylabel('y (m)', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.set_aspect('equal')
    ax.legend(loc='best')

    plt.tight_layout()
    if save_path is not None:
        plt.savefig(save_path, dpi=150)
        print(f"Match plot saved to '{save_path}'")
    if show:
        plt.show()
    return fig


def plot_score_surface(candidates, search_parameters, scan_index=None,
                       save_path='score_surface.png', show=True):
    """
    Plot candidate scores over the x/y offsets of one angular step.

    Args:
        candidates: Scored candidates from the matcher
        search_parameters: SearchParameters the candidates were generated from
        scan_index: Angular step to draw (default: the best candidate's)
        save_path: Path to save the plot (None to skip saving)
        show: Whether to open a window
    """
    best = select_best_candidate(candidates)
    if scan_index is None:
        scan_index = best.scan_index
    bounds = search_parameters.linear_bounds[scan_index]

    surface = np.full((bounds.num_y, bounds.num_x), np.nan)
    for candidate in candidates:
        if candidate.scan_index == scan_index:
            surface[candidate.y_index_offset - bounds.min_y,
                    candidate.x_index_offset - bounds.min_x] = candidate.score

    fig, ax = plt.subplots(figsize=(9, 7))
    res = search_parameters.resolution
    im = ax.imshow(surface, origin='lower', cmap='magma',
                   extent=[(bounds.min_x - 0.5) * res, (bounds.max_x + 0.5) * res,
                           (bounds.min_y - 0.5) * res, (bounds.max_y + 0.5) * res])
    fig.colorbar(im, ax=ax, label='Score')

    if best.scan_index == scan_index:
        ax.plot(best.x, best.y, marker='*', markersize=15, color='cyan', label='Best candidate')
        ax.legend(loc='best')

    angle = search_parameters.angle(scan_index)
    ax.set_xlabel('Δx (m)', fontsize=12)
    ax.set_ylabel('Δy (m)', fontsize=12)
    ax.set_title(f'Score Surface\nAngular step {scan_index} (Δθ = {angle:.4f} rad)',
                 fontsize=14, fontweight='bold')

    plt.tight_layout()
    if save_path is not None:
        plt.savefig(save_path, dpi=150)
        print(f"Score surface saved to '{save_path}'")
    if show:
        plt.show()
    return fig
