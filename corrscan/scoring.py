"""
Candidate scoring against probability grids and TSDFs.

Scores are not comparable across grid variants: a probability grid yields
the mean occupancy probability of the hit cells, a TSDF yields a
weight-normalized distance score.
"""

import math

import numpy as np
from joblib import Parallel, cpu_count, delayed

from .grid import GridType


def compute_probability_grid_score(grid, discrete_scan, x_index_offset, y_index_offset):
    """Mean occupancy probability of the shifted scan cells."""
    if discrete_scan.shape[0] == 0:
        raise ValueError("Cannot score an empty scan against a probability grid")
    probabilities = grid.get_probabilities(discrete_scan + (x_index_offset, y_index_offset))
    score = float(np.mean(probabilities))
    if not score > 0.0:
        raise ValueError(f"Probability grid returned a non-positive score ({score})")
    return score


def compute_tsdf_score(grid, discrete_scan, x_index_offset, y_index_offset):
    """Weighted mean of (max_cost - |tsd|) / max_cost; 0 when nothing has weight."""
    tsds, weights = grid.get_tsds_and_weights(discrete_scan + (x_index_offset, y_index_offset))
    summed_weight = float(np.sum(weights))
    if summed_weight == 0.0:
        return 0.0
    max_cost = grid.get_max_correspondence_cost()
    normalized = (max_cost - np.abs(tsds)) / max_cost
    return float(np.sum(normalized * weights)) / summed_weight


CANDIDATE_SCORERS = {
    GridType.PROBABILITY_GRID: compute_probability_grid_score,
    GridType.TSDF: compute_tsdf_score,
}

_unscored = set(GridType) - set(CANDIDATE_SCORERS)
if _unscored:
    raise RuntimeError(f"No candidate scorer for grid types: {sorted(t.name for t in _unscored)}")


def get_candidate_scorer(grid):
    """Raw scoring function for the grid's variant."""
    grid_type = grid.get_grid_type()
    if not isinstance(grid_type, GridType):
        raise TypeError(f"Unsupported grid type: {grid_type!r}")
    return CANDIDATE_SCORERS[grid_type]


def displacement_penalty(x, y, orientation, translation_weight, rotation_weight):
    """Factor in (0, 1] favouring candidates close to the initial pose."""
    return math.exp(-((math.hypot(x, y) * translation_weight) ** 2 +
                      (abs(orientation) * rotation_weight) ** 2))


def _score_chunk(grid, scorer, discrete_scans, candidates, translation_weight, rotation_weight):
    scores = []
    for candidate in candidates:
        raw_score = scorer(grid, discrete_scans[candidate.scan_index],
                           candidate.x_index_offset, candidate.y_index_offset)
        scores.append(raw_score * displacement_penalty(
            candidate.x, candidate.y, candidate.orientation,
            translation_weight, rotation_weight))
    return scores


def _split(candidates, n_chunks):
    """Contiguous chunks preserving candidate order."""
    bounds = np.linspace(0, len(candidates), n_chunks + 1).astype(int)
    return [candidates[start:stop] for start, stop in zip(bounds[:-1], bounds[1:]) if stop > start]


def score_candidates(grid, discrete_scans, search_parameters, candidates, options):
    """
    Score every candidate.

    Args:
        grid: ProbabilityGrid or TSDF2D
        discrete_scans: Discrete scans indexed by candidate.scan_index
        search_parameters: SearchParameters the candidates were generated from
        candidates: Unscored candidates
        options: ScanMatcherOptions (penalty weights and n_jobs)

    Returns:
        New list of scored candidates in the same order as `candidates`
    """
    scorer = get_candidate_scorer(grid)
    for candidate in candidates:
        if not 0 <= candidate.scan_index < search_parameters.num_scans:
            raise RuntimeError(f"Candidate scan index {candidate.scan_index} out of range")

    weights = (options.translation_delta_cost_weight, options.rotation_delta_cost_weight)
    if options.n_jobs == 1 or len(candidates) < 2:
        scores = _score_chunk(grid, scorer, discrete_scans, candidates, *weights)
    else:
        n_workers = options.n_jobs if options.n_jobs > 0 else max(1, cpu_count() + 1 + options.n_jobs)
        n_chunks = max(1, min(len(candidates), n_workers * 4))
        results = Parallel(n_jobs=options.n_jobs, backend='loky')(
            delayed(_score_chunk)(grid, scorer, discrete_scans, chunk, *weights)
            for chunk in _split(candidates, n_chunks)
        )
        scores = [score for chunk_scores in results for score in chunk_scores]

    return [candidate.with_score(score) for candidate, score in zip(candidates, scores)]
