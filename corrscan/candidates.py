"""Enumeration and selection of discrete pose candidates."""


class Candidate2D:
    """
    One pose hypothesis of the exhaustive search.

    `x`, `y` and `orientation` are the offsets from the initial pose estimate
    in meters and radians; `score` is 0 until the candidate is scored.
    """

    __slots__ = ("scan_index", "x_index_offset", "y_index_offset",
                 "x", "y", "orientation", "score")

    def __init__(self, scan_index, x_index_offset, y_index_offset, search_parameters, score=0.0):
        self.scan_index = scan_index
        self.x_index_offset = x_index_offset
        self.y_index_offset = y_index_offset
        self.x = x_index_offset * search_parameters.resolution
        self.y = y_index_offset * search_parameters.resolution
        self.orientation = search_parameters.angle(scan_index)
        self.score = score

    def with_score(self, score):
        """Copy of this candidate carrying `score`."""
        scored = Candidate2D.__new__(Candidate2D)
        for name in Candidate2D.__slots__:
            setattr(scored, name, getattr(self, name))
        scored.score = float(score)
        return scored

    def __repr__(self):
        return (f"Candidate2D(scan={self.scan_index}, offset=({self.x_index_offset}, "
                f"{self.y_index_offset}), x={self.x:.3f}, y={self.y:.3f}, "
                f"theta={self.orientation:.4f}, score={self.score:.4f})")


def generate_exhaustive_search_candidates(search_parameters):
    """
    List every (angle, x offset, y offset) of the search space once.

    Order is angle-major, then x ascending, then y ascending.
    """
    num_candidates = search_parameters.num_candidates
    candidates = []
    for scan_index, bounds in enumerate(search_parameters.linear_bounds):
        for x_index_offset in range(bounds.min_x, bounds.max_x + 1):
            for y_index_offset in range(bounds.min_y, bounds.max_y + 1):
                candidates.append(Candidate2D(scan_index, x_index_offset,
                                              y_index_offset, search_parameters))
    if len(candidates) != num_candidates:
        raise RuntimeError(f"Generated {len(candidates)} candidates, "
                           f"expected {num_candidates}")
    return candidates


def select_best_candidate(candidates):
    """
    Highest-scoring candidate; on exact ties the earliest one in
    enumeration order wins.
    """
    if not candidates:
        raise ValueError("Cannot select from an empty candidate list")
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.score > best.score:
            best = candidate
    return best
