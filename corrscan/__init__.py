"""
corrscan - Real-Time Correlative Scan Matching for 2D grids

Aligns a planar laser scan to a map by exhaustive search over a bounded
pose window:
- Angular steps sized so the farthest point moves less than one cell
- One projection per angle, translations searched by shifting cells
- Scoring against occupancy probability grids and TSDFs
- Optional parallel candidate scoring
"""

from .candidates import Candidate2D, generate_exhaustive_search_candidates, select_best_candidate
from .grid import GridType, MapLimits, ProbabilityGrid, TSDF2D
from .matcher import RealTimeCorrelativeScanMatcher
from .options import ScanMatcherOptions
from .point_cloud import PointCloud
from .scoring import score_candidates
from .search import LinearBounds, SearchParameters
from .transforms import Pose2D
from .visualization import plot_match, plot_score_surface

__version__ = "1.0.0"
__all__ = ["Candidate2D", "GridType", "LinearBounds", "MapLimits", "PointCloud",
           "Pose2D", "ProbabilityGrid", "RealTimeCorrelativeScanMatcher",
           "ScanMatcherOptions", "SearchParameters", "TSDF2D",
           "generate_exhaustive_search_candidates", "plot_match",
           "plot_score_surface", "score_candidates", "select_best_candidate"]
