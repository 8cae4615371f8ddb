"""Configuration of the real-time correlative scan matcher."""

import math

DEFAULT_OPTIONS = {
    'linear_search_window': 0.1,
    'angular_search_window': math.radians(20.0),
    'translation_delta_cost_weight': 1e-1,
    'rotation_delta_cost_weight': 1e-1,
    'n_jobs': 1,
}


class ScanMatcherOptions:
    """
    Search windows, penalty weights and worker count.

    Args:
        linear_search_window: Translation half-width in meters
        angular_search_window: Rotation half-width in radians
        translation_delta_cost_weight: Penalty weight for distance from the
            initial translation
        rotation_delta_cost_weight: Penalty weight for distance from the
            initial rotation
        n_jobs: Number of joblib workers used to score candidates (1 scores
            in the calling thread, -1 uses all cores)
    """

    __slots__ = tuple(DEFAULT_OPTIONS)

    def __init__(self, linear_search_window=DEFAULT_OPTIONS['linear_search_window'],
                 angular_search_window=DEFAULT_OPTIONS['angular_search_window'],
                 translation_delta_cost_weight=DEFAULT_OPTIONS['translation_delta_cost_weight'],
                 rotation_delta_cost_weight=DEFAULT_OPTIONS['rotation_delta_cost_weight'],
                 n_jobs=DEFAULT_OPTIONS['n_jobs']):
        for name, value in (('linear_search_window', linear_search_window),
                            ('angular_search_window', angular_search_window),
                            ('translation_delta_cost_weight', translation_delta_cost_weight),
                            ('rotation_delta_cost_weight', rotation_delta_cost_weight)):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value}")
        if n_jobs == 0 or int(n_jobs) != n_jobs:
            raise ValueError(f"n_jobs must be a non-zero integer, got {n_jobs}")

        object.__setattr__(self, 'linear_search_window', float(linear_search_window))
        object.__setattr__(self, 'angular_search_window', float(angular_search_window))
        object.__setattr__(self, 'translation_delta_cost_weight', float(translation_delta_cost_weight))
        object.__setattr__(self, 'rotation_delta_cost_weight', float(rotation_delta_cost_weight))
        object.__setattr__(self, 'n_jobs', int(n_jobs))

    def __setattr__(self, name, value):
        raise AttributeError("ScanMatcherOptions is immutable")

    @classmethod
    def from_dict(cls, params=None):
        """
        Build options from a parameter dictionary.

        Missing keys take their defaults; unknown keys raise ValueError.
        """
        if params is None:
            params = {}
        unknown = set(params) - set(DEFAULT_OPTIONS)
        if unknown:
            raise ValueError(f"Unknown scan matcher options: {', '.join(sorted(unknown))}")
        return cls(**{name: params.get(name, default)
                      for name, default in DEFAULT_OPTIONS.items()})

    def to_dict(self):
        return {name: getattr(self, name) for name in DEFAULT_OPTIONS}

    def __repr__(self):
        fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in DEFAULT_OPTIONS)
        return f"ScanMatcherOptions({fields})"
