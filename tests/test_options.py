import math

import pytest

from corrscan.options import DEFAULT_OPTIONS, ScanMatcherOptions


class TestScanMatcherOptions:
    def test_defaults(self):
        options = ScanMatcherOptions()
        assert options.linear_search_window == 0.1
        assert options.angular_search_window == pytest.approx(math.radians(20.0))
        assert options.translation_delta_cost_weight == 0.1
        assert options.rotation_delta_cost_weight == 0.1
        assert options.n_jobs == 1

    def test_from_dict_fills_missing_keys(self):
        options = ScanMatcherOptions.from_dict({'angular_search_window': 0.3, 'n_jobs': -1})
        assert options.angular_search_window == 0.3
        assert options.n_jobs == -1
        assert options.linear_search_window == DEFAULT_OPTIONS['linear_search_window']

    def test_from_dict_round_trip(self):
        options = ScanMatcherOptions(0.4, 0.2, 2.0, 3.0, 4)
        assert ScanMatcherOptions.from_dict(options.to_dict()).to_dict() == options.to_dict()

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ValueError, match="linear_window"):
            ScanMatcherOptions.from_dict({'linear_window': 0.2})

    @pytest.mark.parametrize("kwargs", [
        {'linear_search_window': -0.1},
        {'angular_search_window': float('nan')},
        {'translation_delta_cost_weight': float('inf')},
        {'rotation_delta_cost_weight': -1.0},
        {'n_jobs': 0},
        {'n_jobs': 1.5},
    ])
    def test_invalid_values_are_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ScanMatcherOptions(**kwargs)

    def test_options_are_immutable(self):
        options = ScanMatcherOptions()
        with pytest.raises(AttributeError):
            options.n_jobs = 4
        assert options.n_jobs == 1

    def test_repr_lists_every_field(self):
        text = repr(ScanMatcherOptions())
        for name in DEFAULT_OPTIONS:
            assert name in text
