"""
Unit tests for response-count scaling, motor-baseline rescaling and median.
"""

from drill.adaptive.models import DEFAULT_CONFIG
from drill.adaptive.scaling import compute_median, derive_scaled_config, scale_for_response_count

RATIO_FIELDS = (
    "ewma_alpha",
    "unseen_boost",
    "max_stored_times",
    "initial_stability",
    "max_stability",
    "stability_growth_base",
    "stability_decay_on_wrong",
    "recall_threshold",
    "expansion_threshold",
    "speed_bonus_max",
    "automaticity_threshold",
)


class TestScaleForResponseCount:
    def test_single_response_returns_same_config(self):
        assert scale_for_response_count(DEFAULT_CONFIG, 1) is DEFAULT_CONFIG

    def test_scales_absolute_timings(self):
        cfg = scale_for_response_count(DEFAULT_CONFIG, 3)
        assert cfg.min_time == 3000
        assert cfg.automaticity_target == 9000
        assert cfg.max_response_time == 27000
        assert cfg.self_correction_threshold == 4500

    def test_ratio_fields_untouched(self):
        cfg = scale_for_response_count(DEFAULT_CONFIG, 4)
        for name in RATIO_FIELDS:
            assert getattr(cfg, name) == getattr(DEFAULT_CONFIG, name)

    def test_base_config_not_mutated(self):
        scale_for_response_count(DEFAULT_CONFIG, 5)
        assert DEFAULT_CONFIG.min_time == 1000


class TestDeriveScaledConfig:
    def test_reference_baseline_is_identity(self):
        assert derive_scaled_config(1000) == DEFAULT_CONFIG

    def test_slower_baseline_scales_up(self):
        cfg = derive_scaled_config(1500)
        assert cfg.min_time == 1500
        assert cfg.automaticity_target == 4500
        assert cfg.self_correction_threshold == 2250
        assert cfg.max_response_time == 13500

    def test_rounds_to_whole_milliseconds(self):
        cfg = derive_scaled_config(1234)
        assert cfg.min_time == 1234
        assert cfg.automaticity_target == 3702
        assert cfg.self_correction_threshold == 1851
        assert cfg.max_response_time == 11106

    def test_ratio_fields_untouched(self):
        cfg = derive_scaled_config(700)
        for name in RATIO_FIELDS:
            assert getattr(cfg, name) == getattr(DEFAULT_CONFIG, name)

    def test_custom_base_config(self):
        base = DEFAULT_CONFIG.merged(min_time=800, ewma_alpha=0.5)
        cfg = derive_scaled_config(2000, base)
        assert cfg.min_time == 1600
        assert cfg.ewma_alpha == 0.5


class TestComputeMedian:
    def test_odd_count(self):
        assert compute_median([3, 1, 2]) == 2

    def test_even_count_averages_middle(self):
        assert compute_median([4, 1, 3, 2]) == 2.5

    def test_single_value(self):
        assert compute_median([850]) == 850

    def test_empty_gives_none(self):
        assert compute_median([]) is None

    def test_does_not_mutate_input(self):
        values = [900, 700, 1100, 800]
        compute_median(values)
        assert values == [900, 700, 1100, 800]
