"""
Unit tests for AdaptiveConfig and ItemStats.
"""

import dataclasses

import pytest
from pydantic import ValidationError

from drill.adaptive.models import DEFAULT_CONFIG, AdaptiveConfig, GroupRecall, ItemStats


class TestAdaptiveConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.min_time == 1000
        assert DEFAULT_CONFIG.unseen_boost == 3
        assert DEFAULT_CONFIG.ewma_alpha == 0.3
        assert DEFAULT_CONFIG.max_stored_times == 10
        assert DEFAULT_CONFIG.max_response_time == 9000
        assert DEFAULT_CONFIG.initial_stability == 4
        assert DEFAULT_CONFIG.max_stability == 336
        assert DEFAULT_CONFIG.recall_threshold == 0.5
        assert DEFAULT_CONFIG.self_correction_threshold == 1500
        assert DEFAULT_CONFIG.automaticity_target == 3000
        assert DEFAULT_CONFIG.automaticity_threshold == 0.8

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.min_time = 500

    def test_merged_returns_new_snapshot(self):
        cfg = DEFAULT_CONFIG.merged(ewma_alpha=0.5, unseen_boost=5)
        assert cfg.ewma_alpha == 0.5
        assert cfg.unseen_boost == 5
        assert DEFAULT_CONFIG.ewma_alpha == 0.3
        assert cfg is not DEFAULT_CONFIG

    def test_merged_rejects_unknown_field(self):
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.merged(not_a_field=1)

    def test_to_dict(self):
        data = AdaptiveConfig().to_dict()
        assert data["max_stability"] == 336
        assert len(data) == len(dataclasses.fields(AdaptiveConfig))


class TestItemStats:
    def test_to_dict_uses_camel_case(self):
        stats = ItemStats(ewma=1500, last_seen=10, recent_times=[1500], sample_count=1, stability=4, last_correct_at=10)
        assert stats.to_dict() == {
            "recentTimes": [1500],
            "ewma": 1500,
            "sampleCount": 1,
            "lastSeen": 10,
            "stability": 4,
            "lastCorrectAt": 10,
        }

    def test_from_dict_reads_persisted_record(self):
        stats = ItemStats.from_dict(
            {"recentTimes": [], "ewma": 9000, "sampleCount": 0, "lastSeen": 5, "stability": 4, "lastCorrectAt": None}
        )
        assert stats.ewma == 9000
        assert stats.sample_count == 0
        assert stats.last_correct_at is None
        assert not stats.has_been_correct

    def test_from_dict_missing_optional_fields(self):
        stats = ItemStats.from_dict({"ewma": 2000})
        assert stats.recent_times == []
        assert stats.stability is None

    def test_from_dict_rejects_malformed(self):
        with pytest.raises(ValidationError):
            ItemStats.from_dict({"recentTimes": "fast"})
        with pytest.raises(ValidationError):
            ItemStats.from_dict({"ewma": "slow"})


class TestGroupRecall:
    def test_needs_work_counts_due_and_unseen(self):
        assert GroupRecall(group=2, due_count=1, unseen_count=3, mastered_count=4, total_count=8).needs_work == 4
