"""
Tests: CLI entry point.

Run with:
    pytest groupbuy_engine/tests/test_main.py -v
"""

import json

import pytest
from groupbuy_engine.engine import TierOverlapError
from groupbuy_engine.main import run


def _write(tmp_path, tiers):
    path = tmp_path / "proposal.json"
    path.write_text(json.dumps({
        "proposal": {"id": "a0P1", "name": "Demo", "status": "Active",
                     "min_quota": 5, "max_quota": 40, "booked_quota": 25},
        "tiers": tiers,
        "account_id": "001A",
    }), encoding="utf-8")
    return str(path)


class TestRun:
    def test_summarizes_file(self, tmp_path):
        path = _write(tmp_path, [
            {"id": "t1", "min_quota": 0, "max_quota": 19, "discount_value": "0.05"},
            {"id": "t2", "min_quota": 20, "max_quota": None, "discount_value": "0.12"},
        ])
        summary = run(path)
        assert summary.current_tier_id == "t2"
        assert summary.available_quota == 15

    def test_rejects_overlapping_tiers(self, tmp_path):
        path = _write(tmp_path, [
            {"id": "t1", "min_quota": 0, "max_quota": 20, "discount_value": "0.05"},
            {"id": "t2", "min_quota": 20, "max_quota": None, "discount_value": "0.12"},
        ])
        with pytest.raises(TierOverlapError):
            run(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            run("/nonexistent/proposal.json")

    def test_no_path(self):
        with pytest.raises(ValueError, match="No proposal file"):
            run("")
