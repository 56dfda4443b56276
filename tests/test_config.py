"""
Tests for configuration defaults and validation
"""

import json

import pytest

from chatquant import config
from chatquant.helpers import is_early_morning_hour, is_late_night_hour


def test_default_config_is_valid():
    valid, msg = config.validate_config()
    assert valid, msg


def test_config_summary_is_serializable():
    """Test that the summary exposes the main knobs as plain data."""
    summary = config.get_config_summary()
    assert summary["timing"]["session_gap_hours"] == config.SESSION_GAP_HOURS
    assert summary["bids"]["gottman_benchmark"] == config.GOTTMAN_BENCHMARK
    assert summary["badges"]["night_owl_min_messages"] == 10
    json.dumps(summary)


def test_validate_rejects_bad_values(monkeypatch):
    """Test range checks on the trim fraction and the timezone."""
    monkeypatch.setattr(config, "TRIM_FRACTION", 0.5)
    valid, msg = config.validate_config()
    assert not valid
    assert "TRIM_FRACTION" in msg

    monkeypatch.setattr(config, "TRIM_FRACTION", 0.1)
    monkeypatch.setattr(config, "TIMEZONE", "Mars/Olympus_Mons")
    valid, msg = config.validate_config()
    assert not valid
    assert "timezone" in msg


def test_late_night_and_early_morning_are_disjoint():
    """Test that no hour counts as both late night and early morning."""
    late = {h for h in range(24) if is_late_night_hour(h)}
    early = {h for h in range(24) if is_early_morning_hour(h)}

    assert early == {4, 5, 6, 7}
    assert not late & early


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
