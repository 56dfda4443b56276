"""
End-to-end tests for the analysis pipeline and CLI
"""

import dataclasses
import json
import sys

import pytest

from chatquant.cli import analyze_files, main
from chatquant.models import QuantitativeAnalysis
from chatquant.pipeline import DERIVERS, compute_quantitative_analysis, load_conversation, run_full_analysis
from factories import BASE_TS, DAY, HOUR, MINUTE, alternating, make_conversation, make_message

ALICE_LINES = [
    "how was your day?",
    "I love this song https://example.com/song",
    "pizza tonight? 🍕",
    "guess what happened at work",
    "ok",
]
BOB_LINES = [
    "pretty good, thanks",
    "nice one 😂",
    "sure, sounds great",
    "tell me everything",
    "haha",
]


@pytest.fixture
def long_conversation():
    """Five months of short daily exchanges between two people."""
    messages = []
    for day in range(0, 150, 2):
        start = BASE_TS + day * DAY + (day % 5) * HOUR
        for j in range(6):
            sender = "Alice" if j % 2 == 0 else "Bob"
            lines = ALICE_LINES if sender == "Alice" else BOB_LINES
            messages.append(make_message(sender, lines[(day + j) % 5], start + j * 7 * MINUTE))
    return make_conversation(messages)


@pytest.fixture
def whatsapp_file(tmp_path):
    lines = [
        f"0{1 + i // 10}/02/2024, 10:{i % 10:02d} - {'Alice' if i % 2 == 0 else 'Bob'}: message number {i}"
        for i in range(30)
    ]
    path = tmp_path / "chat.txt"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def test_full_analysis_shape(long_conversation):
    """Test that every bundle is present and consistent."""
    analysis = compute_quantitative_analysis(long_conversation)

    assert isinstance(analysis, QuantitativeAnalysis)
    assert analysis.per_person["Alice"]["total_messages"] == 225
    assert sum(p["total_messages"] for p in analysis.per_person.values()) == 450
    assert len(analysis.patterns["monthly_volume"]) == 5
    assert analysis.year_milestones["total_months"] == 5
    assert analysis.chronotype is not None
    assert analysis.network is None
    assert 0 <= analysis.lsm["overall"] <= 1
    assert set(analysis.pronoun_analysis["per_person"]) == {"Alice", "Bob"}
    assert analysis.viral_scores["ghost_risk"]["Alice"] is not None
    assert set(analysis.viral_scores["interest_scores"]) == {"Alice", "Bob"}
    assert 0 <= analysis.reciprocity["overall"] <= 100
    for badge in analysis.badges:
        assert set(badge) == {"id", "name", "emoji", "description", "holder", "evidence"}

    payload = analysis.to_dict()
    assert set(DERIVERS) <= set(payload)
    assert "badges" in payload and "viral_scores" in payload


def test_heatmap_and_distribution(long_conversation):
    """Test that the calendar and histogram views account for every message."""
    analysis = compute_quantitative_analysis(long_conversation)

    assert sum(map(sum, analysis.heatmap["combined"])) == 450
    bins = {b["label"]: b["count"] for b in analysis.response_time_distribution["per_person"]["Bob"]}
    assert len(bins) == 11
    assert bins["5-15m"] == 225
    assert sum(bins.values()) == 225


def test_to_dataframe(long_conversation):
    df = long_conversation.to_dataframe()

    assert len(df) == 450
    assert str(df["datetime"].dt.tz) == "UTC"
    assert df["datetime"].iloc[0].hour == 12
    assert df["sender"].value_counts()["Bob"] == 225


def test_analysis_is_frozen(long_conversation):
    analysis = compute_quantitative_analysis(long_conversation)
    with pytest.raises(dataclasses.FrozenInstanceError):
        analysis.badges = []


def test_analysis_is_deterministic(long_conversation):
    """Test identical output for repeated and parallel runs."""
    first = compute_quantitative_analysis(long_conversation, parallel=False).to_json()
    second = compute_quantitative_analysis(long_conversation, parallel=False).to_json()
    parallel = compute_quantitative_analysis(long_conversation, parallel=True).to_json()

    assert first == second
    assert first == parallel


def test_tiny_conversation_has_no_nan():
    """Test that optional bundles are None and the JSON stays strict."""
    conversation = make_conversation([make_message("Alice", "hi", BASE_TS)])
    analysis = compute_quantitative_analysis(conversation)

    data = json.loads(analysis.to_json())
    assert data["bid_response"] is None
    assert data["chronotype"] is None
    assert data["shift_support"] is None
    assert data["year_milestones"] is None
    assert data["pursuit_withdrawal"] is None
    assert data["lsm"] is None
    assert data["pronoun_analysis"] is None
    assert data["viral_scores"]["compatibility_score"] == 0
    assert data["timing"]["per_person"]["Alice"]["low_confidence"] is True


def test_group_conversation_has_network():
    messages = alternating(30, names=("Alice", "Bob", "Carol"))
    analysis = compute_quantitative_analysis(make_conversation(messages))

    assert analysis.network["density"] == 1.0
    assert analysis.chronotype is None


def test_run_full_analysis(whatsapp_file):
    """Test the file-to-report path."""
    report = run_full_analysis([whatsapp_file])

    conversation = report["conversation"]
    assert conversation["platform"] == "whatsapp"
    assert conversation["total_messages"] == 30
    assert conversation["participants"] == ["Alice", "Bob"]
    assert conversation["is_group"] is False
    assert report["analysis"]["per_person"]["Bob"]["total_messages"] == 15
    json.dumps(report, allow_nan=False)


def test_load_conversation_merges_files(tmp_path):
    """Test that several files of one export become one conversation."""
    paths = []
    for part in range(2):
        export = {
            "participants": [{"name": "Ania"}, {"name": "Bartek"}],
            "title": "Ania",
            "messages": [
                {"sender_name": "Bartek", "timestamp_ms": BASE_TS + (part * 2 + 1) * MINUTE, "content": "b"},
                {"sender_name": "Ania", "timestamp_ms": BASE_TS + part * 2 * MINUTE, "content": "a"},
            ],
        }
        path = tmp_path / f"message_{part + 1}.json"
        path.write_text(json.dumps(export), encoding="utf-8")
        paths.append(path)

    conversation = load_conversation(paths)
    assert conversation.metadata.total_messages == 4
    assert [m.index for m in conversation.messages] == [0, 1, 2, 3]


def test_cli_analyze_writes_report(whatsapp_file, tmp_path, monkeypatch):
    """Test the analyze command with an output file."""
    output = tmp_path / "report.json"
    monkeypatch.setattr(sys, "argv", ["chatquant", "analyze", str(whatsapp_file), "-o", str(output)])

    main()

    with open(output, encoding="utf-8") as f:
        report = json.load(f)
    assert report["conversation"]["total_messages"] == 30


def test_cli_validate_exit_codes(whatsapp_file, tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["chatquant", "validate", str(whatsapp_file)])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0

    broken = tmp_path / "broken.json"
    broken.write_text('{"hello": "world"}', encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["chatquant", "validate", str(broken)])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1


def test_analyze_files_exits_on_bad_input(tmp_path):
    """Test that decode and read errors end the CLI with status 1."""
    broken = tmp_path / "broken.json"
    broken.write_text('{"hello": "world"}', encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        analyze_files([broken])
    assert exc_info.value.code == 1

    with pytest.raises(SystemExit):
        analyze_files([tmp_path / "missing.json"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
