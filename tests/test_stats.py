import orjson
import pytest

from wordjumble.stats import (
    JsonFileStatsStorage,
    LifetimeStats,
    MemoryStatsStorage,
    StatsAggregator,
    rounded_average,
    skill_level,
)


def test_empty_storage_starts_from_zero(aggregator):
    assert aggregator.load() == LifetimeStats(0, 0, 0)


def test_record_accumulates_and_persists(aggregator, storage):
    scores = [57, 12, 0, 101]
    for s in scores:
        result = aggregator.record_game_result(s)
    assert result.total_score == sum(scores)
    assert result.games == len(scores)
    assert result.average == 43  # 170 / 4 = 42.5, rounded half up
    assert storage.load() == {"totalScore": 170, "games": 4, "average": 43}


def test_order_does_not_change_totals():
    a = StatsAggregator(MemoryStatsStorage())
    b = StatsAggregator(MemoryStatsStorage())
    for s in [3, 40, 17]:
        a.record_game_result(s)
    for s in [17, 3, 40]:
        b.record_game_result(s)
    assert a.current == b.current == LifetimeStats(60, 3, 20)


@pytest.mark.parametrize("total, games, expected", [
    (0, 0, 0),
    (3, 2, 2),
    (5, 2, 3),
    (10, 3, 3),
    (11, 3, 4),
])
def test_rounded_average(total, games, expected):
    assert rounded_average(total, games) == expected


def test_not_json_yields_zero_record_and_is_cleared(caplog):
    storage = MemoryStatsStorage(raw="not json")
    aggregator = StatsAggregator(storage)
    with caplog.at_level("WARNING"):
        assert aggregator.load() == LifetimeStats()
    assert "Discarding unreadable lifetime stats" in caplog.text
    assert storage.raw is None
    assert aggregator.record_game_result(9) == LifetimeStats(9, 1, 9)


@pytest.mark.parametrize("raw", [
    b"[1, 2, 3]",
    b'{"totalScore": "lots", "games": 2}',
    b'{"totalScore": 5, "games": -1}',
    b'{"games": 2}',
])
def test_ill_shaped_records_are_discarded(raw):
    assert StatsAggregator(MemoryStatsStorage(raw=raw)).load() == LifetimeStats()


def test_stored_average_is_recomputed():
    storage = MemoryStatsStorage(raw=b'{"totalScore": 90, "games": 4, "average": 999}')
    assert StatsAggregator(storage).load() == LifetimeStats(90, 4, 23)


def test_existing_record_is_continued():
    storage = MemoryStatsStorage(raw=orjson.dumps({"totalScore": 100, "games": 2, "average": 50}))
    aggregator = StatsAggregator(storage)
    aggregator.load()
    assert aggregator.record_game_result(20) == LifetimeStats(120, 3, 40)


def test_negative_scores_are_rejected(aggregator):
    with pytest.raises(ValueError):
        aggregator.record_game_result(-1)


def test_json_file_storage_round_trip(tmp_path):
    path = tmp_path / "nested" / "stats.json"
    aggregator = StatsAggregator(JsonFileStatsStorage(path))
    assert aggregator.load() == LifetimeStats()
    aggregator.record_game_result(42)

    reloaded = StatsAggregator(JsonFileStatsStorage(path)).load()
    assert reloaded == LifetimeStats(42, 1, 42)
    assert orjson.loads(path.read_bytes()) == {"totalScore": 42, "games": 1, "average": 42}


def test_json_file_storage_recovers_from_corruption(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("not json")
    aggregator = StatsAggregator(JsonFileStatsStorage(path))
    assert aggregator.load() == LifetimeStats()
    assert not path.exists()


@pytest.mark.parametrize("score, title", [
    (0, "Keep Trying"),
    (50, "Keep Trying"),
    (51, "Good"),
    (101, "Excellent"),
    (151, "Genius"),
])
def test_skill_level(score, title):
    assert skill_level(score) == title
