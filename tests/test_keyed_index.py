from __future__ import annotations

from pitstop_scatter.join.keyed_index import KeyedIndex, TwoLevelIndex, field_key


def _races() -> list[dict[str, object]]:
    return [
        {"raceId": "1", "name": "Bahrain"},
        {"raceId": "2", "name": "Monaco"},
        {"raceId": "1", "name": "Bahrain duplicate"},
    ]


def test_build_groups_every_record_under_its_own_key() -> None:
    records = _races()
    index = KeyedIndex.build(records, field_key("raceId"))

    for record in records:
        assert record in index.get(record["raceId"])
    assert all(record["raceId"] == "2" for record in index.get("2"))
    assert len(index) == 2


def test_groups_keep_input_order() -> None:
    index = KeyedIndex.build(_races(), field_key("raceId"))

    names = [record["name"] for record in index.get("1")]
    assert names == ["Bahrain", "Bahrain duplicate"]


def test_missing_key_returns_empty_sequence() -> None:
    index = KeyedIndex.build(_races(), field_key("raceId"))

    assert index.get("404") == ()
    assert "404" not in index


def test_keys_are_coerced_to_strings() -> None:
    index = KeyedIndex.build([{"driverId": 10, "surname": "Vettel"}], field_key("driverId"))

    assert index.get("10")[0]["surname"] == "Vettel"
    assert index.get(10)[0]["surname"] == "Vettel"
    assert 10 in index
    assert list(index.keys()) == ["10"]


def test_lookups_do_not_mutate_index() -> None:
    index = KeyedIndex.build(_races(), field_key("raceId"))
    before = {key: index.get(key) for key in index.keys()}

    index.get("missing")
    index.get("1")

    assert {key: index.get(key) for key in index.keys()} == before


def test_two_level_index_resolves_by_race_then_driver() -> None:
    results = [
        {"raceId": "1", "driverId": "10", "constructorId": "99"},
        {"raceId": "1", "driverId": "11", "constructorId": "98"},
        {"raceId": 2, "driverId": 10, "constructorId": "97"},
    ]
    index = TwoLevelIndex.build(results, field_key("raceId"), field_key("driverId"))

    assert index.get("1", "10")[0]["constructorId"] == "99"
    assert index.get("1", 11)[0]["constructorId"] == "98"
    assert index.get("2", "10")[0]["constructorId"] == "97"
    assert index.get("1", "12") == ()
    assert index.get("3", "10") == ()
    assert len(index.get_group("1")) == 2
    assert len(index) == 2
