from clubstats.analysis.completeness import (
    half_time_fields,
    has_half_time_stats,
    missing_data_info,
)
from clubstats.models.analysis import MissingDataInfo


def test_missing_data_info_reports_gaps():
    records = [
        {"Opponent": "Rovers", "Shots For": 4, "Corners": "n/a"},
        {"Opponent": "United", "Shots For": ""},
        {"Opponent": "City", "Shots For": 0},
    ]
    info = missing_data_info(records, ["Shots For", "xG", "Corners"])

    assert info.missing_columns == ["xG", "Corners"]
    assert info.affected_matches == 1
    assert info.affected_opponents == ["United"]
    assert info.completeness_percentage == 67


def test_missing_data_info_with_nothing_to_check():
    assert missing_data_info([], ["Goals"]) == MissingDataInfo()
    assert missing_data_info([{"Goals": 1}], []) == MissingDataInfo()


def test_complete_data_is_one_hundred_percent():
    info = missing_data_info([{"Goals": 1}, {"Goals": "2"}], ["Goals"])
    assert info.affected_matches == 0
    assert info.completeness_percentage == 100


def test_completeness_rounds_half_up():
    # 7 of 8 cells filled is 87.5%
    records = [{"A": 1, "B": 1}, {"A": 1, "B": 1}, {"A": 1, "B": 1}, {"A": 1, "B": None}]
    assert missing_data_info(records, ["A", "B"]).completeness_percentage == 88


def test_half_time_fields_are_canonical():
    record = {"shotsFor1stHalf": 3, "Goals Against (2nd Half)": 1, "Opponent": "Rovers"}
    assert half_time_fields(record) == ["Shots For (1st)", "Goals Against (2nd)"]


def test_has_half_time_stats_ignores_empty_placeholders():
    assert has_half_time_stats({"Shots For (1st)": 2})
    assert not has_half_time_stats({"Shots For (1st)": 0, "Corners (2nd)": ""})
    assert not has_half_time_stats({"Goals": 3})


def test_partially_numeric_cells_count_as_missing():
    records = [
        {"Opponent": "Rovers", "Possession": "45%", "Shots For": 3},
        {"Opponent": "United", "Possession": 52, "Shots For": "3 shots"},
    ]
    info = missing_data_info(records, ["Possession", "Shots For"])

    assert info.missing_columns == []
    assert info.affected_matches == 2
    assert info.affected_opponents == ["Rovers", "United"]
    assert info.completeness_percentage == 50
