import pytest

from clubstats.analysis.computed import (
    WHOLE_MATCH_TOTALS,
    compute_match_stats,
    pass_string_counts,
    whole_match_value,
    with_computed_stats,
)
from clubstats.classification.classifier import is_computed_field
from clubstats.normalization.canonicalizer import canonicalize
from clubstats.normalization.deduplicator import deduplicate

FULL_MATCH = {
    "Goals For (1st)": 1,
    "Goals For (2nd)": 2,
    "Goals For": 9,
    "Shots For (1st)": 4,
    "Shots For (2nd)": 3,
    "Goals Against (1st)": 0,
    "Goals Against (2nd)": 1,
    "Shots Against (1st)": 2,
    "Shots Against (2nd)": 2,
    "Passes For": 300,
    "Passes Against": 200,
    "Possession Mins (1st)": 15,
    "Possession Mins (2nd)": 15,
    "Opp Possession Mins (1st)": 10,
    "Opp Possession Mins (2nd)": 10,
    "3-pass String": 10,
    "5-pass String": 4,
    "Opp 4-pass Strings": 5,
    "Inside Box Attempts": 60,
}


@pytest.fixture
def stats():
    return compute_match_stats(FULL_MATCH)


def test_whole_match_totals_sum_the_halves(stats):
    assert stats["Goals For"] == 3
    assert stats["Goals Against"] == 1
    assert stats["Shots For"] == 7
    assert stats["Shots Against"] == 4
    assert stats["Passes For"] == 300


def test_total_attempts_are_goals_plus_shots_per_half(stats):
    assert stats["Total Attempts (1st)"] == 5
    assert stats["Total Attempts (2nd)"] == 5
    assert stats["Total Attempts"] == 10
    assert stats["Opp Total Attempts"] == 5


def test_ratio_formulas(stats):
    assert stats["TSR"] == pytest.approx(10 / 15 * 100)
    assert stats["Opp TSR"] == pytest.approx(5 / 15 * 100)
    assert stats["Conversion Rate"] == pytest.approx(30.0)
    assert stats["Opp Conv Rate"] == pytest.approx(20.0)
    assert stats["Pass Share"] == pytest.approx(60.0)
    assert stats["Opp Pass Share"] == pytest.approx(40.0)
    assert stats["PPM"] == pytest.approx(10.0)
    assert stats["Opp PPM"] == pytest.approx(10.0)
    assert stats["Inside Box Attempts %"] == 60
    assert stats["Outside Box Attempts %"] == 40


def test_pass_string_aggregates(stats):
    assert stats["LPC"] == 5
    assert stats["Pass Strings (3-5)"] == 14
    assert stats["Pass Strings <4"] == 10
    assert stats["Pass Strings 4+"] == 4
    assert "Pass Strings (6+)" not in stats


def test_spi_counts_passes_inside_strings(stats):
    # 10 strings of 3 plus 4 strings of 5 is 50 passes out of 300
    assert stats["SPI"] == pytest.approx(50 / 300 * 100)
    assert stats["SPI (W)"] == pytest.approx((30 + 20 * 1.3) / 300 * 100)
    assert stats["Opp SPI"] == pytest.approx(20 / 200 * 100)
    assert stats["Opp SPI (W)"] == pytest.approx(20 * 1.15 / 200 * 100)


def test_derived_fields_are_canonical_and_hidden_from_forms(stats):
    derived = [name for name in stats if name not in WHOLE_MATCH_TOTALS]
    assert derived
    for name in derived:
        assert canonicalize(name) == name
        assert is_computed_field(name), name


def test_whole_match_totals_stay_editable():
    assert not any(is_computed_field(name) for name in WHOLE_MATCH_TOTALS)


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"Shots For (1st)": 2, "Shots For (2nd)": 3, "Shots For": 10}, 5),
        ({"Shots For (2nd)": 3, "Shots For": 10}, 3),
        ({"Shots For (1st)": 0, "Shots For (2nd)": "", "Shots For": 10}, 10),
        ({"Shots For": "8"}, 8.0),
        ({}, None),
    ],
)
def test_half_sum_takes_precedence_over_whole_match_entry(record, expected):
    assert whole_match_value(record, "Shots For") == expected


def test_whole_match_entries_used_when_halves_are_empty():
    stats = compute_match_stats({"Goals For": 2, "Goals For (1st)": 0, "Shots For": 8})
    assert stats == {"Goals For": 2, "Shots For": 8}


def test_nothing_to_derive_gives_nothing():
    assert compute_match_stats({"Opponent": "Rovers"}) == {}


def test_raw_spellings_flow_through_deduplication():
    record = deduplicate(
        {
            "goalsFor1stHalf": 1,
            "goalsFor2ndHalf": 1,
            "shotsFor1stHalf": 2,
            "shotsFor2ndHalf": 0,
            "3-pass string": 2,
        }
    )
    stats = compute_match_stats(record)
    assert stats["Conversion Rate"] == pytest.approx(50.0)
    assert stats["LPC"] == 3


def test_pass_string_counts_split_team_and_opponent():
    team, opponent = pass_string_counts(
        {"4-pass String": 3, "Opponent 6 pass strings": 1, "11-pass String": 2, "7-pass String": 0}
    )
    assert team == {4: 3}
    assert opponent == {6: 1}


def test_with_computed_stats_overrides_raw_totals():
    record = with_computed_stats({"Goals For": 9, "Goals For (1st)": 1, "Opponent": "Rovers"})
    assert record["Goals For"] == 1
    assert record["Opponent"] == "Rovers"
