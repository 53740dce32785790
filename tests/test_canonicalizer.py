import pytest

from clubstats.normalization.canonicalizer import canonicalize, canonicalize_all


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("shotsAgainst1stHalf", "Shots Against (1st)"),
        ("Shots Against (1st Half)", "Shots Against (1st)"),
        ("shots_against", "Shots Against"),
        ("shotsAgainst", "Shots Against"),
        ("  Corners   Against ", "Corners Against"),
        ("Goals For 2nd Half", "Goals For (2nd)"),
        ("cornersFor1st Half", "Corners For (1st)"),
        ("goalsForSecondHalf", "Goals For (2nd)"),
        ("Shots For (First Half)", "Shots For (1st)"),
        ("shots_against_1st_half", "Shots Against (1st)"),
        ("Shots Against(1st)", "Shots Against (1st)"),
        ("goals", "Goals"),
    ],
)
def test_spellings_fold_to_canonical_name(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("passed comp (1st half)", "Passes Comp (1st)"),
        ("Passed Completed", "Passes Completed"),
        ("opp passed completed", "Opp Passes Completed"),
        ("Opp Passed Comp (2nd)", "Opp Passes Comp (2nd)"),
    ],
)
def test_typo_corrections(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "Opponent Conversion Rate",
        "opp conversion rate",
        "Opponent Conv Rate",
        "opp conv. rate",
        "Opp Conv Rate",
    ],
)
def test_opponent_conversion_rate_variants(raw):
    assert canonicalize(raw) == "Opp Conv Rate"


def test_opponent_conversion_rate_keeps_half_suffix():
    assert canonicalize("opp conversion rate (2nd half)") == "Opp Conv Rate (2nd)"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("opponent", "Opponent"),
        ("opponentName", "Opponent"),
        ("OPPONENT NAME", "Opponent"),
        ("Opponent Name", "Opponent"),
        ("matchDate", "Date"),
        ("match date", "Date"),
        ("Match Date", "Date"),
        ("teamId", "Team ID"),
        ("team_id", "Team ID"),
        ("teamName", "Team"),
        ("homeAway", "Home/Away"),
        ("home_away", "Home/Away"),
        ("HOME/AWAY", "Home/Away"),
        ("competitionType", "Competition Type"),
    ],
)
def test_synonym_table_wins_regardless_of_case(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Pass Strings 4+", "Pass Strings 4+"),
        ("pass strings (3-5)", "Pass Strings (3-5)"),
        ("Possess % (Def)", "Possess % (Def)"),
        ("Throw-in (1st)", "Throw-in (1st)"),
    ],
)
def test_pass_string_lengths_and_suffixes_untouched(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("xG", "xG"),
        ("oppXg", "Opp xG"),
        ("TSR", "TSR"),
        ("match_id", "Match ID"),
    ],
)
def test_stat_acronyms_keep_their_casing(raw, expected):
    assert canonicalize(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "\t"])
def test_blank_names_pass_through_trimmed(raw):
    assert canonicalize(raw) == ""


IDEMPOTENCE_FIXTURES = [
    "shotsAgainst1stHalf",
    "Shots Against (1st Half)",
    "shots_against__2nd_half",
    "oppConversion Rate",
    "opp_conversion_rate",
    "For1st Half",
    "Passed Comp",
    "Pass Strings 4+",
    "pass strings (3–5)",
    "possess % (def)",
    "Pass % By Zone (Att)",
    "xGFor",
    "Opp xG (1st)",
    "team id",
    "TEAM_NAME",
    "Match Date",
    "Goals For 1st",
    "a__b  c",
    "(1st half)",
    "Home/Away",
    "notes",
    "Weird(Thing)",
    "123",
]


@pytest.mark.parametrize("raw", IDEMPOTENCE_FIXTURES)
def test_canonicalize_is_idempotent(raw):
    once = canonicalize(raw)
    assert canonicalize(once) == once


def test_canonicalize_all_keeps_order_and_duplicates():
    assert canonicalize_all(["shotsFor", "Shots For", "date"]) == [
        "Shots For",
        "Shots For",
        "Date",
    ]
