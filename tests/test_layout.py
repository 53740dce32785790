from clubstats.classification.layout import (
    CATEGORY_ORDER,
    REQUIRED_FIELDS,
    organize_fields,
    split_by_side,
)
from clubstats.models.enums import Category


def test_category_order_covers_every_category_once():
    assert len(CATEGORY_ORDER) == len(set(CATEGORY_ORDER)) == len(Category)
    assert CATEGORY_ORDER[0] is Category.GAME_INFO
    assert CATEGORY_ORDER[-1] is Category.OTHER


def test_organize_fields_groups_canonical_editable_fields():
    layout = organize_fields(
        ["shotsFor1stHalf", "Opponent", "TSR", "Shots For (1st)"],
        {"shotsFor1stHalf": 4, "opponent": "Rovers"},
    )

    assert list(layout) == [
        Category.GAME_INFO,
        Category.BASIC_STATS_1ST_HALF,
        Category.BASIC_STATS_2ND_HALF,
    ]
    assert layout[Category.GAME_INFO] == {"Opponent": "Rovers"}
    first_half = layout[Category.BASIC_STATS_1ST_HALF]
    assert list(first_half)[0] == "Shots For (1st)"
    assert first_half["Shots For (1st)"] == 4
    assert first_half["Possession Mins (1st)"] == ""
    assert "TSR" not in {field for fields in layout.values() for field in fields}


def test_required_fields_always_offered():
    layout = organize_fields([])
    offered = {field for fields in layout.values() for field in fields}
    assert offered == set(REQUIRED_FIELDS)


def test_case_insensitive_duplicates_collapse_to_first_spelling():
    layout = organize_fields(["Goals For", "goals for", "GOALS_FOR"])
    assert layout[Category.OTHER] == {"Goals For": ""}


def test_split_by_side():
    team, opponent = split_by_side(
        ["Shots For (1st)", "Shots Against (1st)", "Opp Possession Mins (1st)", "Possession Mins (1st)"]
    )
    assert team == ["Shots For (1st)", "Possession Mins (1st)"]
    assert opponent == ["Shots Against (1st)", "Opp Possession Mins (1st)"]
