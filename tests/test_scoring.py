import pytest

from sdamatch.matching.scoring import (
    accessibility_score,
    bathrooms_score,
    bedrooms_score,
    budget_score,
    location_score,
    score_pair,
    sda_score,
)

from conftest import make_participant, make_property


def test_location_matches_substring_of_address():
    participant = make_participant(preferred_locations=["Ringwood"])

    assert location_score(participant, make_property(address="12 Oak St, Ringwood VIC")) == 30
    assert location_score(participant, make_property(address="5 Pine Rd, Geelong VIC")) == 0


def test_location_is_case_insensitive_and_any_preference_counts():
    participant = make_participant(preferred_locations=["geelong", "RINGWOOD"])

    assert location_score(participant, make_property(address="12 Oak St, Ringwood VIC")) == 30


def test_location_without_preferences_scores_zero():
    participant = make_participant(preferred_locations=[])

    assert location_score(participant, make_property()) == 0


@pytest.mark.parametrize(
    "rent,expected",
    [(380, 25), (400, 25), (480, 20), (500, 20), (540, 10), (550, 10), (600, 0)],
)
def test_budget_bands(rent, expected):
    participant = make_participant(max_weekly_budget=500)

    assert budget_score(participant, make_property(weekly_rent=rent)) == expected


def test_budget_requires_both_values():
    assert budget_score(make_participant(max_weekly_budget=None), make_property()) == 0
    assert budget_score(make_participant(), make_property(weekly_rent=None)) == 0


def test_bedrooms_and_bathrooms_minimums():
    participant = make_participant(min_bedrooms=2, min_bathrooms=2)

    assert bedrooms_score(participant, make_property(bedrooms=2)) == 10
    assert bedrooms_score(participant, make_property(bedrooms=1)) == 0
    assert bathrooms_score(participant, make_property(bathrooms=3)) == 10
    assert bathrooms_score(participant, make_property(bathrooms=1)) == 0


def test_unset_minimum_defaults_to_one():
    participant = make_participant(min_bedrooms=None, min_bathrooms=0)

    assert bedrooms_score(participant, make_property(bedrooms=1)) == 10
    assert bedrooms_score(participant, make_property(bedrooms=None)) == 0
    assert bathrooms_score(participant, make_property(bathrooms=1)) == 10


def test_sda_category_rule():
    participant = make_participant(sda_category="Fully Accessible")

    assert sda_score(participant, make_property(sda_category="Fully Accessible")) == 15
    assert sda_score(participant, make_property(sda_category="Robust")) == 5
    assert sda_score(participant, make_property(sda_category=None)) == 0
    assert sda_score(make_participant(sda_category=None), make_property()) == 0


def test_unrecognised_sda_category_still_scores():
    participant = make_participant(sda_category="Robust")

    assert sda_score(participant, make_property(sda_category="Robust Design")) == 5
    assert sda_score(make_participant(sda_category="robust design"), make_property(sda_category="Robust Design")) == 15


def test_sda_category_ignores_case():
    participant = make_participant(sda_category="fully accessible")

    assert sda_score(participant, make_property(sda_category="FULLY ACCESSIBLE")) == 15


def test_accessibility_partial_requirements():
    participant = make_participant(mobility_requirements={"wheelchair": True, "step_free": True})
    prop = make_property(features=["Wheelchair Accessible"])

    assert accessibility_score(participant, prop) == 5


def test_accessibility_without_requirements_is_flat_five():
    participant = make_participant(mobility_requirements={})

    assert accessibility_score(participant, make_property(features=[])) == 5
    assert accessibility_score(
        participant, make_property(features=["Wheelchair Accessible", "Wide Doorways"])
    ) == 5


def test_accessibility_false_flags_are_not_declared():
    participant = make_participant(
        mobility_requirements={"wheelchair": False, "wide_doorways": True}
    )

    assert accessibility_score(participant, make_property(features=["Wide Doorways"])) == 10
    assert accessibility_score(participant, make_property(features=[])) == 0


def test_accessibility_rounds_half_up():
    participant = make_participant(
        mobility_requirements={
            "wheelchair": True,
            "step_free": True,
            "accessible_bathroom": True,
            "wide_doorways": True,
        }
    )

    # 1/4 -> 2.5 -> 3, 3/4 -> 7.5 -> 8
    assert accessibility_score(participant, make_property(features=["Wide Doorways"])) == 3
    assert accessibility_score(
        participant,
        make_property(features=["Wide Doorways", "Step-free Entry", "Accessible Bathroom"]),
    ) == 8


def test_accessibility_feature_labels_are_exact():
    participant = make_participant(mobility_requirements={"step_free": True})

    assert accessibility_score(participant, make_property(features=["Step-free access"])) == 0
    assert accessibility_score(participant, make_property(features=["Step-free Entry"])) == 10


def test_end_to_end_perfect_match():
    participant = make_participant(
        preferred_locations=["Sydney CBD"],
        max_weekly_budget=600,
        min_bedrooms=2,
        min_bathrooms=1,
        sda_category="Robust",
        mobility_requirements={"wheelchair": True},
    )
    prop = make_property(
        address="10 King St, Sydney CBD",
        weekly_rent=480,
        bedrooms=2,
        bathrooms=1,
        sda_category="Robust",
        features=["Wheelchair Accessible"],
    )

    match = score_pair(participant, prop)

    assert match.match_score == 100
    assert match.participant_id == participant.id
    assert match.property_id == prop.id
    assert [(r.reason, r.score) for r in match.match_reasons] == [
        ("Location match", 30),
        ("Within budget", 25),
        ("SDA category match", 15),
        ("Bedroom requirements met", 10),
        ("Bathroom requirements met", 10),
        ("Accessibility features match", 10),
    ]


def test_reasons_skip_zero_factors_and_sort_descending():
    participant = make_participant(
        preferred_locations=["Geelong"],
        max_weekly_budget=500,
        sda_category="Robust",
        mobility_requirements={},
    )
    prop = make_property(weekly_rent=540, sda_category="Fully Accessible")

    match = score_pair(participant, prop)

    scores = [r.score for r in match.match_reasons]
    assert scores == sorted(scores, reverse=True)
    assert "Location match" not in {r.reason for r in match.match_reasons}
    # budget 10 + bedrooms 10 + bathrooms 10 + sda 5 + accessibility 5
    assert match.match_score == 40


def test_reason_details_describe_the_property():
    match = score_pair(make_participant(), make_property())
    details = {r.reason: r.details for r in match.match_reasons}

    assert details["Location match"] == "Property in 12 Oak St, Ringwood VIC"
    assert details["Within budget"] == "Weekly rent $380"
    assert details["Bedroom requirements met"] == "2 bedrooms available"
    assert details["SDA category match"] == "Fully Accessible category"


def test_score_is_deterministic():
    participant = make_participant()
    prop = make_property()

    first = score_pair(participant, prop)
    second = score_pair(participant, prop)

    assert first == second


@pytest.mark.parametrize(
    "participant_overrides,property_overrides",
    [
        ({}, {}),
        ({"preferred_locations": [], "max_weekly_budget": None}, {"bedrooms": 0, "bathrooms": 0}),
        ({"min_bedrooms": 5, "min_bathrooms": 4}, {"weekly_rent": 10_000}),
        ({"sda_category": "Robust", "mobility_requirements": {"wide_doorways": True}}, {"features": []}),
    ],
)
def test_score_stays_within_bounds(participant_overrides, property_overrides):
    match = score_pair(make_participant(**participant_overrides), make_property(**property_overrides))

    assert 0 <= match.match_score <= 100
