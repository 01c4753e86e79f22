import sys
from datetime import date
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from tools.errors import NoDataError, UnknownSymptomError
from tools.health_schema import Day, Symptom, TrackedReading
from tools.scoring import compute_day_score


def make_day(**values) -> Day:
    return Day(
        date=date(2024, 1, 1),
        readings={k: TrackedReading(symptom_id=k, value=v) for k, v in values.items()},
    )


CATALOG = [
    Symptom(id="sleep", name="Sleep", higher_is_better=False, weight=1),
    Symptom(id="mood", name="Mood", higher_is_better=True, weight=0.5),
]


def test_weighted_score_example():
    # normalised values 8 and 8 -> (8*1 + 8*0.5) / 1.5
    assert compute_day_score(make_day(sleep=2, mood=8), CATALOG) == 8.0


def test_weights_change_the_average():
    # sleep 10 - 0 = 10 (w 1), mood 4 (w 0.5) -> 12 / 1.5 = 8.0; unweighted would be 7.0
    assert compute_day_score(make_day(sleep=0, mood=4), CATALOG) == 8.0


@pytest.mark.parametrize("weight", [0.1, 0.3, 0.7, 1.0])
@pytest.mark.parametrize("value", [0, 3, 7, 10])
def test_single_reading_ignores_weight(weight, value):
    catalog = [Symptom(id="pain", name="Pain", weight=weight)]
    assert compute_day_score(make_day(pain=value), catalog) == round(10 - value, 1)


def test_result_is_rounded_to_one_decimal():
    catalog = [Symptom(id=k, name=k, higher_is_better=True) for k in ("a", "b", "c")]
    assert compute_day_score(make_day(a=1, b=2, c=2), catalog) == 1.7


def test_independent_of_catalog_and_reading_order():
    forward = make_day(sleep=3, mood=6)
    backward = Day(
        date=date(2024, 1, 1),
        readings={
            "mood": TrackedReading(symptom_id="mood", value=6),
            "sleep": TrackedReading(symptom_id="sleep", value=3),
        },
    )
    expected = compute_day_score(forward, CATALOG)
    assert compute_day_score(backward, CATALOG) == expected
    assert compute_day_score(forward, list(reversed(CATALOG))) == expected
    assert compute_day_score(forward, {s.id: s for s in CATALOG}) == expected


def test_empty_day_has_no_score():
    with pytest.raises(NoDataError):
        compute_day_score(make_day(), CATALOG)


def test_unknown_symptom_fails_fast():
    with pytest.raises(UnknownSymptomError) as info:
        compute_day_score(make_day(sleep=2, headache=5), CATALOG)
    assert info.value.symptom_id == "headache"
