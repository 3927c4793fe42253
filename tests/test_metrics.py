from plastic_audit.modules.audits.metrics import (
    CATEGORY_FIELDS,
    OTHER_CATEGORY,
    SCHOOL_DAYS_PER_YEAR,
    calculate_results,
    daily_counts,
)


def test_bottles_across_rooms_are_annualised():
    values = {
        "lunchroomPlasticBottles": "2",
        "staffroomPlasticBottles": "3",
        "officePlasticBottles": "1",
    }

    results = calculate_results(values)

    assert results.totalPlasticItems == 1140
    assert [p.model_dump() for p in results.topProblemPlastics] == [
        {"name": "Plastic bottles", "count": 1140}
    ]
    assert results.plasticCounts["Plastic bottles"] == 1140


def test_empty_form_gives_zero_total_and_no_top_items():
    results = calculate_results({})

    assert results.totalPlasticItems == 0
    assert results.topProblemPlastics == []
    assert set(results.plasticCounts) == set(CATEGORY_FIELDS)


def test_top_plastics_are_capped_at_five_largest_first():
    values = {
        "lunchroomPlasticBottles": "10",
        "lunchroomPlasticCups": "9",
        "lunchroomPlasticCutlery": "8",
        "lunchroomPlasticStraws": "7",
        "lunchroomSnackWrappers": "6",
        "lunchroomYoghurtPots": "5",
        "lunchroomClingFilm": "4",
    }

    top = calculate_results(values).topProblemPlastics

    assert [p.name for p in top] == [
        "Plastic bottles",
        "Plastic cups",
        "Plastic cutlery",
        "Plastic straws",
        "Snack wrappers",
    ]
    assert [p.count for p in top] == [c * SCHOOL_DAYS_PER_YEAR for c in (10, 9, 8, 7, 6)]


def test_ties_keep_category_order():
    values = {"toiletSoapBottles": "1", "lunchroomPlasticStraws": "1"}

    top = calculate_results(values).topProblemPlastics

    assert [p.name for p in top] == ["Plastic straws", "Soap bottles"]


def test_other_fields_share_one_bucket_only_when_used():
    assert OTHER_CATEGORY not in daily_counts({})

    counts = daily_counts({"lunchroomOther": "2", "gymOther": "3"})

    assert counts[OTHER_CATEGORY] == 5


def test_unparseable_counts_read_as_zero():
    results = calculate_results({"lunchroomPlasticBottles": "lots", "staffroomPlasticBottles": "1"})

    assert results.totalPlasticItems == SCHOOL_DAYS_PER_YEAR


def test_negative_counts_never_reduce_totals():
    results = calculate_results(
        {"lunchroomPlasticBottles": "-5", "staffroomPlasticBottles": "1", "gymPlasticBottles": "-1"}
    )

    assert results.totalPlasticItems == SCHOOL_DAYS_PER_YEAR
    assert results.plasticCounts["Plastic bottles"] == SCHOOL_DAYS_PER_YEAR


def test_results_are_idempotent():
    values = {"lunchroomPlasticCups": "4", "classroomStationery": "2", "toiletOther": "1"}

    assert calculate_results(values) == calculate_results(values)
    assert values == {"lunchroomPlasticCups": "4", "classroomStationery": "2", "toiletOther": "1"}
