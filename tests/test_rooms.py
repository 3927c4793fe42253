from plastic_audit.modules.audits.rooms import (
    ROOM_FLAGS,
    any_room_selected,
    apply_room_inference,
    infer_selection,
)


def test_zero_counts_as_entered():
    assert infer_selection({"gymPlasticBottles": "0"}, ["gymPlasticBottles", "gymOther"])
    assert not infer_selection({"gymPlasticBottles": ""}, ["gymPlasticBottles", "gymOther"])
    assert not infer_selection({}, ["gymPlasticBottles"])


def test_legacy_draft_flags_are_inferred_from_counts():
    legacy = {"officePlasticBottles": "2", "libraryStationery": None}

    merged = apply_room_inference(legacy)

    assert merged["selectedOffice"] is True
    assert merged["selectedLibrary"] is False
    assert set(ROOM_FLAGS) <= set(merged)
    assert "selectedOffice" not in legacy


def test_stored_flags_are_kept():
    stored = {"selectedOffice": False, "officePlasticBottles": "5", "selectedGym": None, "gymOther": "1"}

    merged = apply_room_inference(stored)

    assert merged["selectedOffice"] is False
    assert merged["selectedGym"] is True


def test_any_room_selected():
    assert not any_room_selected({})
    assert not any_room_selected({"selectedToilets": False})
    assert any_room_selected({"selectedToilets": True})
