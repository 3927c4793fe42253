from plastic_audit.modules.audits.forms import (
    default_form_values,
    promises_defaults,
    school_info_defaults,
    validate_form,
)
from plastic_audit.modules.audits.models import WizardStep
from plastic_audit.modules.audits.schemas import Part2Data, Part4Data


def test_default_counts_start_at_zero():
    values = default_form_values(Part2Data)

    assert values["lunchroomPlasticBottles"] == "0"
    assert values["lunchroomOtherDescription"] is None


def test_required_fields_start_empty():
    assert default_form_values(Part4Data)["plasticWasteDestination"] == ""


def test_school_info_prefill():
    values = school_info_defaults("Green Valley Primary", 320)

    assert values["schoolName"] == "Green Valley Primary"
    assert values["studentCount"] == "320"
    assert values["auditDate"]


def test_missing_school_name_is_reported_on_its_field():
    values = school_info_defaults()

    validation = validate_form(WizardStep.SCHOOL_INFO, values)

    assert not validation.valid
    assert validation.errors == {"schoolName": "School name is required"}


def test_counts_accept_numbers_and_missing_values():
    validation = validate_form(
        WizardStep.LUNCHROOM_STAFFROOM, {"lunchroomPlasticBottles": 4, "staffroomPlasticCups": None}
    )

    assert validation.valid


def test_rooms_step_needs_one_selected_room():
    validation = validate_form(WizardStep.ROOMS, {"classroomPensPencils": "3"})

    assert not validation.valid
    assert validation.errors == {"selectedClassrooms": "Please select at least one room type"}


def test_waste_destination_is_required():
    validation = validate_form(WizardStep.WASTE_MANAGEMENT, {"plasticWasteDestination": ""})

    assert validation.errors == {
        "plasticWasteDestination": "Please specify where plastic waste goes"
    }


def test_results_step_is_always_valid():
    assert validate_form(WizardStep.RESULTS, None).valid


def test_blank_promise_rows_report_each_field():
    validation = validate_form(WizardStep.PROMISES, {"promises": promises_defaults()})

    assert not validation.valid
    assert validation.errors["promises.0.plasticItemType"] == "Item type required"
    assert validation.errors["promises.1.baselineQuantity"] == "Baseline must be at least 1"


def test_no_promises_is_valid():
    assert validate_form(WizardStep.PROMISES, {"promises": []}).valid
