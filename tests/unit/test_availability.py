import pytest

from petcatalog.adapters.html_document import load_document
from petcatalog.errors import StructuralParseError
from petcatalog.generators.combination_generator import CombinationGenerator
from petcatalog.parsers.availability import AvailabilityParser


@pytest.fixture
def parser() -> AvailabilityParser:
    return AvailabilityParser(available_marker="swatchAvailable", permissive_secondary=True)


@pytest.fixture
def combinations(flavor_size_dimensions: list) -> list:
    return CombinationGenerator().generate(flavor_size_dimensions)


def test_slot_markers_and_primary_override(parser: AvailabilityParser, twister_html: str) -> None:
    availability = parser.parse_availability(load_document(twister_html), "flavor")

    assert availability == {
        "flavor:Chicken": True,
        "flavor:Beef": False,
        "size:Small": True,
        "size:Large": False,
    }


def test_selected_primary_is_available_without_any_marker(
    parser: AvailabilityParser, unmarked_primary_html: str
) -> None:
    availability = parser.parse_availability(load_document(unmarked_primary_html), "flavor")

    assert availability == {"flavor:Chicken": True, "flavor:Beef": False}


def test_without_selected_primary_literal_markers_stand(parser: AvailabilityParser, twister_html: str) -> None:
    html = twister_html.replace('<span class="inline-twister-dim-title-value">Chicken</span>', "")
    availability = parser.parse_availability(load_document(html), "flavor")

    assert availability["flavor:Chicken"] is True
    assert availability["flavor:Beef"] is False


def test_missing_twister_root_raises(parser: AvailabilityParser) -> None:
    with pytest.raises(StructuralParseError):
        parser.parse_availability(load_document("<div>nothing</div>"), "flavor")


def test_apply_selects_and_deselects_within_group(parser: AvailabilityParser, combinations: list) -> None:
    availability = {
        "flavor:Chicken": True,
        "flavor:Beef": False,
        "size:Small": True,
        "size:Large": False,
    }
    before = {"Chicken_Large", "Beef_Small"}

    after = parser.apply_availability(
        availability, combinations, group_name="Chicken", primary_dimension_name="flavor", selected=before
    )

    assert after == {"Chicken_Small", "Beef_Small"}
    assert before == {"Chicken_Large", "Beef_Small"}


def test_single_unavailable_pair_vetoes_combination(parser: AvailabilityParser, combinations: list) -> None:
    availability = {"flavor:Chicken": True, "size:Small": False}

    after = parser.apply_availability(
        availability,
        combinations,
        group_name="Chicken",
        primary_dimension_name="flavor",
        selected={"Chicken_Small"},
    )

    assert "Chicken_Small" not in after
    assert "Chicken_Large" in after


def test_missing_primary_data_uses_group_name(parser: AvailabilityParser, combinations: list) -> None:
    after = parser.apply_availability({}, combinations, group_name="Chicken", primary_dimension_name="flavor")

    assert after == {"Chicken_Small", "Chicken_Large"}


def test_missing_secondary_data_in_strict_mode(combinations: list) -> None:
    strict = AvailabilityParser(permissive_secondary=False)
    availability = {"flavor:Chicken": True, "size:Small": True}

    after = strict.apply_availability(
        availability, combinations, group_name="Chicken", primary_dimension_name="flavor"
    )

    assert after == {"Chicken_Small"}


def test_evaluate_combination_reports_reasons(parser: AvailabilityParser, combinations: list) -> None:
    chicken_large = next(c for c in combinations if c.id == "Chicken_Large")
    decision = parser.evaluate_combination(
        {"flavor:Chicken": True, "size:Large": False}, chicken_large, "Chicken", "flavor"
    )

    assert decision.available is False
    assert decision.reasons[-1] == "size:Large is explicitly unavailable"
