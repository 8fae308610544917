import pytest

from petcatalog.adapters.html_document import load_document
from petcatalog.errors import StructuralParseError
from petcatalog.models.catalog import OptionDimension
from petcatalog.parsers.options import OptionTaxonomyExtractor


def extract(html: str) -> list:
    return OptionTaxonomyExtractor().extract(load_document(html))


def test_twister_rows_become_dimensions(twister_html: str) -> None:
    dimensions = extract(twister_html)

    assert [d.name for d in dimensions] == ["flavor", "size"]
    assert dimensions[0].display_name == "Flavor Name"
    assert dimensions[0].values == ["Chicken", "Beef"]
    assert dimensions[1].display_name == "Size"
    assert dimensions[1].values == ["Small", "Large"]


def test_display_name_falls_back_to_machine_name() -> None:
    html = """
    <div id="twister-plus-inline-twister">
      <div id="inline-twister-row-color_name">
        <span class="swatch-title-text">Red</span>
      </div>
    </div>
    """
    [dimension] = extract(html)
    assert dimension.display_name == "color_name"


def test_alternate_selector_used_when_primary_finds_nothing() -> None:
    html = """
    <div id="twister-plus-inline-twister">
      <div id="inline-twister-row-size_name">
        <div class="swatch-tile"><span class="tile-text">  4 lb
          Bag </span></div>
        <div class="swatch-tile"><span class="tile-text">15 lb Bag</span></div>
      </div>
    </div>
    """
    [dimension] = extract(html)
    assert dimension.values == ["4 lb Bag", "15 lb Bag"]


def test_duplicate_values_are_skipped() -> None:
    html = """
    <div id="twister-plus-inline-twister">
      <div id="inline-twister-row-flavor">
        <span class="swatch-title-text-display">Chicken</span>
        <span class="swatch-title-text">Chicken </span>
        <span class="swatch-title-text">Beef</span>
      </div>
    </div>
    """
    [dimension] = extract(html)
    assert dimension.values == ["Chicken", "Beef"]


def test_row_without_values_is_dropped(twister_html: str) -> None:
    html = twister_html.replace(
        '<div id="inline-twister-row-size">',
        '<div id="inline-twister-row-pattern"></div><div id="inline-twister-row-size">',
    )
    assert [d.name for d in extract(html)] == ["flavor", "size"]


def test_missing_root_raises() -> None:
    with pytest.raises(StructuralParseError) as excinfo:
        extract("<div id='something-else'></div>")
    assert "twister-plus-inline-twister" in str(excinfo.value)


def test_root_without_usable_rows_raises() -> None:
    html = """
    <div id="twister-plus-inline-twister">
      <div id="inline-twister-row-flavor"><span>no swatches here</span></div>
    </div>
    """
    with pytest.raises(StructuralParseError):
        extract(html)


def test_option_dimension_normalises_values() -> None:
    dimension = OptionDimension(name="size", values=[" Small ", "Small", "", "Extra   Large"])
    assert dimension.values == ["Small", "Extra Large"]
    assert dimension.display_name == "size"
