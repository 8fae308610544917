from petcatalog.adapters.html_document import load_document
from petcatalog.parsers.product_details import ProductDetailsExtractor, clean_image_url, match_label


def test_details_table_fields(product_page_html: str) -> None:
    details, specifications = ProductDetailsExtractor().extract_details(load_document(product_page_html))

    assert details.populated() == {
        "item_form": "Dry",
        "brand_name": "Acme Pet",
        "flavor": "Chicken",
        "special_ingredients": "Grain Free, Chicken",
        "manufacturer": "Acme Pet Foods",
    }
    assert specifications.populated() == {
        "item_weight": "30 Pounds",
        "dimensions": "24 x 16 x 5 inches",
    }


def test_attribute_rows_alternative_format() -> None:
    html = """
    <table>
      <tr class="a-spacing-small po-item_form">
        <td><span class="a-size-base a-text-bold">Item Form</span></td>
        <td><span class="a-size-base po-break-word">Kibble</span></td>
      </tr>
      <tr class="a-spacing-small po-brand">
        <td><span class="a-size-base a-text-bold">Brand Name</span></td>
        <td><span class="a-size-base po-break-word">Acme</span></td>
      </tr>
    </table>
    """
    details, _ = ProductDetailsExtractor().extract_details(load_document(html))
    assert details.item_form == "Kibble"
    assert details.brand_name == "Acme"


def test_table_value_wins_over_attribute_row() -> None:
    html = """
    <table class="prodDetTable"><tr><th>Item Form</th><td>Dry</td></tr></table>
    <table><tr class="po-item_form">
      <td><span class="a-size-base a-text-bold">Item Form</span></td>
      <td><span class="a-size-base po-break-word">Kibble</span></td>
    </tr></table>
    """
    details, _ = ProductDetailsExtractor().extract_details(load_document(html))
    assert details.item_form == "Dry"


def test_discontinued_row_is_not_the_manufacturer() -> None:
    assert match_label("Is Discontinued By Manufacturer") is None
    assert match_label("Manufacturer") == ("details", "manufacturer")


def test_image_prefers_high_resolution_and_strips_size(product_page_html: str) -> None:
    image_url = ProductDetailsExtractor().extract_image_url(load_document(product_page_html))
    assert image_url == "https://m.media-amazon.com/images/I/71abc.jpg"


def test_image_fallback_to_any_marketplace_image() -> None:
    html = '<div><img src="https://m.media-amazon.com/images/I/81xyz._SL1500_.jpg"></div>'
    assert ProductDetailsExtractor().extract_image_url(load_document(html)) == (
        "https://m.media-amazon.com/images/I/81xyz.jpg"
    )


def test_missing_image_is_none() -> None:
    assert ProductDetailsExtractor().extract_image_url(load_document("<p>no images</p>")) is None


def test_clean_image_url_leaves_plain_urls_alone() -> None:
    assert clean_image_url("https://example.com/a/b.jpg") == "https://example.com/a/b.jpg"


def test_title_strips_quotes(product_page_html: str) -> None:
    title = ProductDetailsExtractor().extract_title(load_document(product_page_html))
    assert title == "Acme Healthy Adult Dry Dog Food"
