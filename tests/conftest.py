"""Shared HTML fixtures and environment for the test suite."""

import os

os.environ.setdefault("CATALOG_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest

from petcatalog.adapters.catalog_store import InMemoryCatalogStore
from petcatalog.models.catalog import OptionDimension


TWISTER_HTML = """
<div id="twister-plus-inline-twister">
  <div id="inline-twister-row-flavor">
    <div id="inline-twister-dim-title-flavor">
      <span class="a-color-secondary">Flavor Name:</span>
      <span class="inline-twister-dim-title-value">Chicken</span>
    </div>
    <ul role="radiogroup">
      <li data-csa-c-slot-id="inline-twister-swatch-swatchAvailable-0">
        <span class="swatch-title-text-display">Chicken</span>
      </li>
      <li>
        <a href="/dp/B0BEEF"><span class="swatch-title-text-display">Beef</span></a>
      </li>
    </ul>
  </div>
  <div id="inline-twister-row-size">
    <div id="inline-twister-dim-title-size">
      <span class="a-color-secondary">Size:</span>
    </div>
    <ul role="radiogroup">
      <li data-csa-c-slot-id="inline-twister-swatch-swatchAvailable-1">
        <span class="swatch-title-text-display">Small</span>
      </li>
      <li data-csa-c-slot-id="inline-twister-swatch-swatchUnavailable-2">
        <span class="swatch-title-text-display">Large</span>
      </li>
    </ul>
  </div>
</div>
"""

# Primary value selected, no slot markers anywhere in the primary row
UNMARKED_PRIMARY_HTML = """
<div id="twister-plus-inline-twister">
  <div id="inline-twister-row-flavor">
    <div id="inline-twister-dim-title-flavor">
      <span class="a-color-secondary">Flavor:</span>
      <span class="inline-twister-dim-title-value">Chicken</span>
    </div>
    <ul role="radiogroup">
      <li><span class="swatch-title-text">Chicken</span></li>
      <li><a href="/dp/B0BEEF"><span class="swatch-title-text">Beef</span></a></li>
    </ul>
  </div>
</div>
"""

PRODUCT_PAGE_HTML = """
<html>
<body>
  <span id="productTitle">  Acme "Healthy" Adult Dry Dog Food  </span>
  <div id="imgTagWrapperId" class="imgTagWrapper">
    <img id="landingImage"
         src="https://m.media-amazon.com/images/I/71abc._AC_SX679_.jpg"
         data-old-hires="https://m.media-amazon.com/images/I/71abc._AC_SL1500_.jpg">
  </div>
  <table id="productDetails_techSpec_section_1" class="a-keyvalue prodDetTable">
    <tr>
      <th class="a-color-secondary a-size-base prodDetSectionEntry">UPC</th>
      <td class="a-size-base prodDetAttrValue">012345678905 012345678912</td>
    </tr>
    <tr><th>ASIN</th><td>B0TESTASIN</td></tr>
    <tr><th>Is Discontinued By Manufacturer</th><td>No</td></tr>
    <tr><th>Brand Name</th><td>Acme Pet</td></tr>
    <tr><th>Item Form</th><td>Dry</td></tr>
    <tr><th>Flavor</th><td>Chicken</td></tr>
    <tr><th>Special Ingredients</th><td>Grain Free, Chicken</td></tr>
    <tr><th>Manufacturer</th><td>Acme Pet Foods</td></tr>
    <tr><th>Item Weight</th><td>30 Pounds</td></tr>
    <tr><th>Product Dimensions</th><td>24 x 16 x 5 inches</td></tr>
  </table>
  <div id="nic-ingredients-content">
    <span>Chicken, Brown Rice,   Peas</span>
  </div>
  <p>Questions? UPC: 012345678905</p>
</body>
</html>
"""


@pytest.fixture
def twister_html() -> str:
    return TWISTER_HTML


@pytest.fixture
def unmarked_primary_html() -> str:
    return UNMARKED_PRIMARY_HTML


@pytest.fixture
def product_page_html() -> str:
    return PRODUCT_PAGE_HTML


@pytest.fixture
def flavor_size_dimensions() -> list:
    return [
        OptionDimension(name="flavor", display_name="Flavor", values=["Chicken", "Beef"]),
        OptionDimension(name="size", display_name="Size", values=["Small", "Large"]),
    ]


@pytest.fixture
def seeded_store() -> InMemoryCatalogStore:
    """Catalog with a stored "flavor" option type holding Chicken and Lamb."""
    return InMemoryCatalogStore(tables={
        "product_options": [
            {"id": 1, "name": "flavor", "label": "Flavor", "data_type": "select", "unit": None, "options": []},
        ],
        "option_values": [
            {"id": 1, "option_type_id": 1, "value": "Chicken", "label": "Chicken"},
            {"id": 2, "option_type_id": 1, "value": "Lamb", "label": "Lamb"},
        ],
    })
