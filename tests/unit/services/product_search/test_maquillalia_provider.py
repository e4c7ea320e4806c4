"""Tests for the Maquillalia provider."""

from decimal import Decimal

import pytest

from makeup_comparator.models.search_models import SearchConfiguration
from makeup_comparator.services.product_search.models import (
    NotEnoughSimilarity,
    NotFound,
)
from makeup_comparator.services.product_search.providers.maquillalia import (
    ITEMS_PER_PAGE,
    MaquillaliaProvider,
    get_name_without_tone,
    get_tone_name,
    split_title,
)
from makeup_comparator.services.product_search.scraping import parse_document

BASE_URL = "https://www.maquillalia.com/"
VINYL_INK = "Maybelline - Labial líquido SuperStay Vinyl Ink"


def search_url(query: str, page: int) -> str:
    return f"{BASE_URL}search.php?buscar={query}&page={page}"


def listing_row(title: str, href: str) -> str:
    return f'<div><h3 class="Title"><a href="{href}">{title}</a></h3></div>'


def listing_page(rows, total: int) -> str:
    return f"""
    <html><body>
        <div class="NumPro"><strong>{total}</strong> productos</div>
        <div class="ListProds">{"".join(rows)}</div>
    </body></html>
    """


NO_RESULTS_PAGE = """
<html><body>
    <div class="msje-wrng"><div class="msje-icon"></div>No hay resultados</div>
</body></html>
"""


def price_block(standard: str, sales: str = "", tbody: bool = False) -> str:
    if sales:
        prices = f"<del>{standard}</del><strong>{sales}</strong>"
    else:
        prices = f"<strong>{standard}</strong>"
    row = f'<tr><td><div class="Price">{prices}</div></td></tr>'
    if tbody:
        row = f"<tbody>{row}</tbody>"
    return f"<table>{row}</table>"


def product_page(title: str, body: str = "", rating: str = "4.5") -> str:
    return f"""
    <html><body>
        <h1 class="Title">{title}</h1>
        {body}
        <div class="Rating"><span class="Stars" data-rating="{rating}"></span></div>
    </body></html>
    """


@pytest.fixture()
def provider() -> MaquillaliaProvider:
    return MaquillaliaProvider(max_workers=4)


class TestTitleSplitting:
    """Test cases for the {Brand} - {Name} - {Tone} convention."""

    def test_name_without_tone(self) -> None:
        assert get_name_without_tone(f"{VINYL_INK} - 35: Pink") == VINYL_INK

    def test_name_without_tone_collapses_spaces(self) -> None:
        assert (
            get_name_without_tone("Maybelline  -   Labial  líquido SuperStay Vinyl Ink - 35")
            == VINYL_INK
        )

    def test_name_without_tone_keeps_titles_without_tone(self) -> None:
        assert get_name_without_tone(VINYL_INK) == VINYL_INK

    def test_tone_name(self) -> None:
        assert get_tone_name(f"{VINYL_INK} - 35: Pink") == "35: Pink"

    def test_tone_name_may_contain_hyphens(self) -> None:
        assert get_tone_name(f"{VINYL_INK} - Rose-Gold") == "Rose-Gold"
        assert get_tone_name(f"{VINYL_INK} - Rose - Gold") == "Rose - Gold"

    def test_tone_name_missing(self) -> None:
        assert get_tone_name(VINYL_INK) is None

    def test_split_title(self) -> None:
        assert split_title("Anti-age - Sérum - 30 ml") == ["Anti-age", "Sérum", "30 ml"]


class TestSearchResultsUrls:
    """Test cases for the listing page filter."""

    def test_tones_of_the_same_product_give_one_url(self, provider, config) -> None:
        rows = [
            listing_row(f"{VINYL_INK} - {tone}", f"{BASE_URL}vinyl-{index}.html")
            for index, tone in enumerate(["10: Lippy", "20: Coy", "35: Pink", "40: Rose-Gold"])
        ]
        document = parse_document(listing_page(rows, total=4))

        urls = provider.search_results_urls(document, "super stay vinyl", config)

        assert urls == [f"{BASE_URL}vinyl-0.html"]

    def test_no_results_marker(self, provider, config) -> None:
        with pytest.raises(NotFound):
            provider.search_results_urls(parse_document(NO_RESULTS_PAGE), "taemin", config)

    def test_not_enough_similarity(self, provider) -> None:
        rows = [listing_row("Essence - Máscara de pestañas - Negro", f"{BASE_URL}m.html")]
        document = parse_document(listing_page(rows, total=1))
        config = SearchConfiguration(min_similarity=0.95, max_results=10)

        with pytest.raises(NotEnoughSimilarity):
            provider.search_results_urls(document, "Maybelline Vinyl Ink", config)


class TestHasNextPage:
    """Test cases for the pagination check."""

    def test_more_pages_remaining(self, provider) -> None:
        document = parse_document(listing_page([], total=ITEMS_PER_PAGE + 1))

        assert provider.has_next_page(document, 1)

    def test_last_page(self, provider) -> None:
        document = parse_document(listing_page([], total=ITEMS_PER_PAGE * 2))

        assert provider.has_next_page(document, 1)
        assert not provider.has_next_page(document, 2)

    def test_unknown_total_means_last_page(self, provider) -> None:
        assert not provider.has_next_page(parse_document("<html></html>"), 1)


class TestCreateProduct:
    """Test cases for product and tone page parsing."""

    def test_product_without_tones_on_sale(self, provider) -> None:
        page = product_page(f"{VINYL_INK} - 35: Pink", price_block("12,95 €", "9,95 €"))

        product = provider.create_product(parse_document(page))

        assert product.brand == "Maybelline"
        assert product.name == "Labial líquido SuperStay Vinyl Ink"
        assert product.tones is None
        assert product.price_standard == Decimal("12.95")
        assert product.price_sales == Decimal("9.95")
        assert product.rating == pytest.approx(4.5)

    def test_product_without_tones_regular_price(self, provider) -> None:
        page = product_page(VINYL_INK, price_block("12,95 €"), rating="")

        product = provider.create_product(parse_document(page))

        assert product.price_standard == Decimal("12.95")
        assert product.price_sales is None
        assert product.rating is None

    @pytest.mark.parametrize("tbody", [False, True])
    def test_prices_read_with_or_without_tbody(self, provider, tbody: bool) -> None:
        page = product_page(VINYL_INK, price_block("12,95 €", "9,95 €", tbody=tbody))

        product = provider.create_product(parse_document(page))

        assert product.price_standard == Decimal("12.95")
        assert product.price_sales == Decimal("9.95")

    def test_tones_are_fetched_from_their_pages(self, provider, fake_web) -> None:
        tones_list = """
        <ul class="familasColores">
            <li><a href="/vinyl-pink.html"></a></li>
            <li><a href="/vinyl-rose.html"></a></li>
            <li><a href="/vinyl-broken.html"></a></li>
        </ul>
        """
        fake_web.add(
            f"{BASE_URL}vinyl-pink.html",
            product_page(f"{VINYL_INK} - 35: Pink", price_block("12,95 €", "9,95 €"), "4"),
        )
        fake_web.add(
            f"{BASE_URL}vinyl-rose.html",
            product_page(f"{VINYL_INK} - 40: Rose-Gold", price_block("12,95 €")),
        )

        product = provider.create_product(
            parse_document(product_page(f"{VINYL_INK} - 35: Pink", tones_list))
        )

        assert product.name == "Labial líquido SuperStay Vinyl Ink"
        assert len(product.tones) == 2
        pink, rose = product.tones
        assert pink.name == "35: Pink"
        assert pink.url == f"{BASE_URL}vinyl-pink.html"
        assert pink.price_standard == Decimal("12.95")
        assert pink.price_sales == Decimal("9.95")
        assert pink.rating == pytest.approx(4.0)
        assert pink.available is True
        assert rose.name == "40: Rose-Gold"
        assert rose.price_sales is None
        assert fake_web.requested == [
            f"{BASE_URL}vinyl-pink.html",
            f"{BASE_URL}vinyl-rose.html",
            f"{BASE_URL}vinyl-broken.html",
        ]


class TestLookForProducts:
    """Test cases for the whole search pipeline."""

    def test_stops_at_max_results_across_pages(self, provider, fake_web) -> None:
        max_results = 21
        for page in (1, 2):
            rows = []
            for index in range(ITEMS_PER_PAGE):
                number = (page - 1) * ITEMS_PER_PAGE + index
                url = f"{BASE_URL}labial-{number}.html"
                rows.append(listing_row(f"Marca - Labial {number} - Rojo", url))
                fake_web.add(
                    url, product_page(f"Marca - Labial {number} - Rojo", price_block("5 €"))
                )
            fake_web.add(search_url("Labial", page), listing_page(rows, total=1500))

        config = SearchConfiguration(min_similarity=0.0, max_results=max_results)
        products = provider.look_for_products("Labial", config)

        assert len(products) == max_results
        assert search_url("Labial", 3) not in fake_web.requested
        assert {product.name for product in products} == {
            f"Labial {number}" for number in range(max_results)
        }

    def test_tones_spread_over_pages_are_deduplicated(self, provider, fake_web, config) -> None:
        first_rows = [
            listing_row(f"{VINYL_INK} - {index}", f"{BASE_URL}vinyl-{index}.html")
            for index in range(ITEMS_PER_PAGE)
        ]
        second_rows = [
            listing_row(f"{VINYL_INK} - 99", f"{BASE_URL}vinyl-99.html"),
            listing_row("Maybelline - Labial Color Sensational - 1", f"{BASE_URL}color.html"),
        ]
        fake_web.add(search_url("vinyl", 1), listing_page(first_rows, total=22))
        fake_web.add(search_url("vinyl", 2), listing_page(second_rows, total=22))
        fake_web.add(f"{BASE_URL}vinyl-0.html", product_page(f"{VINYL_INK} - 0"))
        fake_web.add(f"{BASE_URL}color.html", product_page("Maybelline - Labial Color Sensational - 1"))

        products = provider.look_for_products("vinyl", config)

        assert sorted(product.link for product in products) == [
            f"{BASE_URL}color.html",
            f"{BASE_URL}vinyl-0.html",
        ]

    def test_stops_at_last_page_before_max_results(self, provider, fake_web, config) -> None:
        for page, numbers in ((1, range(ITEMS_PER_PAGE)), (2, range(ITEMS_PER_PAGE, 22))):
            rows = []
            for number in numbers:
                url = f"{BASE_URL}labial-{number}.html"
                rows.append(listing_row(f"Marca - Labial {number} - Rojo", url))
                fake_web.add(url, product_page(f"Marca - Labial {number} - Rojo"))
            fake_web.add(search_url("Labial", page), listing_page(rows, total=22))

        products = provider.look_for_products("Labial", config)

        assert len(products) == 22
        assert search_url("Labial", 2) in fake_web.requested
        assert search_url("Labial", 3) not in fake_web.requested

    def test_no_results_marker_on_later_page_ends_pagination(
        self, provider, fake_web, config
    ) -> None:
        rows = []
        for number in range(ITEMS_PER_PAGE):
            url = f"{BASE_URL}labial-{number}.html"
            rows.append(listing_row(f"Marca - Labial {number} - Rojo", url))
            fake_web.add(url, product_page(f"Marca - Labial {number} - Rojo"))
        fake_web.add(search_url("Labial", 1), listing_page(rows, total=100))
        fake_web.add(search_url("Labial", 2), NO_RESULTS_PAGE)

        products = provider.look_for_products("Labial", config)

        assert {product.name for product in products} == {
            f"Labial {number}" for number in range(ITEMS_PER_PAGE)
        }
        assert search_url("Labial", 3) not in fake_web.requested

    def test_not_found(self, provider, config, fake_web) -> None:
        fake_web.add(search_url("taemin", 1), NO_RESULTS_PAGE)

        with pytest.raises(NotFound):
            provider.look_for_products("taemin", config)

        assert fake_web.requested == [search_url("taemin", 1)]

    def test_not_enough_similarity(self, provider, fake_web) -> None:
        rows = [listing_row("Essence - Máscara de pestañas - Negro", f"{BASE_URL}m.html")]
        fake_web.add(search_url("Maybelline+Vinyl+Ink", 1), listing_page(rows, total=1))
        config = SearchConfiguration(min_similarity=0.95, max_results=10)

        with pytest.raises(NotEnoughSimilarity):
            provider.look_for_products("Maybelline Vinyl Ink", config)
