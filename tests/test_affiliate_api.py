import httpx
import pytest

from aliexpress_offers.core.exceptions import AffiliateApiError, ProductNotFoundError
from aliexpress_offers.core.signature import generate_api_signature
from aliexpress_offers.services.affiliate_api import (
    AffiliateApiClient,
    compute_discount,
    normalize_shop_url,
)

from conftest import PRODUCT_ID

def detail_response(**product):
    return {
        "aliexpress_affiliate_productdetail_get_response": {
            "resp_result": {"result": {"products": {"product": [product]}}}
        }
    }

def link_response(*links):
    return {
        "aliexpress_affiliate_link_generate_response": {
            "resp_result": {
                "result": {"promotion_links": {"promotion_link": [{"promotion_link": link} for link in links]}}
            }
        }
    }

def make_client(handler, settings) -> AffiliateApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AffiliateApiClient(http_client, settings, app_key="500100", app_secret="test-secret", tracking_id="default")

def test_compute_discount_from_prices():
    assert compute_discount("$40.00 USD", "$20.00 USD") == "50.0%"
    assert compute_discount("19.99", "9.99") == "50.0%"
    assert compute_discount("30", "20") == "33.3%"

def test_compute_discount_defaults_to_zero():
    assert compute_discount("N/A", "$20.00 USD") == "0%"
    assert compute_discount("$40.00 USD", "N/A") == "0%"
    assert compute_discount("0", "10") == "0%"
    assert compute_discount("1.2.3", "1") == "0%"

def test_normalize_shop_url():
    assert normalize_shop_url("https://www.aliexpress.com/store/1102345678/pages/all-items.html") == (
        "https://m.aliexpress.com/store/1102345678?shopId=1102345678"
    )
    assert normalize_shop_url("https://www.aliexpress.com/store/912?spm=abc") == (
        "https://m.aliexpress.com/store/912?shopId=912"
    )
    assert normalize_shop_url("https://shop.example.com/") == "https://shop.example.com/"
    assert normalize_shop_url(None) == "N/A"

@pytest.mark.asyncio
async def test_get_product_details_parses_fields(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=detail_response(
            product_title="Wireless Earbuds",
            target_sale_price="20.00",
            target_original_price="40.00",
            shop_name="Gadget Store",
            product_score="4.8",
            shop_url="https://www.aliexpress.com/store/1102345678",
            first_level_category_name="Consumer Electronics",
            commission_rate="7.0%",
            lastest_volume=1520,
            product_main_image_url="https://ae01.alicdn.com/kf/abc.jpg",
        ))

    client = make_client(handler, settings)
    metadata = await client.get_product_details(PRODUCT_ID)

    assert metadata.title == "Wireless Earbuds"
    assert metadata.price == "20.00 USD"
    assert metadata.original_price == "40.00 USD"
    assert metadata.discount == "50.0%"
    assert metadata.store_name == "Gadget Store"
    assert metadata.evaluate_rate == "4.8"
    assert metadata.shop_url == "https://m.aliexpress.com/store/1102345678?shopId=1102345678"
    assert metadata.category_name == "Consumer Electronics"
    assert metadata.commission_rate == "7.0%"
    assert metadata.orders == "1520"
    assert metadata.image_url == "https://ae01.alicdn.com/kf/abc.jpg"
    assert metadata.shipping_fees == "Free Shipping"

    request = seen[0]
    assert request.method == "POST"
    form = httpx.QueryParams(request.content.decode())
    assert form["method"] == "aliexpress.affiliate.productdetail.get"
    assert form["product_ids"] == PRODUCT_ID
    assert form["target_currency"] == "USD"
    assert form["target_language"] == "EN"
    assert form["v"] == "2.0"
    assert form["tracking_id"] == "default"
    unsigned = {key: value for key, value in form.items() if key != "sign"}
    assert form["sign"] == generate_api_signature(unsigned, "test-secret")

@pytest.mark.asyncio
async def test_get_product_details_prefers_api_discount(settings):
    def handler(request):
        return httpx.Response(200, json=detail_response(
            product_title="Lamp", target_sale_price="5", target_original_price="10", target_discount="45%",
        ))

    metadata = await make_client(handler, settings).get_product_details(PRODUCT_ID)
    assert metadata.discount == "45%"

@pytest.mark.asyncio
async def test_get_product_details_placeholders_for_missing_fields(settings):
    def handler(request):
        return httpx.Response(200, json={
            "aliexpress_affiliate_productdetail_get_response": {
                "resp_result": {"result": {"products": {"product": {"app_sale_price": "3.50"}}}}
            }
        })

    metadata = await make_client(handler, settings).get_product_details(PRODUCT_ID)
    assert metadata.title == "Unknown Product"
    assert metadata.price == "3.50 USD"
    assert metadata.original_price == "N/A"
    assert metadata.discount == "0%"
    assert metadata.store_name == "Unknown Store"
    assert metadata.image_url is None

@pytest.mark.asyncio
async def test_get_product_details_raises_on_error_response(settings):
    def handler(request):
        return httpx.Response(200, json={"error_response": {"code": "IncompleteSignature", "msg": "Invalid signature"}})

    with pytest.raises(AffiliateApiError, match="Invalid signature"):
        await make_client(handler, settings).get_product_details(PRODUCT_ID)

@pytest.mark.asyncio
async def test_get_product_details_raises_on_empty_products(settings):
    def empty_handler(request):
        return httpx.Response(200, json={
            "aliexpress_affiliate_productdetail_get_response": {"resp_result": {"result": {"products": {"product": []}}}}
        })

    with pytest.raises(ProductNotFoundError):
        await make_client(empty_handler, settings).get_product_details(PRODUCT_ID)

@pytest.mark.asyncio
async def test_get_product_details_raises_on_invalid_json(settings):
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(AffiliateApiError):
        await make_client(handler, settings).get_product_details(PRODUCT_ID)

@pytest.mark.asyncio
async def test_generate_affiliate_link_returns_first_link(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=link_response("https://s.click.aliexpress.com/e/_first", "https://s.click.aliexpress.com/e/_second"))

    link = await make_client(handler, settings).generate_affiliate_link("https://www.aliexpress.com/item/1.html")

    assert link == "https://s.click.aliexpress.com/e/_first"
    params = seen[0].url.params
    assert seen[0].method == "GET"
    assert params["method"] == "aliexpress.affiliate.link.generate"
    assert params["promotion_link_type"] == "0"
    assert params["source_values"] == "https://www.aliexpress.com/item/1.html"
    assert params["sign_method"] == "sha256"

@pytest.mark.asyncio
async def test_generate_affiliate_link_returns_none_on_failures(settings):
    def empty(request):
        return httpx.Response(200, json=link_response())

    def api_error(request):
        return httpx.Response(200, json={"error_response": {"msg": "App key invalid"}})

    def network_error(request):
        raise httpx.ReadTimeout("timed out", request=request)

    def not_json(request):
        return httpx.Response(200, text="nope")

    for handler in (empty, api_error, network_error, not_json):
        assert await make_client(handler, settings).generate_affiliate_link("https://x.aliexpress.com/") is None

@pytest.mark.asyncio
async def test_generate_affiliate_link_returns_none_on_unexpected_error(settings):
    def handler(request):
        raise RuntimeError("transport exploded")

    assert await make_client(handler, settings).generate_affiliate_link("https://x.aliexpress.com/") is None
