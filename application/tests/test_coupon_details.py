import pytest

from coupon_service.validations.coupon_details import normalize_details


def test_cart_wise_details_normalized():
    assert normalize_details("cart-wise", {"threshold": 100, "discount": 10}) == {"threshold": 100.0, "discount": 10.0}


def test_bxgy_details_get_default_policy():
    details = normalize_details("bxgy", {
        "buy_products": [{"product_id": 1, "quantity": 2}],
        "get_products": [{"product_id": 2, "quantity": 1}],
        "repetition_limit": 3,
    })

    assert details == {
        "buy_products": [{"product_id": 1, "quantity": 2}],
        "get_products": [{"product_id": 2, "quantity": 1}],
        "repetition_limit": 3,
        "match_policy": "pooled",
    }


def test_bxgy_strict_policy_kept():
    details = normalize_details("bxgy", {
        "buy_products": [{"product_id": 1, "quantity": 2}],
        "get_products": [{"product_id": 2, "quantity": 1}],
        "repetition_limit": 1,
        "match_policy": "strict",
    })
    assert details["match_policy"] == "strict"


@pytest.mark.parametrize("coupon_type, details", [
    ("cart-wise", {"threshold": 100}),
    ("cart-wise", {"threshold": 100, "discount": 150}),
    ("product-wise", {"product_id": "abc", "discount": 10}),
    ("bxgy", {"buy_products": [], "get_products": [{"product_id": 2, "quantity": 1}], "repetition_limit": 1}),
    ("bxgy", {"buy_products": [{"product_id": 1, "quantity": 0}], "get_products": [{"product_id": 2, "quantity": 1}], "repetition_limit": 1}),
    ("bxgy", {"buy_products": [{"product_id": 1, "quantity": 1}], "get_products": [{"product_id": 2, "quantity": 1}], "repetition_limit": 1, "match_policy": "greedy"}),
    ("product-wise", {"product_id": 0, "discount": 10}),
    ("product-wise", {"product_id": -1, "discount": 10}),
    ("bxgy", {"buy_products": [{"product_id": 0, "quantity": 1}], "get_products": [{"product_id": 2, "quantity": 1}], "repetition_limit": 1}),
    ("bxgy", {"buy_products": [{"product_id": 1, "quantity": 2}], "get_products": [{"product_id": 3, "quantity": 1}, {"product_id": 3, "quantity": 1}], "repetition_limit": 1}),
])
def test_invalid_details_rejected(coupon_type, details):
    with pytest.raises(ValueError) as exc_info:
        normalize_details(coupon_type, details)
    assert f"Invalid details for {coupon_type} coupon" in str(exc_info.value)


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        normalize_details("free-shipping", {})
