from decimal import Decimal

import pytest

from coupon_service.coupons.exceptions import InvalidCouponRule, UnsupportedRuleKind
from coupon_service.coupons.rules import (
    BxGyProduct, BxGyRule, CartLine, CartWiseRule, ProductWiseRule, build_cart, rule_from_details
)


class TestRuleConstruction:
    def test_cart_wise_values_become_decimals(self):
        rule = CartWiseRule(threshold=100, discount=12.5)
        assert rule.threshold == Decimal("100")
        assert rule.discount == Decimal("12.5")

    @pytest.mark.parametrize("threshold, discount", [(-1, 10), (100, -5), (100, 101), (100, "abc")])
    def test_cart_wise_out_of_range(self, threshold, discount):
        with pytest.raises(InvalidCouponRule):
            CartWiseRule(threshold=threshold, discount=discount)

    def test_product_wise_rejects_fractional_product_id(self):
        with pytest.raises(InvalidCouponRule):
            ProductWiseRule(product_id=1.5, discount=10)

    def test_bxgy_needs_products_and_positive_limit(self):
        buy = [BxGyProduct(1, 2)]
        get = [BxGyProduct(2, 1)]

        with pytest.raises(InvalidCouponRule):
            BxGyRule(buy_products=[], get_products=get, repetition_limit=1)
        with pytest.raises(InvalidCouponRule):
            BxGyRule(buy_products=buy, get_products=[], repetition_limit=1)
        with pytest.raises(InvalidCouponRule):
            BxGyRule(buy_products=buy, get_products=get, repetition_limit=0)
        with pytest.raises(InvalidCouponRule):
            BxGyRule(buy_products=buy, get_products=get, repetition_limit=1, match_policy="greedy")

    def test_bxgy_product_quantity_positive(self):
        with pytest.raises(InvalidCouponRule):
            BxGyProduct(product_id=1, quantity=0)

    def test_invalid_rule_is_value_error(self):
        with pytest.raises(ValueError):
            CartWiseRule(threshold=-1, discount=10)


class TestRuleFromDetails:
    def test_bxgy_defaults_to_pooled(self):
        rule = rule_from_details("bxgy", {
            "buy_products": [{"product_id": 1, "quantity": 3}],
            "get_products": [{"product_id": 2, "quantity": 1}],
            "repetition_limit": 2,
        })

        assert isinstance(rule, BxGyRule)
        assert rule.match_policy == "pooled"
        assert rule.buy_products == (BxGyProduct(1, 3),)

    def test_unknown_type(self):
        with pytest.raises(UnsupportedRuleKind) as exc_info:
            rule_from_details("free-shipping", {})
        assert exc_info.value.error_code == "UNSUPPORTED_RULE_KIND"

    def test_missing_key(self):
        with pytest.raises(InvalidCouponRule) as exc_info:
            rule_from_details("cart-wise", {"threshold": 100})
        assert "discount" in exc_info.value.message

    def test_details_must_be_dict(self):
        with pytest.raises(InvalidCouponRule):
            rule_from_details("product-wise", [1, 10])

    def test_to_details_round_trips_product_wise(self):
        details = {"product_id": 4, "discount": 15.0}
        assert rule_from_details("product-wise", details).to_details() == details


class TestCart:
    def test_build_cart_from_dicts_and_objects(self):
        line = CartLine(product_id=2, quantity=1, price=Decimal("30"))
        cart = build_cart([{"product_id": 1, "quantity": 2, "price": 50}, line])

        assert cart == (CartLine(1, 2, Decimal("50")), line)
        assert cart[0].subtotal == Decimal("100")


class TestProductIds:
    @pytest.mark.parametrize("product_id", [0, -3])
    def test_product_wise_rejects_non_positive_id(self, product_id):
        with pytest.raises(InvalidCouponRule):
            ProductWiseRule(product_id=product_id, discount=10)

    def test_bxgy_product_rejects_non_positive_id(self):
        with pytest.raises(InvalidCouponRule):
            BxGyProduct(product_id=0, quantity=1)

    def test_bxgy_rejects_repeated_get_product(self):
        with pytest.raises(InvalidCouponRule) as exc_info:
            BxGyRule(
                buy_products=[BxGyProduct(1, 2)],
                get_products=[BxGyProduct(3, 1), BxGyProduct(3, 1)],
                repetition_limit=1,
            )
        assert "repeat" in exc_info.value.message

    def test_repeated_get_product_in_details(self):
        with pytest.raises(InvalidCouponRule):
            rule_from_details("bxgy", {
                "buy_products": [{"product_id": 1, "quantity": 2}],
                "get_products": [{"product_id": 3, "quantity": 1}, {"product_id": 3, "quantity": 1}],
                "repetition_limit": 1,
            })

    def test_same_product_may_be_bought_and_given(self):
        rule = BxGyRule(buy_products=[BxGyProduct(1, 2)], get_products=[BxGyProduct(1, 1)], repetition_limit=1)
        assert rule.get_products == (BxGyProduct(1, 1),)
