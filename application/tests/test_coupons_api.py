import pytest


CART_WISE = {"type": "cart-wise", "details": {"threshold": 100, "discount": 10}, "code": "SAVE10"}
PRODUCT_WISE = {"type": "product-wise", "details": {"product_id": 1, "discount": 20}}
BXGY = {
    "type": "bxgy",
    "details": {
        "buy_products": [{"product_id": 1, "quantity": 3}, {"product_id": 2, "quantity": 3}],
        "get_products": [{"product_id": 3, "quantity": 1}],
        "repetition_limit": 2,
    },
}


def create(client, payload):
    response = client.post("/coupons", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCouponCrud:
    def test_create_and_get(self, client):
        created = create(client, CART_WISE)

        assert created["type"] == "cart-wise"
        assert created["details"] == {"threshold": 100, "discount": 10}
        assert created["is_active"] is True
        assert created["usage_count"] == 0
        assert created["code"] == "SAVE10"

        fetched = client.get(f"/coupons/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == created["id"]

    def test_create_bxgy_stores_policy(self, client):
        created = create(client, BXGY)
        assert created["details"]["match_policy"] == "pooled"

    def test_create_rejects_invalid_details(self, client):
        response = client.post("/coupons", json={"type": "cart-wise", "details": {"threshold": 100}})
        assert response.status_code == 422

    def test_create_rejects_repeated_get_product(self, client):
        details = {**BXGY["details"], "get_products": [{"product_id": 3, "quantity": 1}, {"product_id": 3, "quantity": 1}]}
        response = client.post("/coupons", json={"type": "bxgy", "details": details})
        assert response.status_code == 422

    def test_create_rejects_unknown_type(self, client):
        response = client.post("/coupons", json={"type": "free-shipping", "details": {}})
        assert response.status_code == 422

    def test_list_returns_all(self, client):
        create(client, CART_WISE)
        create(client, PRODUCT_WISE)

        response = client.get("/coupons")
        assert response.status_code == 200
        assert sorted(c["type"] for c in response.json()) == ["cart-wise", "product-wise"]

    def test_get_missing_coupon(self, client):
        response = client.get("/coupons/999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "COUPON_NOT_FOUND"

    def test_partial_update(self, client):
        created = create(client, CART_WISE)

        response = client.patch(f"/coupons/{created['id']}", json={"is_active": False, "details": {"threshold": 50, "discount": 5}})
        assert response.status_code == 200
        body = response.json()
        assert body["is_active"] is False
        assert body["details"] == {"threshold": 50, "discount": 5}
        assert body["code"] == "SAVE10"

    def test_update_type_requires_details(self, client):
        created = create(client, CART_WISE)

        response = client.patch(f"/coupons/{created['id']}", json={"type": "product-wise"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_COUPON_DETAILS"

    def test_update_rejects_details_for_other_type(self, client):
        created = create(client, CART_WISE)

        response = client.patch(f"/coupons/{created['id']}", json={"details": {"product_id": 1, "discount": 10}})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_COUPON_DETAILS"

    def test_delete(self, client):
        created = create(client, CART_WISE)

        assert client.delete(f"/coupons/{created['id']}").status_code == 204
        assert client.get(f"/coupons/{created['id']}").status_code == 404
        assert client.delete(f"/coupons/{created['id']}").status_code == 404


class TestApplicableCoupons:
    def test_lists_only_discounting_active_coupons(self, client, scenario_cart):
        cart_wise = create(client, CART_WISE)
        product_wise = create(client, PRODUCT_WISE)
        create(client, {**CART_WISE, "is_active": False})
        create(client, {**PRODUCT_WISE, "details": {"product_id": 99, "discount": 20}})
        create(client, {**CART_WISE, "expires_at": "2020-01-01T00:00:00Z"})

        response = client.post("/coupons/applicable-coupons", json={"items": scenario_cart})

        assert response.status_code == 200
        assert response.json() == {
            "applicable_coupons": [
                {"coupon_id": cart_wise["id"], "type": "cart-wise", "discount": 13.0, "description": None, "code": "SAVE10"},
                {"coupon_id": product_wise["id"], "type": "product-wise", "discount": 20.0, "description": None, "code": None},
            ]
        }

    def test_empty_when_nothing_applies(self, client):
        create(client, CART_WISE)
        response = client.post("/coupons/applicable-coupons", json={"items": [{"product_id": 5, "quantity": 1, "price": 10}]})
        assert response.json() == {"applicable_coupons": []}

    def test_rejects_bad_cart(self, client):
        response = client.post("/coupons/applicable-coupons", json={"items": [{"product_id": 1, "quantity": 0, "price": 10}]})
        assert response.status_code == 422


class TestApplyCoupon:
    def test_apply_bxgy(self, client, bxgy_cart):
        coupon = create(client, BXGY)

        response = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": bxgy_cart})

        assert response.status_code == 200
        updated_cart = response.json()["updated_cart"]
        assert [item["total_discount"] for item in updated_cart["items"]] == [0, 0, 25]
        assert updated_cart["total_price"] == 440
        assert updated_cart["total_discount"] == 25
        assert updated_cart["final_price"] == 415

    def test_apply_increments_usage(self, client, scenario_cart):
        coupon = create(client, {**CART_WISE, "max_usage": 1})

        first = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": scenario_cart})
        assert first.status_code == 200
        assert first.json()["updated_cart"]["final_price"] == 117
        assert client.get(f"/coupons/{coupon['id']}").json()["usage_count"] == 1

        second = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": scenario_cart})
        assert second.status_code == 400
        assert second.json()["error_code"] == "USAGE_LIMIT_EXCEEDED"
        assert client.get(f"/coupons/{coupon['id']}").json()["usage_count"] == 1

    def test_apply_expired(self, client, scenario_cart):
        coupon = create(client, {**CART_WISE, "expires_at": "2020-01-01T00:00:00Z"})

        response = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": scenario_cart})

        assert response.status_code == 400
        assert response.json() == {"error_code": "COUPON_EXPIRED", "message": "Coupon has expired"}

    @pytest.mark.parametrize("payload, error_code", [
        ({**CART_WISE, "is_active": False}, "COUPON_INACTIVE"),
        ({**CART_WISE, "min_cart_value": 500}, "MIN_CART_VALUE_NOT_MET"),
    ])
    def test_apply_rejections(self, client, scenario_cart, payload, error_code):
        coupon = create(client, payload)
        response = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": scenario_cart})

        assert response.status_code == 400
        assert response.json()["error_code"] == error_code

    def test_apply_missing_coupon(self, client, scenario_cart):
        response = client.post("/coupons/apply-coupon/999", json={"items": scenario_cart})
        assert response.status_code == 404
        assert response.json()["error_code"] == "COUPON_NOT_FOUND"

    def test_apply_below_threshold_gives_zero_discount(self, client):
        coupon = create(client, CART_WISE)
        response = client.post(f"/coupons/apply-coupon/{coupon['id']}", json={"items": [{"product_id": 1, "quantity": 1, "price": 10}]})

        assert response.status_code == 200
        assert response.json()["updated_cart"]["total_discount"] == 0
        assert response.json()["updated_cart"]["final_price"] == 10


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]
