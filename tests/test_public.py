import asyncio

from ila_beauty.config.constants import NEWSLETTER_SUBSCRIBERS


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/api/health/db").status_code == 200


def test_home_sections(client, admin_headers):
    for i in range(5):
        resp = client.post(
            "/api/admin/products",
            json={"name": f"Serum {i}", "price": 30 + i},
            headers=admin_headers,
        )
        assert resp.status_code == 201

    home = client.get("/api/public/home").json()

    assert home["hero"]["title"] == "Discover Your Natural Beauty Glow"
    assert len(home["about"]["stats"]) == 3
    assert home["categories"] == []
    assert len(home["featured_products"]) == 4
    assert [t["stage"] for t in home["reseller_program"]] == ["brown", "silver", "gold"]


def test_reseller_program(client):
    body = client.get("/api/public/reseller-program").json()

    assert body["starting_stage"] == "brown"
    assert body["requires_approval"] is True
    assert {t["stage"]: t["discount_percent"] for t in body["tiers"]} == {
        "brown": 10,
        "silver": 15,
        "gold": 20,
    }


def test_newsletter_signup_is_idempotent(client, store):
    for email in ("glow@skinmail.com", "Glow@skinmail.com"):
        resp = client.post("/api/public/newsletter", json={"email": email})
        assert resp.status_code == 200
        assert "glow@skinmail.com" in resp.json()["message"]

    subscribers = asyncio.run(store.query(NEWSLETTER_SUBSCRIBERS))
    assert [s["email"] for s in subscribers] == ["glow@skinmail.com"]


def test_newsletter_rejects_bad_email(client):
    resp = client.post("/api/public/newsletter", json={"email": "not-an-email"})
    assert resp.status_code == 422


def test_unknown_product_is_404(client):
    assert client.get("/api/public/products/0123456789abcdef01234567").status_code == 404
    assert client.get("/api/public/products/nope").status_code == 400
