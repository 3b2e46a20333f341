"""End-to-end tests through the FastAPI app with the memory backend and a fake AI client."""
from __future__ import annotations

import random

from fastapi.testclient import TestClient

from financeai.app import create_app
from financeai.repositories import MemoryRepository

from conftest import FakeContentClient, TickingClock, make_settings


def _blog_body(slug: str, **overrides) -> dict:
    body = {
        "title": f"Post {slug}",
        "slug": slug,
        "excerpt": "Summary",
        "content": "<p>Body</p>",
        "category": "investing",
    }
    body.update(overrides)
    return body


def test_health_reports_backend(api):
    resp = api.get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "storage": "memory"}


def test_create_and_fetch_blog_by_slug(api):
    created = api.post("/api/blogs", json=_blog_body("ppf-guide", tags=["ppf"], readTime=7))

    assert created.status_code == 201
    body = created.json()
    assert body["readTime"] == 7
    assert body["seoTitle"] == "Post ppf-guide"
    assert "createdAt" in body

    fetched = api.get("/api/blogs/ppf-guide")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]
    assert fetched.json()["tags"] == ["ppf"]


def test_unknown_slug_is_404(api):
    resp = api.get("/api/blogs/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"message": "Blog post not found"}


def test_invalid_blog_is_400(api):
    resp = api.post("/api/blogs", json={"title": "Missing everything else"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid blog post data"}


def test_malformed_json_is_400(api):
    resp = api.post("/api/blogs", content=b"{oops", headers={"content-type": "application/json"})

    assert resp.status_code == 400


def test_blog_listing_filters(api):
    api.post("/api/blogs", json=_blog_body("tax-one", category="tax", title="Tax harvesting"))
    api.post("/api/blogs", json=_blog_body("feat-one", featured=True))
    api.post("/api/blogs", json=_blog_body("gold-one", category="gold", tags=["TAX free bonds"]))

    assert [p["slug"] for p in api.get("/api/blogs").json()] == ["gold-one", "feat-one", "tax-one"]
    assert [p["slug"] for p in api.get("/api/blogs", params={"featured": "true"}).json()] == ["feat-one"]
    assert [p["slug"] for p in api.get("/api/blogs", params={"category": "tax"}).json()] == ["tax-one"]
    assert [p["slug"] for p in api.get("/api/blogs", params={"search": "tax"}).json()] == ["gold-one", "tax-one"]


def test_update_and_delete_blog(api):
    post = api.post("/api/blogs", json=_blog_body("to-edit")).json()

    updated = api.put(f"/api/blogs/{post['id']}", json={"title": "Edited", "published": False})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Edited"
    assert api.get("/api/blogs").json() == []

    assert api.delete(f"/api/blogs/{post['id']}").status_code == 204
    assert api.delete(f"/api/blogs/{post['id']}").status_code == 404
    assert api.put("/api/blogs/missing", json={"title": "x"}).status_code == 404


def test_generate_blog_persists_post(api, fake_client):
    resp = api.post("/api/ai/generate-blog", json={"topic": "Tax Saving with ELSS", "category": "tax"})

    assert resp.status_code == 201
    post = resp.json()
    assert post["slug"].startswith("tax-saving-with-elss-")
    assert post["category"] == "tax"
    assert post["author"] == "AI Assistant"
    assert post["readTime"] == 6
    assert post["tags"] == ["tax", "india"]
    assert api.get(f"/api/blogs/{post['slug']}").status_code == 200
    assert fake_client.calls == {"blog": 1}


def test_generate_blog_requires_topic_and_category(api, fake_client):
    resp = api.post("/api/ai/generate-blog", json={"topic": "ELSS"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Topic and category are required"}
    assert fake_client.calls == {}


def test_budget_plan_end_to_end(api):
    resp = api.post(
        "/api/ai/budget-plan",
        json={"monthlyIncome": 75000, "expenses": {"rent": 20000, "food": 10000}, "savingsTarget": 20000},
    )

    assert resp.status_code == 200
    plan = resp.json()
    assert plan["monthlyIncome"] == 75000
    assert isinstance(plan["chartData"]["datasets"], list)
    assert plan["chartData"]["datasets"][0]["backgroundColor"]


def test_finance_advice_end_to_end(api):
    resp = api.post(
        "/api/ai/finance-advice",
        json={"income": 120000, "expenses": 70000, "savingsGoal": 2500000, "riskTolerance": "medium"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["riskTolerance"] == "medium"
    assert body["investmentPlan"]["taxSaving"] == "ELSS up to the 80C limit"
    assert body["userId"] is None


def test_finance_advice_rejects_unknown_risk(api):
    resp = api.post(
        "/api/ai/finance-advice",
        json={"income": 1, "expenses": 1, "savingsGoal": 1, "riskTolerance": "yolo"},
    )

    assert resp.status_code == 400


def test_stock_analysis_is_reused(api, fake_client):
    first = api.post("/api/ai/stock-analysis", json={"symbol": "infy", "companyName": "Infosys"}).json()
    second = api.post("/api/ai/stock-analysis", json={"symbol": "INFY", "companyName": "Infosys"}).json()

    assert first["id"] == second["id"]
    assert first["symbol"] == "INFY"
    assert fake_client.calls == {"stock": 1}
    assert [a["id"] for a in api.get("/api/ai/stock-analyses").json()] == [first["id"]]


def test_generation_failure_is_generic_500():
    app = create_app(
        make_settings(),
        repository=MemoryRepository(seed_admin=False, clock=TickingClock()),
        content_client=FakeContentClient(fail=True),
    )
    with TestClient(app) as client:
        resp = client.post("/api/ai/stock-analysis", json={"symbol": "ITC", "companyName": "ITC Ltd"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to generate stock analysis"}


def test_newsletter_subscribe_twice_is_400(api):
    first = api.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})
    second = api.post("/api/newsletter/subscribe", json={"email": "Reader@Example.com"})

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"message": "Email already subscribed"}


def test_newsletter_unsubscribe_and_count(api):
    api.post("/api/newsletter/subscribe", json={"email": "a@example.com"})
    api.post("/api/newsletter/subscribe", json={"email": "b@example.com"})
    assert api.get("/api/newsletter/count").json() == {"count": 2}

    assert api.post("/api/newsletter/unsubscribe", json={"email": "a@example.com"}).status_code == 200
    assert api.get("/api/newsletter/count").json() == {"count": 1}
    assert api.post("/api/newsletter/unsubscribe", json={"email": "zz@example.com"}).status_code == 404
    # no re-subscribe path once a record exists
    assert api.post("/api/newsletter/subscribe", json={"email": "a@example.com"}).status_code == 400


def test_newsletter_rejects_bad_email(api):
    resp = api.post("/api/newsletter/subscribe", json={"email": "not-an-email"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid email address"}


def test_register_user_hides_password(api):
    resp = api.post("/api/users", json={"username": "anika", "email": "anika@example.com", "password": "s3cretpass"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "anika"
    assert "password" not in body

    dup = api.post("/api/users", json={"username": "anika", "email": "other@example.com", "password": "s3cretpass"})
    assert dup.status_code == 400
    assert dup.json() == {"message": "Username already registered"}


def test_market_figures_are_synthetic_but_shaped(api):
    indices = api.get("/api/market/indices").json()
    gainers = api.get("/api/market/top-gainers").json()

    assert set(indices) == {"nifty", "sensex", "bankNifty"}
    assert 19695 <= indices["nifty"]["value"] <= 19796
    assert [g["symbol"] for g in gainers] == ["TATAMOTORS", "ADANIGREEN", "BHARTIARTL"]
    assert all({"price", "change", "changePercent"} <= set(g) for g in gainers)


def test_market_figures_reproducible_with_seed():
    def build():
        return create_app(
            make_settings(),
            repository=MemoryRepository(seed_admin=False),
            content_client=FakeContentClient(),
            rng=random.Random(11),
        )

    with TestClient(build()) as a, TestClient(build()) as b:
        assert a.get("/api/market/indices").json() == b.get("/api/market/indices").json()
