"""
LocalBiz Directory — Review Endpoint Tests
============================================

What we test:
    ✅ Any logged-in user reviews any business; anonymous callers get 401
    ✅ Rating outside 1..5 → 400; unknown business → 500 database_error
    ✅ Rating filter outside 1..5 lists nothing; "comment": null clears a comment
    ✅ Listing per business: newest first, rating filter, sortBy/order
    ✅ Author-only update and delete
    ✅ /reviews/all carries author and business names
"""

import pytest


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def setup_business(test_client, register_user):
    """Register an owner and a reviewer and create one business."""

    async def _setup():
        owner = await register_user(name="Owner", role="ADMIN")
        reviewer = await register_user(name="Critic")
        response = await test_client.post(
            "/api/businesses",
            json={"name": "Crumbs", "category": "Bakery"},
            headers=_auth(owner["token"]),
        )
        assert response.status_code == 201
        return owner, reviewer, response.json()

    return _setup


async def _review(client, token, business_id, rating, comment=None):
    response = await client.post(
        f"/api/reviews/{business_id}",
        json={"rating": rating, "comment": comment},
        headers=_auth(token),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateReview:

    @pytest.mark.asyncio
    async def test_create(self, test_client, setup_business):
        owner, reviewer, business = await setup_business()

        review = await _review(test_client, reviewer["token"], business["id"], 5, "Great bread")

        assert review["rating"] == 5
        assert review["comment"] == "Great bread"
        assert review["businessId"] == business["id"]
        assert review["userId"] == reviewer["user"]["id"]
        assert review["user"]["name"] == "Critic"

    @pytest.mark.asyncio
    async def test_shows_up_on_business(self, test_client, setup_business):
        owner, reviewer, business = await setup_business()
        await _review(test_client, reviewer["token"], business["id"], 3)

        detail = await test_client.get(f"/api/businesses/{business['id']}")

        reviews = detail.json()["reviews"]
        assert len(reviews) == 1
        assert reviews[0]["user"]["name"] == "Critic"

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client, setup_business):
        _, _, business = await setup_business()
        response = await test_client.post(f"/api/reviews/{business['id']}", json={"rating": 4})
        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range(self, test_client, setup_business, rating):
        _, reviewer, business = await setup_business()
        response = await test_client.post(
            f"/api/reviews/{business['id']}",
            json={"rating": rating},
            headers=_auth(reviewer["token"]),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_business_is_database_error(self, test_client, register_user):
        reviewer = await register_user(name="Critic")
        response = await test_client.post(
            "/api/reviews/9999", json={"rating": 4}, headers=_auth(reviewer["token"])
        )
        assert response.status_code == 500
        assert response.json()["error"] == "database_error"
        assert "details" not in response.json()


class TestListReviews:

    @pytest.mark.asyncio
    async def test_newest_first_by_default(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        first = await _review(test_client, reviewer["token"], business["id"], 2)
        second = await _review(test_client, reviewer["token"], business["id"], 4)

        response = await test_client.get(f"/api/reviews/{business['id']}")

        assert [r["id"] for r in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_rating_filter(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        for rating in (5, 3, 5):
            await _review(test_client, reviewer["token"], business["id"], rating)

        response = await test_client.get(
            f"/api/reviews/{business['id']}", params={"rating": 5}
        )

        assert [r["rating"] for r in response.json()] == [5, 5]

    @pytest.mark.asyncio
    async def test_rating_filter_outside_range_matches_nothing(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        await _review(test_client, reviewer["token"], business["id"], 5)

        response = await test_client.get(
            f"/api/reviews/{business['id']}", params={"rating": 7}
        )

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_sort_by_rating_ascending(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        for rating in (4, 1, 3):
            await _review(test_client, reviewer["token"], business["id"], rating)

        response = await test_client.get(
            f"/api/reviews/{business['id']}", params={"sortBy": "rating", "order": "ASC"}
        )

        assert [r["rating"] for r in response.json()] == [1, 3, 4]

    @pytest.mark.asyncio
    async def test_bad_order_is_400(self, test_client, setup_business):
        _, _, business = await setup_business()
        response = await test_client.get(
            f"/api/reviews/{business['id']}", params={"order": "upward"}
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "order"

    @pytest.mark.asyncio
    async def test_unknown_business_lists_nothing(self, test_client):
        response = await test_client.get("/api/reviews/9999")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_all_reviews_carry_names(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        await _review(test_client, reviewer["token"], business["id"], 4)

        response = await test_client.get("/api/reviews/all")

        assert response.status_code == 200
        [review] = response.json()
        assert review["user"]["name"] == "Critic"
        assert review["business"]["name"] == "Crumbs"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_author_updates(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 2, "meh")

        response = await test_client.put(
            f"/api/reviews/{review['id']}",
            json={"rating": 4},
            headers=_auth(reviewer["token"]),
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 4
        assert response.json()["comment"] == "meh"

    @pytest.mark.asyncio
    async def test_null_comment_clears_it(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 3, "meh")

        response = await test_client.put(
            f"/api/reviews/{review['id']}",
            json={"comment": None},
            headers=_auth(reviewer["token"]),
        )

        assert response.status_code == 200
        assert response.json()["comment"] is None
        assert response.json()["rating"] == 3

    @pytest.mark.asyncio
    async def test_null_rating_keeps_stored_rating(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 3, "meh")

        response = await test_client.put(
            f"/api/reviews/{review['id']}",
            json={"rating": None, "comment": "better"},
            headers=_auth(reviewer["token"]),
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 3
        assert response.json()["comment"] == "better"

    @pytest.mark.asyncio
    async def test_non_author_cannot_update(self, test_client, setup_business):
        owner, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 2)

        response = await test_client.put(
            f"/api/reviews/{review['id']}", json={"rating": 5}, headers=_auth(owner["token"])
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to update this review"

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, test_client, register_user):
        user = await register_user(name="Critic")
        response = await test_client.put(
            "/api/reviews/9999", json={"rating": 5}, headers=_auth(user["token"])
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_author_deletes(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 1)

        response = await test_client.delete(
            f"/api/reviews/{review['id']}", headers=_auth(reviewer["token"])
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Review deleted successfully"}
        listing = await test_client.get(f"/api/reviews/{business['id']}")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_non_author_delete_keeps_review(self, test_client, setup_business):
        owner, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 1)

        response = await test_client.delete(
            f"/api/reviews/{review['id']}", headers=_auth(owner["token"])
        )

        assert response.status_code == 403
        listing = await test_client.get(f"/api/reviews/{business['id']}")
        assert [r["id"] for r in listing.json()] == [review["id"]]

    @pytest.mark.asyncio
    async def test_delete_without_token_is_401(self, test_client, setup_business):
        _, reviewer, business = await setup_business()
        review = await _review(test_client, reviewer["token"], business["id"], 1)
        response = await test_client.delete(f"/api/reviews/{review['id']}")
        assert response.status_code == 401
