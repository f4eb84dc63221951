import pytest


@pytest.fixture
def attended(client, provider, learner, make_session):
    """A session the learner booked and the provider marked completed"""
    session = make_session(provider)
    booking = client.post("/api/bookings", json={"sessionId": session["id"]}, headers=learner["headers"]).json()
    client.put(f"/api/bookings/{booking['id']}/complete", headers=provider["headers"])
    return session


def _review(client, account, session, rating=5, **overrides):
    payload = {"sessionId": session["id"], "providerId": session["providerId"], "rating": rating}
    payload.update(overrides)
    return client.post("/api/reviews", json=payload, headers=account["headers"])


def test_review_feeds_provider_and_session_ratings(client, provider, learner, attended):
    response = _review(client, learner, attended, rating=4, comment="Excellent cours")
    assert response.status_code == 201
    review = response.json()
    assert review["reviewer"]["email"] == "learner@example.com"
    assert review["session"]["title"] == attended["title"]

    profile = client.get(f"/api/provider-profiles/{provider['user']['id']}").json()
    assert profile["rating"] == 4.0
    assert profile["totalRatings"] == 1

    session = client.get(f"/api/sessions/{attended['id']}").json()
    assert session["totalRatings"] == 1

    duplicate = _review(client, learner, attended)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "You have already reviewed this session"


def test_review_requires_attendance(client, provider, learner, register, make_session, attended):
    stranger = register("stranger@example.com")
    not_attended = _review(client, stranger, attended)
    assert not_attended.status_code == 403
    assert not_attended.json()["detail"] == "You must attend the session to leave a review"

    upcoming = make_session(provider, title="À venir")
    client.post("/api/bookings", json={"sessionId": upcoming["id"]}, headers=learner["headers"])
    too_early = _review(client, learner, upcoming)
    assert too_early.status_code == 403
    assert too_early.json()["detail"] == "You can only review completed sessions"

    wrong_provider = _review(client, learner, attended, providerId=learner["user"]["id"])
    assert wrong_provider.status_code == 400
    assert wrong_provider.json()["detail"] == "Provider does not match session provider"


def test_can_review_reasons(client, provider, learner, register, make_session, attended):
    url = f"/api/reviews/can-review/{attended['id']}"
    assert client.get(url, headers=learner["headers"]).json() == {
        "canReview": True,
        "reason": None,
        "review": None,
    }

    outsider = client.get(url, headers=register("outsider@example.com")["headers"]).json()
    assert outsider["reason"] == "Session not booked"

    upcoming = make_session(provider, title="Plus tard")
    client.post("/api/bookings", json={"sessionId": upcoming["id"]}, headers=learner["headers"])
    pending = client.get(f"/api/reviews/can-review/{upcoming['id']}", headers=learner["headers"]).json()
    assert pending["reason"] == "Session not completed yet"

    _review(client, learner, attended)
    done = client.get(url, headers=learner["headers"]).json()
    assert done["canReview"] is False
    assert done["reason"] == "Already reviewed"
    assert done["review"]["rating"] == 5


def test_update_review_recomputes_average(client, provider, learner, register, attended):
    other = register("other@example.com")
    client.post("/api/bookings", json={"sessionId": attended["id"]}, headers=other["headers"])
    # Provider completes the second booking too
    incoming = client.get("/api/bookings/provider-bookings", headers=provider["headers"]).json()
    for booking in incoming:
        if booking["status"] == "confirmed":
            client.put(f"/api/bookings/{booking['id']}/complete", headers=provider["headers"])

    first = _review(client, learner, attended, rating=5).json()
    assert _review(client, other, attended, rating=4).status_code == 201
    assert client.get(f"/api/provider-profiles/{provider['user']['id']}").json()["rating"] == 4.5

    forbidden = client.patch(f"/api/reviews/{first['id']}", json={"rating": 1}, headers=other["headers"])
    assert forbidden.status_code == 403

    updated = client.patch(f"/api/reviews/{first['id']}", json={"rating": 2}, headers=learner["headers"])
    assert updated.status_code == 200
    assert updated.json()["rating"] == 2

    profile = client.get(f"/api/provider-profiles/{provider['user']['id']}").json()
    assert profile["rating"] == 3.0
    assert profile["totalRatings"] == 2


def test_review_listings(client, provider, learner, attended):
    _review(client, learner, attended)

    by_provider = client.get(f"/api/reviews/provider/{provider['user']['id']}").json()
    by_session = client.get(f"/api/reviews/session/{attended['id']}").json()
    mine = client.get("/api/reviews/me", headers=learner["headers"]).json()
    assert len(by_provider) == len(by_session) == len(mine) == 1
    assert client.get("/api/reviews/me", headers=provider["headers"]).json() == []
