import pytest
from fastapi import HTTPException

from conftest import load_user

from skilli.domain.offers.repository import OfferRepository
from skilli.domain.offers.schemas import OfferCreate
from skilli.domain.offers.service import OfferService
from skilli.domain.requests.service import RequestService
from skilli.models import ServiceRequest


def _offer(client, account, request_id, **overrides):
    payload = {"requestId": request_id, "message": "Je peux vous aider", "price": 150, "duration": 60}
    payload.update(overrides)
    return client.post("/api/offers", json=payload, headers=account["headers"])


def test_first_offer_starts_negotiation(client, provider, learner, make_request):
    request = make_request(learner)
    response = _offer(client, provider, request["id"])
    assert response.status_code == 201
    offer = response.json()
    assert offer["status"] == "pending"
    assert offer["provider"]["profile"]["city"] == "Casablanca"
    assert offer["request"]["status"] == "in_progress"

    notifications = client.get("/api/notifications", headers=learner["headers"]).json()
    assert notifications[0]["type"] == "offer"
    assert "Yassine Provider" in notifications[0]["message"]


def test_offer_rules(client, provider, learner, register, make_request):
    request = make_request(learner)

    not_provider = _offer(client, register("plain@example.com"), request["id"])
    assert not_provider.status_code == 403
    assert not_provider.json()["detail"] == "Only providers can submit offers"

    own = make_request(provider)
    on_own = _offer(client, provider, own["id"])
    assert on_own.status_code == 403
    assert on_own.json()["detail"] == "You cannot offer on your own request"

    assert _offer(client, provider, request["id"]).status_code == 201
    duplicate = _offer(client, provider, request["id"])
    assert duplicate.status_code == 409

    missing = _offer(client, provider, "00000000-0000-0000-0000-000000000000")
    assert missing.status_code == 404


def test_accept_offer_closes_request(client, provider, learner, register, make_request):
    request = make_request(learner)
    rival = register("rival@example.com", name="Rival", provider=True)
    accepted_id = _offer(client, provider, request["id"]).json()["id"]
    rival_id = _offer(client, rival, request["id"], price=120).json()["id"]

    not_owner = client.patch(f"/api/offers/{accepted_id}/accept", headers=provider["headers"])
    assert not_owner.status_code == 403
    assert not_owner.json()["detail"] == "Only the request owner can accept offers"

    response = client.patch(f"/api/offers/{accepted_id}/accept", headers=learner["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"
    assert response.json()["request"]["status"] == "completed"

    rival_offer = client.get(f"/api/offers/{rival_id}", headers=rival["headers"]).json()
    assert rival_offer["status"] == "rejected"

    again = client.patch(f"/api/offers/{accepted_id}/accept", headers=learner["headers"])
    assert again.status_code == 400
    assert again.json()["detail"] == "Cannot accept accepted offer"

    late = _offer(client, register("late@example.com", provider=True), request["id"])
    assert late.status_code == 400
    assert late.json()["detail"] == "Cannot offer on a completed request"

    provider_notes = client.get("/api/notifications", headers=provider["headers"]).json()
    learner_notes = client.get("/api/notifications", headers=learner["headers"]).json()
    assert provider_notes[0]["type"] == "offer_accepted"
    assert learner_notes[0]["type"] == "offer_accepted"


def test_reject_update_and_delete(client, provider, learner, make_request):
    request = make_request(learner)
    offer = _offer(client, provider, request["id"]).json()

    updated = client.patch(f"/api/offers/{offer['id']}", json={"price": 175}, headers=provider["headers"])
    assert updated.status_code == 200
    assert updated.json()["price"] == 175
    assert updated.json()["message"] == "Je peux vous aider"

    rejected = client.patch(f"/api/offers/{offer['id']}/reject", headers=learner["headers"])
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"

    twice = client.patch(f"/api/offers/{offer['id']}/reject", headers=learner["headers"])
    assert twice.status_code == 400
    assert twice.json()["detail"] == "Cannot reject rejected offer"

    frozen = client.patch(f"/api/offers/{offer['id']}", json={"price": 1}, headers=provider["headers"])
    assert frozen.status_code == 400
    assert frozen.json()["detail"] == "Cannot update rejected offer"

    not_pending = client.delete(f"/api/offers/{offer['id']}", headers=provider["headers"])
    assert not_pending.status_code == 400
    assert not_pending.json()["detail"] == "Can only delete pending offers"


def test_delete_pending_offer(client, provider, learner, make_request):
    request = make_request(learner)
    offer = _offer(client, provider, request["id"]).json()

    forbidden = client.delete(f"/api/offers/{offer['id']}", headers=learner["headers"])
    assert forbidden.status_code == 403

    deleted = client.delete(f"/api/offers/{offer['id']}", headers=provider["headers"])
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Offer deleted successfully"}


def test_list_offers(client, provider, learner, make_request):
    request = make_request(learner)
    _offer(client, provider, request["id"])

    for_request = client.get(f"/api/offers/request/{request['id']}", headers=learner["headers"])
    assert for_request.status_code == 200
    assert [o["providerId"] for o in for_request.json()] == [provider["user"]["id"]]

    mine = client.get("/api/offers/me", headers=provider["headers"]).json()
    assert mine[0]["request"]["title"] == request["title"]

    detail = client.get(f"/api/requests/{request['id']}").json()
    assert detail["offerCount"] == 1
    assert detail["offers"][0]["provider"]["name"] == "Yassine Provider"


def test_second_offer_keeps_negotiation_going(client, provider, learner, register, make_request):
    request = make_request(learner)
    rival = register("rival@example.com", name="Rival", provider=True)

    assert _offer(client, provider, request["id"]).status_code == 201
    second = _offer(client, rival, request["id"], price=120)
    assert second.status_code == 201
    assert second.json()["request"]["status"] == "in_progress"

    detail = client.get(f"/api/requests/{request['id']}").json()
    assert detail["status"] == "in_progress"
    assert sorted(o["status"] for o in detail["offers"]) == ["pending", "pending"]


def test_accepting_a_second_offer_after_the_first_fails(client, provider, learner, register, make_request):
    request = make_request(learner)
    rival = register("rival@example.com", name="Rival", provider=True)
    first_id = _offer(client, provider, request["id"]).json()["id"]
    second_id = _offer(client, rival, request["id"]).json()["id"]

    assert client.patch(f"/api/offers/{first_id}/accept", headers=learner["headers"]).status_code == 200
    late = client.patch(f"/api/offers/{second_id}/accept", headers=learner["headers"])
    assert late.status_code == 400

    offers = client.get(f"/api/offers/request/{request['id']}", headers=learner["headers"]).json()
    assert [o["status"] for o in offers].count("accepted") == 1


def test_interleaved_accepts_leave_exactly_one_winner(
    monkeypatch, client, db, other_db, provider, learner, register, make_request
):
    request = make_request(learner)
    rival = register("rival@example.com", name="Rival", provider=True)
    first_id = _offer(client, provider, request["id"]).json()["id"]
    second_id = _offer(client, rival, request["id"]).json()["id"]

    real_accept = OfferRepository.accept
    raced = []

    def accept_after_rival(session, offer_id):
        # The owner's other tab accepts the rival offer right before this write
        if not raced:
            raced.append(offer_id)
            OfferService(other_db).accept_offer(second_id, load_user(other_db, learner))
        return real_accept(session, offer_id)

    monkeypatch.setattr(OfferRepository, "accept", staticmethod(accept_after_rival))

    with pytest.raises(HTTPException) as exc:
        OfferService(db).accept_offer(first_id, load_user(db, learner))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Offer is no longer pending"

    offers = client.get(f"/api/offers/request/{request['id']}", headers=learner["headers"]).json()
    assert {o["id"]: o["status"] for o in offers} == {first_id: "rejected", second_id: "accepted"}
    assert client.get(f"/api/requests/{request['id']}").json()["status"] == "completed"


def test_offer_does_not_revive_a_request_cancelled_meanwhile(
    monkeypatch, db, other_db, provider, learner, make_request
):
    request = make_request(learner)
    real_add = OfferRepository.add

    def add_after_cancel(session, **data):
        RequestService(other_db).cancel_request(request["id"], load_user(other_db, learner))
        return real_add(session, **data)

    monkeypatch.setattr(OfferRepository, "add", staticmethod(add_after_cancel))

    payload = OfferCreate(requestId=request["id"], message="Je peux vous aider", price=150, duration=60)
    with pytest.raises(HTTPException) as exc:
        OfferService(db).create_offer(payload, load_user(db, provider))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot offer on a cancelled request"

    db.expire_all()
    stored = db.get(ServiceRequest, request["id"])
    assert stored.status == "cancelled"
    assert stored.offers == []
