import pytest
from fastapi import HTTPException

from conftest import load_user

from skilli.domain.offers.service import OfferService
from skilli.domain.requests.schemas import RequestUpdate
from skilli.domain.requests.service import RequestService, can_transition


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        ("open", "in_progress", True),
        ("open", "cancelled", True),
        ("in_progress", "completed", True),
        ("in_progress", "open", False),
        ("completed", "cancelled", False),
        ("cancelled", "open", False),
        ("completed", "completed", True),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_create_request(client, learner, make_request):
    request = make_request(learner)
    assert request["status"] == "open"
    assert request["requesterId"] == learner["user"]["id"]
    assert request["offerCount"] == 0
    assert request["requester"]["name"] == "Salma Client"


def test_create_request_validation(client, learner):
    payload = {
        "title": "Aide",
        "description": "...",
        "skills": ["Python"],
        "requestType": "online",
        "budgetMin": 300,
        "budgetMax": 100,
    }
    inverted = client.post("/api/requests", json=payload, headers=learner["headers"])
    assert inverted.status_code == 400
    assert inverted.json()["detail"] == "budgetMin cannot be greater than budgetMax"

    no_skills = client.post(
        "/api/requests", json={**payload, "skills": [], "budgetMin": None}, headers=learner["headers"]
    )
    assert no_skills.status_code == 422

    bad_type = client.post(
        "/api/requests", json={**payload, "requestType": "remote", "budgetMin": None}, headers=learner["headers"]
    )
    assert bad_type.status_code == 422

    anonymous = client.post("/api/requests", json=payload)
    assert anonymous.status_code == 401


def test_list_requests_paginates_open_by_default(client, learner, make_request):
    for index in range(3):
        make_request(learner, title=f"Demande {index}")
    cancelled = make_request(learner, title="Annulée")
    client.patch(f"/api/requests/{cancelled['id']}/cancel", headers=learner["headers"])

    page = client.get("/api/requests", params={"page": 1, "limit": 2}).json()
    assert page["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
    assert [r["title"] for r in page["items"]] == ["Demande 2", "Demande 1"]

    everything = client.get("/api/requests", params={"status": "all"}).json()
    assert everything["pagination"]["total"] == 4

    only_cancelled = client.get("/api/requests", params={"status": "cancelled"}).json()
    assert [r["title"] for r in only_cancelled["items"]] == ["Annulée"]


def test_list_requests_filters(client, learner, make_request):
    make_request(learner, title="Python", skills=["Python"], budgetMin=50, budgetMax=80)
    make_request(learner, title="Anglais", skills=["Anglais"], requestType="presential", location="Fès")

    by_skill = client.get("/api/requests", params={"skill": "Python"}).json()
    assert [r["title"] for r in by_skill["items"]] == ["Python"]

    by_type = client.get("/api/requests", params={"requestType": "presential"}).json()
    assert [r["title"] for r in by_type["items"]] == ["Anglais"]

    by_location = client.get("/api/requests", params={"location": "fès"}).json()
    assert [r["title"] for r in by_location["items"]] == ["Anglais"]


def test_update_request(client, learner, register, make_request):
    request = make_request(learner)
    stranger = register("stranger@example.com")

    forbidden = client.patch(f"/api/requests/{request['id']}", json={"title": "x"}, headers=stranger["headers"])
    assert forbidden.status_code == 403

    updated = client.patch(
        f"/api/requests/{request['id']}", json={"title": "Nouveau titre", "budgetMax": 250}, headers=learner["headers"]
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Nouveau titre"
    assert updated.json()["budgetMax"] == 250

    completed = client.patch(f"/api/requests/{request['id']}", json={"status": "completed"}, headers=learner["headers"])
    assert completed.status_code == 400


def test_cancel_and_terminal_requests(client, learner, make_request):
    request = make_request(learner)
    cancelled = client.patch(f"/api/requests/{request['id']}/cancel", headers=learner["headers"])
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = client.patch(f"/api/requests/{request['id']}/cancel", headers=learner["headers"])
    assert again.status_code == 400
    assert again.json()["detail"] == "Cannot cancel a cancelled request"

    update = client.patch(f"/api/requests/{request['id']}", json={"title": "x"}, headers=learner["headers"])
    assert update.status_code == 400
    assert update.json()["detail"] == "Cannot update a cancelled request"

    reopen = client.patch(f"/api/requests/{request['id']}", json={"status": "open"}, headers=learner["headers"])
    assert reopen.status_code == 400


def test_get_my_and_delete_request(client, learner, make_request):
    request = make_request(learner)
    mine = client.get("/api/requests/me", headers=learner["headers"]).json()
    assert [r["id"] for r in mine] == [request["id"]]

    detail = client.get(f"/api/requests/{request['id']}")
    assert detail.status_code == 200
    assert detail.json()["offers"] == []

    deleted = client.delete(f"/api/requests/{request['id']}", headers=learner["headers"])
    assert deleted.status_code == 200
    assert client.get(f"/api/requests/{request['id']}").status_code == 404


@pytest.fixture
def accepted_meanwhile(monkeypatch, client, other_db, provider, learner, make_request):
    """A request whose only offer gets accepted in another session right after the owner's read"""
    request = make_request(learner)
    offer = client.post(
        "/api/offers",
        json={"requestId": request["id"], "message": "Je peux vous aider", "price": 150, "duration": 60},
        headers=provider["headers"],
    ).json()

    real_get_owned = RequestService._get_owned

    def get_owned_then_accept(self, request_id, user, action):
        owned = real_get_owned(self, request_id, user, action)
        OfferService(other_db).accept_offer(offer["id"], load_user(other_db, learner))
        return owned

    monkeypatch.setattr(RequestService, "_get_owned", get_owned_then_accept)
    return request


def test_cancel_does_not_overwrite_a_request_completed_meanwhile(client, db, learner, accepted_meanwhile):
    with pytest.raises(HTTPException) as exc:
        RequestService(db).cancel_request(accepted_meanwhile["id"], load_user(db, learner))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot cancel a completed request"

    assert client.get(f"/api/requests/{accepted_meanwhile['id']}").json()["status"] == "completed"


def test_update_does_not_touch_a_request_completed_meanwhile(client, db, learner, accepted_meanwhile):
    with pytest.raises(HTTPException) as exc:
        RequestService(db).update_request(
            accepted_meanwhile["id"], RequestUpdate(title="Modifiée", status="cancelled"), load_user(db, learner)
        )
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot update a completed request"

    stored = client.get(f"/api/requests/{accepted_meanwhile['id']}").json()
    assert stored["status"] == "completed"
    assert stored["title"] == "Cours de maths niveau Bac"
