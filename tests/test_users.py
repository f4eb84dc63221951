def test_get_and_update_me(client, learner):
    response = client.patch(
        "/api/users/me", json={"name": "Salma B.", "phone": "+212612345678"}, headers=learner["headers"]
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Salma B."
    assert response.json()["phone"] == "+212612345678"

    me = client.get("/api/users/me", headers=learner["headers"])
    assert me.json()["name"] == "Salma B."


def test_become_provider_sets_flag(client, learner):
    response = client.post("/api/users/me/become-provider", headers=learner["headers"])
    assert response.status_code == 200
    assert response.json()["isProvider"] is True


def test_public_user_lookup(client, learner):
    response = client.get(f"/api/users/{learner['user']['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "learner@example.com"

    missing = client.get("/api/users/00000000-0000-0000-0000-000000000000")
    assert missing.status_code == 404
