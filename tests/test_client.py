import pytest

from conftest import PASSWORD

from skilli.client import AuthenticationError, SkilliAPIError, SkilliClient


@pytest.fixture
def api(client):
    return SkilliClient(http_client=client)


def test_requires_base_url_or_http_client():
    with pytest.raises(ValueError):
        SkilliClient()


def test_register_login_and_me(api):
    api.register("amal@example.com", PASSWORD, "Amal")
    assert api.is_authenticated
    assert api.user["email"] == "amal@example.com"

    api.clear_tokens()
    api.login("amal@example.com", PASSWORD)
    assert api.me()["name"] == "Amal"


def test_bad_credentials_do_not_trigger_refresh(api):
    api.register("amal@example.com", PASSWORD, "Amal")
    refresh_token = api.refresh_token
    with pytest.raises(SkilliAPIError) as exc:
        api.login("amal@example.com", "wrong-pass")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid credentials"
    assert api.refresh_token == refresh_token


def test_expired_access_token_is_refreshed_transparently(api):
    api.register("amal@example.com", PASSWORD, "Amal")
    old_refresh = api.refresh_token
    api.access_token = "expired"

    assert api.me()["email"] == "amal@example.com"
    assert api.access_token != "expired"
    assert api.refresh_token != old_refresh


def test_failed_refresh_clears_session(api):
    api.register("amal@example.com", PASSWORD, "Amal")
    api.set_tokens("expired", "revoked")

    with pytest.raises(AuthenticationError):
        api.me()
    assert not api.is_authenticated
    assert api.refresh_token is None
    assert api.user is None


def test_request_and_offer_flow(api, client, provider):
    api.register("amal@example.com", PASSWORD, "Amal")
    request = api.create_request(
        title="Cours d'anglais", description="Préparer un entretien", skills=["Anglais"], requestType="online"
    )
    board = api.list_requests(skill="Anglais", location=None)
    assert board["pagination"]["total"] == 1

    provider_api = SkilliClient(http_client=client)
    provider_api.login("provider@example.com", PASSWORD)
    offer = provider_api.create_offer(request["id"], "Disponible demain", 120, 60)

    accepted = api.accept_offer(offer["id"])
    assert accepted["status"] == "accepted"
    assert api.get_request(request["id"])["status"] == "completed"


def test_poll_messages_yields_new_messages_once(api, client, learner):
    api.register("amal@example.com", PASSWORD, "Amal")
    first = api.send_message(learner["user"]["id"], "Salam")

    learner_api = SkilliClient(http_client=client)
    learner_api.set_tokens(learner["accessToken"], learner["refreshToken"])

    received = []
    for message in learner_api.poll_messages(first["conversationId"], interval=0, max_polls=2):
        received.append(message["text"])
        if message["text"] == "Salam":
            api.send_message(learner["user"]["id"], "Ça va ?")

    assert received == ["Salam", "Ça va ?"]
    assert learner_api.unread_message_count() == 0
