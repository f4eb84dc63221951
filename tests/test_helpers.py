from datetime import timedelta

import pytest
from jose import jwt as jose_jwt

from skilli import config, rate_limiter
from skilli.rate_limiter import check_rate_limit
from skilli.security_utils import (
    create_access_token,
    decode_access_token,
    hash_password,
    hash_token,
    parse_duration,
    verify_password,
)
from skilli.shared.dates import to_naive_utc, utcnow
from skilli.shared.ratings import average, incremental_mean, round_rating


def test_round_rating_rounds_halves_up():
    assert round_rating(4.25) == 4.3
    assert round_rating(4.24) == 4.2
    assert round_rating(3.0) == 3.0


def test_incremental_mean():
    assert incremental_mean(0.0, 0, 4) == (4.0, 1)
    assert incremental_mean(4.0, 1, 5) == (4.5, 2)
    assert incremental_mean(4.5, 2, 1) == (3.3, 3)
    with pytest.raises(ValueError):
        incremental_mean(4.0, 1, 6)


def test_average():
    assert average([]) == (0.0, 0)
    assert average([5, 4, 4]) == (4.3, 3)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("1h", timedelta(hours=1)),
        ("45s", timedelta(seconds=45)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "15", "m15", "1w", None])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_password_hashing():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_access_tokens():
    token = create_access_token("user-1", "a@example.com")
    payload = decode_access_token(token)
    assert payload["sub"] == "user-1"
    assert payload["email"] == "a@example.com"

    expired = jose_jwt.encode(
        {"sub": "user-1", "type": "access", "exp": utcnow() - timedelta(minutes=1)},
        config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
    )
    assert decode_access_token(expired) is None
    assert decode_access_token("garbage") is None


def test_refresh_token_hash_is_stable():
    assert hash_token("abc") == hash_token("abc")
    assert hash_token("abc") != hash_token("abd")


def test_to_naive_utc():
    now = utcnow()
    assert now.tzinfo is None
    assert to_naive_utc(None) is None
    assert to_naive_utc(now) == now


def test_check_rate_limit_counts_within_window():
    results = [check_rate_limit("test:key", limit=2, window_seconds=60) for _ in range(3)]
    assert [allowed for allowed, _, _ in results] == [True, True, False]
    assert results[-1][1] == 2
    assert 0 < results[-1][2] <= 60


def test_auth_endpoints_are_rate_limited(client, monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)
    credentials = {"email": "nobody@example.com", "password": "secret123"}

    statuses = [client.post("/api/auth/login", json=credentials).status_code for _ in range(21)]
    assert statuses[:20] == [401] * 20
    assert statuses[20] == 429

    limited = client.post("/api/auth/login", json=credentials)
    assert limited.headers["Retry-After"]
    assert limited.json()["detail"]["limit"] == 20


def test_health_and_root(client):
    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.json()["message"] == "Skilli API is running"

    root = client.get("/")
    assert root.json()["health"] == "/api/health"
