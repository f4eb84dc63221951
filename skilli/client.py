"""
Skilli API client

Plays the mobile app's role against the REST API: keeps the token pair,
sends the bearer header on every call, refreshes once on a 401 and retries,
and polls a conversation for new messages.

    client = SkilliClient("http://localhost:3000")
    client.login("sara@example.com", "secret123")
    for message in client.poll_messages(conversation_id, max_polls=10):
        print(message["text"])
"""

import logging
import time
from typing import Any, Iterator, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 5.0

# A 401 from these means bad credentials, not an expired access token
NO_REFRESH_PATHS = ("/auth/login", "/auth/register", "/auth/refresh")


class SkilliAPIError(Exception):
    """Non-2xx answer from the API"""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class AuthenticationError(SkilliAPIError):
    """The session could not be refreshed; log in again"""


class SkilliClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        api_prefix: str = "/api",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if http_client is None:
            if not base_url:
                raise ValueError("Either base_url or http_client is required")
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        self.http = http_client
        self.api_prefix = api_prefix.rstrip("/")
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.user: Optional[dict] = None

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def set_tokens(self, access_token: Optional[str], refresh_token: Optional[str]):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def clear_tokens(self):
        self.set_tokens(None, None)
        self.user = None

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return self.http.request(method, f"{self.api_prefix}{path}", headers=headers, **kwargs)

    @staticmethod
    def _payload(response: httpx.Response) -> Any:
        if response.is_success:
            return response.json() if response.content else None
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = response.text
        raise SkilliAPIError(response.status_code, detail)

    def request(self, method: str, path: str, **kwargs) -> Any:
        """Authenticated call with a single refresh-and-retry on 401"""
        response = self._send(method, path, **kwargs)
        if response.status_code == 401 and self.refresh_token and path not in NO_REFRESH_PATHS:
            self.refresh()
            response = self._send(method, path, **kwargs)
        return self._payload(response)

    def refresh(self) -> dict:
        """Rotate the token pair; on failure the stored tokens are dropped"""
        if not self.refresh_token:
            raise AuthenticationError(401, "No refresh token available")

        logger.debug("Attempting to refresh token...")
        response = self.http.post(
            f"{self.api_prefix}/auth/refresh", json={"refreshToken": self.refresh_token}
        )
        if not response.is_success:
            logger.warning(f"Token refresh failed with {response.status_code}")
            self.clear_tokens()
            raise AuthenticationError(response.status_code, "Session expired, please log in again")

        tokens = response.json()
        self.set_tokens(tokens["accessToken"], tokens["refreshToken"])
        return tokens

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _store_session(self, data: dict) -> dict:
        self.set_tokens(data["accessToken"], data["refreshToken"])
        self.user = data.get("user")
        return data

    def register(self, email: str, password: str, name: str, phone: Optional[str] = None) -> dict:
        payload = {"email": email, "password": password, "name": name}
        if phone:
            payload["phone"] = phone
        return self._store_session(self.request("POST", "/auth/register", json=payload))

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/auth/login", json={"email": email, "password": password})
        return self._store_session(data)

    def logout(self):
        if self.refresh_token:
            self.request("POST", "/auth/logout", json={"refreshToken": self.refresh_token})
        self.clear_tokens()

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    def upload_profile_photo(self, filename: str, content: bytes, content_type: str = "image/jpeg") -> dict:
        files = {"photo": (filename, content, content_type)}
        return self.request("POST", "/uploads/profile-photo", files=files)

    # ------------------------------------------------------------------
    # Provider profiles
    # ------------------------------------------------------------------

    def save_provider_profile(self, **fields) -> dict:
        return self.request("POST", "/provider-profiles/me", json=fields)

    def my_provider_profile(self) -> dict:
        return self.request("GET", "/provider-profiles/me")

    def list_providers(self, **filters) -> list[dict]:
        return self.request("GET", "/provider-profiles", params=_clean(filters))

    def get_provider(self, user_id: str) -> dict:
        return self.request("GET", f"/provider-profiles/{user_id}")

    # ------------------------------------------------------------------
    # Requests and offers
    # ------------------------------------------------------------------

    def create_request(self, **fields) -> dict:
        return self.request("POST", "/requests", json=fields)

    def list_requests(self, **filters) -> dict:
        return self.request("GET", "/requests", params=_clean(filters))

    def get_request(self, request_id: str) -> dict:
        return self.request("GET", f"/requests/{request_id}")

    def my_requests(self) -> list[dict]:
        return self.request("GET", "/requests/me")

    def update_request(self, request_id: str, **fields) -> dict:
        return self.request("PATCH", f"/requests/{request_id}", json=fields)

    def cancel_request(self, request_id: str) -> dict:
        return self.request("PATCH", f"/requests/{request_id}/cancel")

    def delete_request(self, request_id: str) -> dict:
        return self.request("DELETE", f"/requests/{request_id}")

    def create_offer(self, request_id: str, message: str, price: float, duration: int, **fields) -> dict:
        payload = {"requestId": request_id, "message": message, "price": price, "duration": duration}
        payload.update(fields)
        return self.request("POST", "/offers", json=payload)

    def request_offers(self, request_id: str) -> list[dict]:
        return self.request("GET", f"/offers/request/{request_id}")

    def my_offers(self) -> list[dict]:
        return self.request("GET", "/offers/me")

    def accept_offer(self, offer_id: str) -> dict:
        return self.request("PATCH", f"/offers/{offer_id}/accept")

    def reject_offer(self, offer_id: str) -> dict:
        return self.request("PATCH", f"/offers/{offer_id}/reject")

    def delete_offer(self, offer_id: str) -> dict:
        return self.request("DELETE", f"/offers/{offer_id}")

    # ------------------------------------------------------------------
    # Sessions, bookings and reviews
    # ------------------------------------------------------------------

    def create_session(self, **fields) -> dict:
        return self.request("POST", "/sessions", json=fields)

    def list_sessions(self, **filters) -> list[dict]:
        return self.request("GET", "/sessions", params=_clean(filters))

    def get_session(self, session_id: str) -> dict:
        return self.request("GET", f"/sessions/{session_id}")

    def my_sessions(self) -> list[dict]:
        return self.request("GET", "/sessions/my-sessions")

    def book_session(self, session_id: str) -> dict:
        return self.request("POST", "/bookings", json={"sessionId": session_id})

    def my_bookings(self) -> list[dict]:
        return self.request("GET", "/bookings/my-bookings")

    def cancel_booking(self, booking_id: str) -> dict:
        return self.request("PUT", f"/bookings/{booking_id}/cancel")

    def rate_booking(self, booking_id: str, rating: int, review: Optional[str] = None) -> dict:
        return self.request("PUT", f"/bookings/{booking_id}/rate", json=_clean({"rating": rating, "review": review}))

    def create_review(self, session_id: str, provider_id: str, rating: int, comment: Optional[str] = None) -> dict:
        payload = {"sessionId": session_id, "providerId": provider_id, "rating": rating, "comment": comment}
        return self.request("POST", "/reviews", json=_clean(payload))

    def provider_reviews(self, provider_id: str) -> list[dict]:
        return self.request("GET", f"/reviews/provider/{provider_id}")

    def can_review(self, session_id: str) -> dict:
        return self.request("GET", f"/reviews/can-review/{session_id}")

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def create_post(self, content: str, skills: list[str], category: Optional[str] = None) -> dict:
        return self.request("POST", "/posts", json=_clean({"content": content, "skills": skills, "category": category}))

    def list_posts(self, **filters) -> dict:
        return self.request("GET", "/posts", params=_clean(filters))

    def like_post(self, post_id: str) -> dict:
        return self.request("POST", f"/posts/{post_id}/like")

    def unlike_post(self, post_id: str) -> dict:
        return self.request("DELETE", f"/posts/{post_id}/unlike")

    # ------------------------------------------------------------------
    # Messages and notifications
    # ------------------------------------------------------------------

    def conversations(self) -> list[dict]:
        return self.request("GET", "/messages/conversations")

    def open_conversation(self, other_user_id: str) -> dict:
        return self.request("GET", f"/messages/conversations/{other_user_id}")

    def conversation_messages(self, conversation_id: str) -> list[dict]:
        return self.request("GET", f"/messages/{conversation_id}")

    def send_message(self, receiver_id: str, text: str) -> dict:
        return self.request("POST", "/messages", json={"receiverId": receiver_id, "text": text})

    def unread_message_count(self) -> int:
        return self.request("GET", "/messages/unread/count")["count"]

    def poll_messages(
        self,
        conversation_id: str,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_polls: Optional[int] = None,
    ) -> Iterator[dict]:
        """
        Yield messages of a conversation as they appear.

        The conversation is fetched every `interval` seconds; messages already
        seen (by id) are skipped, so the first poll yields the backlog. Stops
        after `max_polls` fetches when given, otherwise runs until the caller
        stops iterating.
        """
        seen: set[str] = set()
        polls = 0
        while max_polls is None or polls < max_polls:
            if polls:
                time.sleep(interval)
            polls += 1
            for message in self.conversation_messages(conversation_id):
                if message["id"] not in seen:
                    seen.add(message["id"])
                    yield message

    def notifications(self) -> list[dict]:
        return self.request("GET", "/notifications")

    def unread_notification_count(self) -> int:
        return self.request("GET", "/notifications/unread-count")["count"]

    def mark_all_notifications_read(self) -> int:
        return self.request("PUT", "/notifications/mark-all-read")["count"]


def _clean(values: dict) -> dict:
    """Drop unset values so they are not sent as empty params"""
    return {key: value for key, value in values.items() if value is not None}
