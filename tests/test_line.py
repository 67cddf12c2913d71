import pytest
import requests

from plnotify.notifications.line import (
    BOT_INFO_ENDPOINT,
    PUSH_ENDPOINT,
    LineConfig,
    LineDispatcher,
)


class FakeResponse:
    def __init__(self, status_code: int, body: dict | None = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body or {}
        self.text = text

    def json(self) -> dict:
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, dict]] = []

    def _respond(self, method: str, url: str, kwargs: dict) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._respond("POST", url, kwargs)

    def get(self, url, **kwargs):
        return self._respond("GET", url, kwargs)


CONFIG = LineConfig(access_token="token-123", group_id="C0123456789", timeout=5)


def test_push_posts_text_message():
    session = FakeSession(FakeResponse(200))

    result = LineDispatcher(CONFIG, session=session).push("hello")

    assert result.success
    assert result.to_dict() == {"success": True}
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", PUSH_ENDPOINT)
    assert kwargs["json"] == {
        "to": "C0123456789",
        "messages": [{"type": "text", "text": "hello"}],
    }
    assert kwargs["headers"]["Authorization"] == "Bearer token-123"
    assert kwargs["timeout"] == 5


def test_push_reports_error_code():
    session = FakeSession(FakeResponse(401, text='{"message":"Authentication failed"}'))

    result = LineDispatcher(CONFIG, session=session).push("hello")

    assert result.to_dict() == {"success": False, "error": "エラーコード: 401"}
    assert len(session.calls) == 1


def test_push_reports_transport_errors():
    session = FakeSession(error=requests.ConnectionError("connection refused"))

    result = LineDispatcher(CONFIG, session=session).push("hello")

    assert not result.success
    assert result.error == "connection refused"


def test_dispatcher_requires_a_token():
    with pytest.raises(RuntimeError):
        LineDispatcher(LineConfig(access_token="", group_id="C1"))


def test_push_requires_a_group_id_but_bot_info_does_not():
    session = FakeSession(FakeResponse(200, {"displayName": "経理Bot", "userId": "U999"}))
    dispatcher = LineDispatcher(LineConfig(access_token="token-123", group_id=""), session=session)

    assert dispatcher.bot_info().user_id == "U999"
    with pytest.raises(RuntimeError):
        dispatcher.push("hello")
    assert len(session.calls) == 1


def test_bot_info():
    session = FakeSession(FakeResponse(200, {"displayName": "経理Bot", "userId": "U999"}))

    info = LineDispatcher(CONFIG, session=session).bot_info()

    assert info.display_name == "経理Bot"
    assert info.user_id == "U999"
    assert session.calls[0][:2] == ("GET", BOT_INFO_ENDPOINT)


def test_bot_info_raises_on_http_error():
    session = FakeSession(FakeResponse(401))

    with pytest.raises(requests.HTTPError):
        LineDispatcher(CONFIG, session=session).bot_info()
