import pytest
import requests

from slidercrank.explain import (
    ExplanationClient,
    ExplanationError,
    EMPTY_MESSAGE,
    build_prompt,
    extract_text,
)
from slidercrank.kinematics import MechanismConfiguration, solve


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.bad_json:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def ok_payload(*texts):
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


@pytest.fixture()
def pose():
    config = MechanismConfiguration(5.0, 8.0, 10.0, 45.0)
    return config, solve(config)


class TestPrompt:
    def test_contains_configuration(self, pose) -> None:
        prompt = build_prompt(*pose)
        assert "Crank Length (r2): 5 inches" in prompt
        assert "Connecting Rod Length (r3): 8 inches" in prompt
        assert "Current Crank Angle: 45.0 degrees" in prompt
        assert "Slider Position: 10.712 in" in prompt
        assert "Rod Angle (theta3): -26.228 degrees" in prompt
        assert "dead center" in prompt


class TestExtractText:
    def test_joins_parts(self) -> None:
        assert extract_text(ok_payload("Near ", "top dead center.")) == "Near top dead center."

    def test_missing_parts_is_empty(self) -> None:
        assert extract_text({"candidates": [{"content": {}}]}) == ""

    @pytest.mark.parametrize("payload", [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        None,
        {"candidates": [{"content": {"parts": None}}]},
        {"candidates": [{"content": {"parts": [{"text": None}]}}]},
        {"candidates": [{"content": {"parts": 5}}]},
        {"candidates": [{"content": {"parts": ["text"]}}]},
        {"candidates": [{"content": {"parts": [{"text": 3}]}}]},
    ])
    def test_malformed(self, payload) -> None:
        with pytest.raises(ExplanationError):
            extract_text(payload)


class TestExplanationClient:
    def test_missing_key(self, pose, monkeypatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        session = FakeSession(FakeResponse(ok_payload("x")))
        client = ExplanationClient(session=session)
        with pytest.raises(ExplanationError, match="API key"):
            client.explain(*pose)
        assert session.calls == []

    def test_success(self, pose) -> None:
        session = FakeSession(FakeResponse(ok_payload("The crank is 45 degrees past top dead center.")))
        client = ExplanationClient(api_key="k", model="m", session=session)

        text = client.explain(*pose)

        assert text == "The crank is 45 degrees past top dead center."
        url, kwargs = session.calls[0]
        assert url.endswith("/models/m:generateContent")
        assert kwargs["params"] == {"key": "k"}
        assert "Crank Length (r2)" in kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert kwargs["timeout"] > 0

    def test_key_from_environment(self, pose, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        session = FakeSession(FakeResponse(ok_payload("ok")))
        ExplanationClient(session=session).explain(*pose)
        assert session.calls[0][1]["params"] == {"key": "env-key"}

    def test_empty_text(self, pose) -> None:
        session = FakeSession(FakeResponse(ok_payload("  ")))
        assert ExplanationClient(api_key="k", session=session).explain(*pose) == EMPTY_MESSAGE

    def test_http_error(self, pose) -> None:
        session = FakeSession(FakeResponse(status=500))
        with pytest.raises(ExplanationError):
            ExplanationClient(api_key="k", session=session).explain(*pose)

    def test_network_error(self, pose) -> None:
        session = FakeSession(exc=requests.exceptions.ConnectionError("offline"))
        with pytest.raises(ExplanationError):
            ExplanationClient(api_key="k", session=session).explain(*pose)

    def test_bad_json(self, pose) -> None:
        session = FakeSession(FakeResponse(bad_json=True))
        with pytest.raises(ExplanationError):
            ExplanationClient(api_key="k", session=session).explain(*pose)

    def test_malformed_body(self, pose) -> None:
        session = FakeSession(FakeResponse({"error": "nope"}))
        with pytest.raises(ExplanationError):
            ExplanationClient(api_key="k", session=session).explain(*pose)

    def test_null_parts(self, pose) -> None:
        session = FakeSession(FakeResponse({"candidates": [{"content": {"parts": None}}]}))
        with pytest.raises(ExplanationError):
            ExplanationClient(api_key="k", session=session).explain(*pose)
