"""
Natural-language explanation of the current mechanism pose.

Sends the configuration and solved state to the Gemini generateContent REST
endpoint and returns a short plain-text description. Every failure is raised
as ExplanationError; callers decide what to show the user.
"""

import logging

import requests

from .config import get_api_key, get_model_name

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
REQUEST_TIMEOUT = 30.0

UNAVAILABLE_MESSAGE = "Could not generate analysis. Please try again."
EMPTY_MESSAGE = "No analysis generated."


class ExplanationError(RuntimeError):
    """The explanation service could not produce an answer."""


def build_prompt(config, state):
    return f"""
You are an expert mechanical engineer and physics professor.
Analyze the current state of a slider-crank mechanism.

Configuration:
- Crank Length (r2): {config.crank_length:g} inches
- Connecting Rod Length (r3): {config.rod_length:g} inches
- Current Crank Angle: {state.crank_angle:.1f} degrees

Calculated State:
- Slider Position: {state.slider_position:.3f} in
- Rod Angle (theta3): {state.rod_angle:.3f} degrees

Please provide a concise but insightful analysis (max 3-4 sentences).
Explain the geometric configuration at this specific angle (e.g., is it near a limit position? top dead center? bottom dead center?).
Use plain text, no markdown.
""".strip()


def extract_text(payload):
    """Concatenate the text parts of the first candidate."""
    try:
        parts = payload["candidates"][0]["content"].get("parts", [])
        return "".join(p.get("text", "") for p in parts).strip()
    except (KeyError, IndexError, TypeError, AttributeError):
        raise ExplanationError("Malformed response from explanation service")


class ExplanationClient:
    """Thin REST client; api_key/model default to the environment settings."""

    def __init__(self, api_key=None, model=None, session=None, timeout=REQUEST_TIMEOUT):
        self.api_key = api_key if api_key is not None else get_api_key()
        self.model = model or get_model_name()
        self.session = session or requests.Session()
        self.timeout = timeout

    def explain(self, config, state):
        if not self.api_key:
            raise ExplanationError("API key is missing. Set GEMINI_API_KEY in the environment.")

        body = {"contents": [{"parts": [{"text": build_prompt(config, state)}]}]}
        url = API_URL.format(model=self.model)
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning("explanation request failed: %s", e)
            raise ExplanationError("Failed to fetch AI analysis.") from e
        except ValueError as e:
            raise ExplanationError("Response was not valid JSON") from e

        return extract_text(payload) or EMPTY_MESSAGE
