"""
Handles communication with the OpenAI chat completions endpoint.
"""

import json
import logging

import requests

from .config import OPENAI_API_URL, LLM_MODEL, LLM_MAX_TOKENS, LLM_TIMEOUT

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "당신은 'La Maison'이라는 프렌치 레스토랑의 친절한 AI 어시스턴트입니다. "
    "메뉴 추천, 예약 안내, 위치 안내 등을 도와줍니다. "
    "답변은 한국어로 정중하게 해주세요."
)
GENERIC_API_ERROR = "API 호출 실패"


def build_payload(user_message: str) -> dict:
    """Only the latest user message is sent; there is no conversation history."""
    return {
        "model": LLM_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ],
        "max_tokens": LLM_MAX_TOKENS,
    }


def call_openai_api(api_key: str, payload: dict) -> dict:
    """POST to the completions endpoint; failures come back as {"error": ...}."""
    try:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        resp = requests.post(
            OPENAI_API_URL,
            headers=headers,
            json=payload,
            timeout=LLM_TIMEOUT,
        )

        if not resp.ok:
            try:
                err_json = resp.json()
            except ValueError:
                return {"error": GENERIC_API_ERROR}
            err = err_json.get("error") if isinstance(err_json, dict) else None
            message = err.get("message") if isinstance(err, dict) else None
            return {"error": message or GENERIC_API_ERROR}

        return resp.json()

    except requests.exceptions.RequestException as e:
        return {"error": str(e)}
    except json.JSONDecodeError as e:
        return {"error": f"Failed to parse API response: {str(e)}"}


def call_llm(api_key: str, user_message: str) -> dict:
    """Ask the model and return {"content": ...} or {"error": ...}."""
    response = call_openai_api(api_key, build_payload(user_message))

    if "error" in response:
        logger.warning("Completion request failed: %s", response["error"])
        return {"error": response["error"]}

    try:
        return {"content": response["choices"][0]["message"]["content"]}
    except (KeyError, IndexError, TypeError) as e:
        err = f"Unexpected API response format: {str(e)}"
        logger.warning(err)
        return {"error": err}
