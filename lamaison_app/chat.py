"""
Chat panel state - open/closed, stored API key and the transcript.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from .config import API_KEY_PREFIX, API_KEY_STORAGE_KEY
from .llm_client import call_llm
from .models import ChatMessage
from .storage import LocalStorage

logger = logging.getLogger(__name__)

KEY_SAVED_MESSAGE = "API Key가 저장되었습니다. 이제 대화를 시작해보세요!"
KEY_REQUIRED_MESSAGE = "OpenAI API Key가 필요합니다. 상단 입력창에 키를 입력해주세요."
INVALID_KEY_ALERT = "올바른 OpenAI API Key를 입력해주세요 (sk-로 시작)."
ERROR_PREFIX = "죄송합니다. 오류가 발생했습니다: "


class ChatState(str, Enum):
    CLOSED = "closed"
    OPEN_AWAITING_KEY = "open_awaiting_key"
    OPEN_READY = "open_ready"


class InvalidCredentialError(ValueError):
    def __init__(self, message: str = INVALID_KEY_ALERT):
        super().__init__(message)


class ChatPanel:
    def __init__(self, storage: LocalStorage, completer: Callable[[str, str], dict] = call_llm):
        self.storage = storage
        self.completer = completer
        self.api_key = storage.get_item(API_KEY_STORAGE_KEY) or ""
        self.is_open = False
        self.show_key_prompt = False
        self.pending = False
        self.messages: list[ChatMessage] = []

    @property
    def state(self) -> ChatState:
        if not self.is_open:
            return ChatState.CLOSED
        return ChatState.OPEN_READY if self.api_key else ChatState.OPEN_AWAITING_KEY

    def toggle(self) -> ChatState:
        self.is_open = not self.is_open
        if self.is_open:
            self.show_key_prompt = not self.api_key
        return self.state

    def save_api_key(self, raw: str) -> None:
        key = (raw or "").strip()
        if not key.startswith(API_KEY_PREFIX):
            raise InvalidCredentialError()

        self.api_key = key
        self.storage.set_item(API_KEY_STORAGE_KEY, key)
        self.show_key_prompt = False
        self._add("assistant", KEY_SAVED_MESSAGE)

    def _add(self, role: str, content: str, loading: bool = False) -> ChatMessage:
        message = ChatMessage(role, content, loading)
        self.messages.append(message)
        return message

    def _remove(self, message: ChatMessage) -> None:
        self.messages = [m for m in self.messages if m is not message]

    def send_message(self, text: str) -> Optional[ChatMessage]:
        """Append the user text and the assistant's reply; returns the reply."""
        message = (text or "").strip()
        if not message or self.pending:
            return None

        self._add("user", message)

        if not self.api_key:
            self.show_key_prompt = True
            return self._add("assistant", KEY_REQUIRED_MESSAGE)

        self.pending = True
        loading = self._add("assistant", "", loading=True)
        try:
            result = self.completer(self.api_key, message)
        finally:
            self._remove(loading)
            self.pending = False

        if "error" in result:
            return self._add("assistant", ERROR_PREFIX + str(result["error"]))
        return self._add("assistant", result["content"])
