"""
OpenAI-compatible chat completions client.

Uses the ``openai`` SDK, so any provider exposing the chat completions API
(OpenAI, Azure proxies, local gateways) works by changing ``OPENAI_BASE_URL``.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import openai

from .. import config
from . import AIConfigurationError, AIResponseError, AIServiceError

logger = logging.getLogger(__name__)

Message = Dict[str, str]


def extract_json_from_text(text: str) -> Optional[str]:
    """Pull the most likely JSON object out of free text."""
    # Prefer content wrapped in ```json ... ```
    match = re.search(r'```(?:json)?\s*(\{[\s\S]*?\})\s*```', text)
    if match:
        return match.group(1)

    start_index = text.find('{')
    end_index = text.rfind('}')
    if start_index != -1 and end_index != -1 and end_index > start_index:
        return text[start_index:end_index + 1]

    return None


def remove_trailing_commas(json_string: str) -> str:
    """Drop commas that directly precede a closing brace or bracket."""
    return re.sub(r',\s*([\}\]])', r'\1', json_string)


def parse_json_object(content: str) -> Dict[str, Any]:
    """
    Parse a model reply into a dict.

    Tries the raw text, then the extracted object, then the extracted object
    with trailing commas removed.

    Raises:
        AIResponseError: If no JSON object can be recovered.
    """
    candidates = [content]
    extracted = extract_json_from_text(content)
    if extracted:
        candidates += [extracted, remove_trailing_commas(extracted)]

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise AIResponseError("AI did not return a JSON object", content=content)


class AIClient:
    """
    Minimal chat completions client.

    Args:
        api_key: API key; defaults to ``OPENAI_API_KEY``.
        base_url: API root; defaults to ``OPENAI_BASE_URL``.
        model: Chat model name; defaults to ``OPENAI_CHAT_MODEL``.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = (api_key if api_key is not None else config.OPENAI_API_KEY).strip()
        self.base_url = (base_url or config.OPENAI_BASE_URL).rstrip("/")
        self.model = model or config.OPENAI_CHAT_MODEL
        self.timeout = timeout or config.AI_TIMEOUT_SECONDS
        self._openai_client = None

    @property
    def openai_client(self) -> openai.OpenAI:
        """Lazily build the SDK client."""
        if self._openai_client is None:
            client_kwargs: Dict[str, Any] = {"api_key": self.api_key, "timeout": self.timeout, "max_retries": 0}
            if self.base_url:
                client_kwargs["base_url"] = self.base_url
            self._openai_client = openai.OpenAI(**client_kwargs)
        return self._openai_client

    def chat(self, messages: List[Message], json_mode: bool = True, temperature: float = 0.2) -> str:
        """
        Send one chat completion request and return the reply text.

        Raises:
            AIConfigurationError: If no API key is configured.
            AIServiceError: On transport errors or non-2xx responses.
            AIResponseError: If the reply carries no content.
        """
        if not self.api_key:
            raise AIConfigurationError()

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            completion = self.openai_client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            logger.error(f"Chat completion returned status {e.status_code} from {self.base_url}")
            raise AIServiceError(f"AI request failed with status {e.status_code}: {e.message}") from e
        except openai.OpenAIError as e:
            logger.error(f"Chat completion request failed: {e}")
            raise AIServiceError(f"AI request failed: {e}") from e

        if not getattr(completion, "choices", None):
            raise AIResponseError("Malformed completion payload: no choices")

        content = completion.choices[0].message.content
        if not content or not content.strip():
            raise AIResponseError("AI returned no content")
        return content

    def complete_json(self, system: str, user: str, temperature: float = 0.2) -> Dict[str, Any]:
        """Ask for a JSON object and return it parsed."""
        content = self.chat(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            json_mode=True,
            temperature=temperature,
        )
        return parse_json_object(content)

    def complete_text(self, system: str, user: str, temperature: float = 0.7) -> str:
        """Ask for plain text."""
        content = self.chat(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            json_mode=False,
            temperature=temperature,
        )
        return content.strip()
