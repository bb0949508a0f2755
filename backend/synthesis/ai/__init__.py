"""
Generative text API access for Synthesis.

All calls to the external LLM go through :class:`AIClient`. Routes get a
client from the :func:`get_ai_client` dependency so tests can swap in a fake.
"""

from functools import lru_cache


class AIServiceError(Exception):
    """Base exception for failures talking to the generative text API."""
    pass


class AIConfigurationError(AIServiceError):
    """Raised when the API key is missing."""
    def __init__(self, message: str = ""):
        self.message = message or "OPENAI_API_KEY is missing or empty; set it to enable AI features."
        super().__init__(self.message)


class AIResponseError(AIServiceError):
    """Raised when the API answers with something we cannot use."""
    def __init__(self, message: str = "", content: str = ""):
        self.message = message or "AI returned an unusable response"
        self.content = content
        super().__init__(self.message)


from .client import AIClient  # noqa: E402


@lru_cache(maxsize=1)
def get_ai_client() -> AIClient:
    """Dependency returning the process-wide client built from the environment."""
    return AIClient()


__all__ = [
    "AIServiceError",
    "AIConfigurationError",
    "AIResponseError",
    "AIClient",
    "get_ai_client",
]
