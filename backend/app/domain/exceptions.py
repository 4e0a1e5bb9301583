"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ConfigurationError(Exception):
    """Raised at construction time when a component is misconfigured.

    Never caught or retried — a missing API key or an unset dimension is a
    deployment problem, not a transient fault.
    """


class EmbeddingProviderError(Exception):
    """Raised when an embedding provider returns an error.

    Provider-agnostic — works for OpenRouter, Gemini, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")
