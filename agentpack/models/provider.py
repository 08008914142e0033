"""Catalog of supported LLM provider/model combinations."""

from pydantic import Field

from agentpack.models.base import CamelModel


class LLMProvider(CamelModel):
    """A provider and the models the platform allows for it."""

    name: str  # display name, e.g. "Anthropic Claude"
    models: list[str] = Field(default_factory=list)
    default_model: str


class ProviderCatalog(CamelModel):
    """All providers keyed by provider id (e.g. "claude", "openai")."""

    providers: dict[str, LLMProvider] = Field(default_factory=dict)

    @property
    def default_provider(self) -> str | None:
        return next(iter(self.providers), None)

    def supports(self, provider: str, model: str) -> bool:
        entry = self.providers.get(provider)
        return entry is not None and model in entry.models

    def default_model(self, provider: str) -> str | None:
        entry = self.providers.get(provider)
        return entry.default_model if entry else None
