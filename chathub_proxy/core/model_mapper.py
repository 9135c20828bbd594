"""Mapping of OpenAI model names onto ChatHub model identifiers."""

from types import MappingProxyType
from typing import Mapping, Optional

DEFAULT_MODEL_MAPPING: Mapping[str, str] = MappingProxyType({
    "gpt-3.5-turbo": "meta/llama3.1-8b",
    "gpt-3.5-turbo-16k": "meta/llama3.1-8b",
    "gpt-4o": "meta/llama3.1-8b",
    "gpt-4-32k": "meta/llama3.1-8b",
    "gpt-4o-mini": "openai/gpt-4o-mini",
})


class ModelMapper:
    """Read-only lookup table with an identity fallback.

    Built once at startup and shared by every session; it is never
    mutated after construction.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        source = DEFAULT_MODEL_MAPPING if mapping is None else mapping
        self._mapping: Mapping[str, str] = MappingProxyType(dict(source))

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    def resolve(self, name: str) -> str:
        """Return the upstream model for ``name``, or ``name`` itself when unmapped."""
        return self._mapping.get(name, name)

    def names(self) -> list[str]:
        return sorted(self._mapping)
