# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Query expansion for code search.

An expander turns one query into alternative search terms. The query
engine only asks for expansions when the plain keyword search returns few
results, and treats any expander failure as "no expansions".

Expanders provided here:
- LLMQueryExpander: asks a language model for 3-5 alternative terms
- StaticQueryExpander: offline dictionary of code-search synonyms
- OllamaCompletion: minimal completion callable for a local Ollama server
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

Message = Dict[str, str]
CompletionFn = Callable[[List[Message]], Awaitable[str]]

EXPANSION_SYSTEM_PROMPT = (
    "You are a code search assistant. Given a search query, suggest related keywords, "
    "function names, or concepts that might help find relevant code."
)

EXPANSION_USER_PROMPT = """Search query: "{query}"

Suggest 3-5 alternative search terms or patterns that might help find relevant code.
Format as a JSON array of strings."""


@runtime_checkable
class QueryExpander(Protocol):
    """Collaborator that suggests alternative search terms."""

    async def expand(self, query: str) -> List[str]:
        """Return alternative terms for ``query``; may raise on failure."""
        ...


def build_expansion_messages(query: str) -> List[Message]:
    return [
        {"role": "system", "content": EXPANSION_SYSTEM_PROMPT},
        {"role": "user", "content": EXPANSION_USER_PROMPT.format(query=query)},
    ]


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_expansion_terms(text: str) -> List[str]:
    """Parse a model response into search terms.

    Accepts a JSON array of strings or an object with a ``terms`` array,
    optionally wrapped in a Markdown code fence.

    Raises:
        ValueError: The response is not in either form
    """
    try:
        data = json.loads(_strip_code_fence(text))
    except ValueError as e:
        raise ValueError(f"Expansion response is not JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("terms")
    if not isinstance(data, list):
        raise ValueError("Expansion response has no list of terms")

    terms: List[str] = []
    for item in data:
        if not isinstance(item, str):
            raise ValueError(f"Expansion term is not a string: {item!r}")
        term = item.strip()
        if term and term not in terms:
            terms.append(term)
    return terms


class LLMQueryExpander:
    """Expands queries by asking a language model for alternative terms.

    Example:
        >>> async def complete(messages):
        ...     return '["parse_config", "load settings"]'
        >>> expander = LLMQueryExpander(complete)
        >>> asyncio.run(expander.expand("configuration loading"))  # doctest: +SKIP
        ['parse_config', 'load settings']
    """

    def __init__(self, complete: CompletionFn, max_terms: int = 5):
        """Initialize expander.

        Args:
            complete: Async callable taking chat messages and returning the reply text
            max_terms: Maximum number of terms to return
        """
        self._complete = complete
        self.max_terms = max_terms

    async def expand(self, query: str) -> List[str]:
        response = await self._complete(build_expansion_messages(query))
        terms = [t for t in parse_expansion_terms(response) if t.casefold() != query.casefold()]
        return terms[: self.max_terms]


# Maps conceptual terms to implementation-specific variations
SEMANTIC_QUERY_EXPANSIONS: Dict[str, List[str]] = {
    "error handling": ["exception", "try", "except", "catch", "raise", "pcall"],
    "exception": ["error", "raise", "throw", "except", "catch"],
    "configuration": ["config", "settings", "options", "setup"],
    "settings": ["config", "configuration", "options"],
    "test": ["assert", "pytest", "describe", "it(", "expect"],
    "logging": ["logger", "log", "debug", "warning", "notify"],
    "authentication": ["auth", "login", "credentials", "token", "api_key"],
    "cache": ["cached", "cache_dir", "ttl", "memoize"],
    "database": ["db", "sql", "query", "sqlite", "store"],
    "storage": ["save", "load", "persist", "write", "read"],
    "endpoint": ["route", "handler", "url", "request"],
    "async": ["await", "coroutine", "callback", "defer", "schedule"],
    "http": ["request", "curl", "fetch", "client", "response"],
}


class StaticQueryExpander:
    """Offline expander backed by a synonym dictionary.

    A term is used when its key appears in the query (case-insensitive).
    """

    def __init__(self, expansions: Optional[Dict[str, List[str]]] = None, max_terms: int = 5):
        """Initialize query expander.

        Args:
            expansions: Custom expansion dictionary. If None, uses SEMANTIC_QUERY_EXPANSIONS.
            max_terms: Maximum number of terms to return
        """
        self.expansions = expansions or SEMANTIC_QUERY_EXPANSIONS
        self.max_terms = max_terms

    def is_expandable(self, query: str) -> bool:
        folded = query.casefold()
        return any(key.casefold() in folded for key in self.expansions)

    async def expand(self, query: str) -> List[str]:
        folded = query.casefold()
        terms: List[str] = []
        for key, variations in self.expansions.items():
            if key.casefold() not in folded:
                continue
            for term in variations:
                if term not in terms and term.casefold() != folded:
                    terms.append(term)
        return terms[: self.max_terms]


def messages_to_text(messages: List[Message]) -> str:
    """Flatten chat messages for completion endpoints without chat support."""
    labels = {"system": "System", "user": "User", "assistant": "Assistant"}
    parts = [
        f"{labels[m['role']]}: {m['content']}" for m in messages if m.get("role") in labels
    ]
    return "\n\n".join(parts)


class OllamaCompletion:
    """Completion callable for a local Ollama server.

    Usable as the ``complete`` argument of :class:`LLMQueryExpander`.
    """

    def __init__(
        self,
        model: str = "qwen2.5-coder:7b",
        base_url: str = "http://localhost:11434",
        timeout: float = 30.0,
        temperature: float = 0.2,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __call__(self, messages: List[Message]) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": messages_to_text(messages),
            "stream": False,
            "format": "json",
            "options": {"temperature": self.temperature},
        }
        response = await self.client.post("/api/generate", json=payload)
        response.raise_for_status()
        data = response.json()
        if "error" in data:
            raise RuntimeError(f"Ollama error: {data['error']}")
        if "response" not in data:
            raise RuntimeError("Invalid Ollama response format")
        return data["response"]

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
