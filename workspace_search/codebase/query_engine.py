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

"""Search over the index store with optional query expansion.

Expansion is best-effort. When the base search finds fewer results than
the expansion threshold, the expander is asked for alternative terms
under a timeout, each term is searched in turn, and new hits are appended
after the base results until the result limit is reached. A failing,
slow or malformed expander leaves the base results untouched.
"""

import asyncio
import logging
from typing import List, Optional

from workspace_search.codebase.models import SearchResult
from workspace_search.codebase.query_expander import QueryExpander
from workspace_search.codebase.search import keyword_search, tokenize
from workspace_search.codebase.store import IndexStore
from workspace_search.config import SearchSettings

logger = logging.getLogger(__name__)


class QueryEngine:
    """Answers keyword queries from an :class:`IndexStore`."""

    def __init__(
        self,
        store: IndexStore,
        settings: Optional[SearchSettings] = None,
        expander: Optional[QueryExpander] = None,
    ):
        self.store = store
        self.settings = settings or SearchSettings()
        self.expander = expander

    def _limit(self, max_results: Optional[int]) -> int:
        return self.settings.max_results if max_results is None else max_results

    def keyword_search(self, query: str, max_results: Optional[int] = None) -> List[SearchResult]:
        return keyword_search(self.store.all(), query, self._limit(max_results))

    async def search(
        self,
        query: str,
        max_results: Optional[int] = None,
        use_expansion: bool = False,
    ) -> List[SearchResult]:
        """Search the index.

        Args:
            query: Whitespace-separated keywords
            max_results: Maximum number of results (defaults to settings)
            use_expansion: Ask the expander for more terms when results are few

        Returns:
            Base results in rank order, followed by any expansion results
        """
        limit = self._limit(max_results)
        results = self.keyword_search(query, limit)

        if (
            not use_expansion
            or self.expander is None
            or not tokenize(query)
            or len(results) >= min(self.settings.expansion_threshold, limit)
        ):
            return results

        terms = await self._expand(query)
        if not terms:
            return results
        return self._merge(results, terms, limit)

    async def _expand(self, query: str) -> List[str]:
        """Ask the expander for terms; any failure yields no terms."""
        try:
            terms = await asyncio.wait_for(
                self.expander.expand(query), timeout=self.settings.expansion_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Query expansion timed out after {self.settings.expansion_timeout}s for {query!r}"
            )
            return []
        except Exception as e:
            logger.warning(f"Query expansion failed for {query!r}: {e}")
            return []

        if not isinstance(terms, list):
            logger.warning(f"Query expansion returned {type(terms).__name__}, expected list")
            return []

        cleaned = []
        for term in terms:
            if isinstance(term, str) and term.strip() and term not in cleaned:
                cleaned.append(term)
        logger.debug(f"Expanded {query!r} to {cleaned}")
        return cleaned[: self.settings.max_expansion_terms]

    def _merge(self, results: List[SearchResult], terms: List[str], limit: int) -> List[SearchResult]:
        merged = list(results)
        seen = {result.key for result in merged}
        records = self.store.all()

        for term in terms:
            if len(merged) >= limit:
                break
            for result in keyword_search(records, term, limit):
                if result.key in seen:
                    continue
                seen.add(result.key)
                merged.append(result)
                if len(merged) >= limit:
                    break

        return merged

    async def find_definition(self, name: str) -> Optional[SearchResult]:
        """First search hit for a symbol name, or None."""
        results = await self.search(name, max_results=1)
        return results[0] if results else None

    async def find_references(
        self, name: str, max_results: Optional[int] = None
    ) -> List[SearchResult]:
        return await self.search(name, max_results=max_results)
