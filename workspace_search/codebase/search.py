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

"""Keyword scoring over indexed file records.

A file qualifies only if it contains every query keyword (case-insensitive
substring match). Its score is the number of distinct keywords, and its
representative line is the first line containing the most keywords.
"""

from typing import Iterable, List, Optional, Tuple

from workspace_search.codebase.models import FileRecord, SearchResult

DEFAULT_MAX_RESULTS = 20


def tokenize(query: str) -> List[str]:
    """Split a query into distinct case-folded keywords, in query order."""
    keywords: List[str] = []
    for token in query.casefold().split():
        if token not in keywords:
            keywords.append(token)
    return keywords


def best_line(content: str, keywords: List[str]) -> Tuple[int, str]:
    """Find the line containing the most keywords.

    Ties go to the earliest line: the best line only changes on a strictly
    higher count.

    Returns:
        (1-based line number, raw line text)
    """
    lines = content.split("\n")
    best_index = 0
    best_count = 0
    for index, line in enumerate(lines):
        folded = line.casefold()
        count = sum(1 for keyword in keywords if keyword in folded)
        if count > best_count:
            best_index = index
            best_count = count
    return best_index + 1, lines[best_index] if lines else ""


def score_record(record: FileRecord, keywords: List[str]) -> Optional[SearchResult]:
    """Score one record against already tokenized keywords.

    Returns:
        A result, or None unless every keyword occurs in the content
    """
    if not keywords:
        return None

    folded = record.content.casefold()
    score = 0
    for keyword in keywords:
        if keyword not in folded:
            return None
        score += 1

    line, preview = best_line(record.content, keywords)
    return SearchResult(
        path=record.path,
        line=line,
        score=score,
        preview=preview,
        symbols=list(record.symbols),
    )


def keyword_search(
    records: Iterable[FileRecord],
    query: str,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[SearchResult]:
    """Rank records against a whitespace-separated keyword query.

    Args:
        records: Records to search
        query: Keywords, all of which must occur in a file
        max_results: Maximum number of results

    Returns:
        Results ordered by descending score, then by path
    """
    keywords = tokenize(query)
    if not keywords or max_results <= 0:
        return []

    results = []
    for record in records:
        result = score_record(record, keywords)
        if result is not None:
            results.append(result)

    results.sort(key=lambda r: (-r.score, r.path))
    return results[:max_results]
