"""Fuzzy ranking of catalogue entries against a search query.

Scoring tiers:
  substring    Query is a contiguous substring of the target; always outranks
               any subsequence match of the same query (shorter targets win)
  subsequence  Query characters appear in order in the target:
               10 per matched character
               +5 per character already in the current run of adjacent matches
               +20 when the match starts a word
  0            No match

Pure functions, no I/O.
"""

from typing import List, Optional, Sequence, Tuple

from phonebook.models import Project

SUBSTRING_BASE = 1000
LENGTH_BONUS_CEILING = 100
MATCH_POINTS = 10
STREAK_POINTS = 5
WORD_START_POINTS = 20
DEFAULT_PATH_DIVISOR = 2


def fuzzy_ceiling(length: int) -> int:
    """Highest subsequence score a query of ``length`` characters can reach."""
    return sum(
        MATCH_POINTS + STREAK_POINTS * streak + WORD_START_POINTS
        for streak in range(length)
    )


def score(query: str, target: str) -> int:
    """Score how well ``query`` matches ``target``, case-insensitively.

    Args:
        query: Search text
        target: Candidate text

    Returns:
        0 when there is no match, otherwise a positive score
    """
    if not query:
        return 0

    query = query.lower()
    target = target.lower()

    if query in target:
        base = max(SUBSTRING_BASE, fuzzy_ceiling(len(query)) + 1)
        return base + max(0, LENGTH_BONUS_CEILING - len(target))

    total = 0
    matched = 0
    streak = 0
    for i, char in enumerate(target):
        if matched == len(query):
            break
        if char != query[matched]:
            streak = 0
            continue

        total += MATCH_POINTS + streak * STREAK_POINTS
        streak += 1
        matched += 1

        if i == 0 or not target[i - 1].isalpha():
            total += WORD_START_POINTS

    if matched < len(query):
        return 0
    return total


def score_project(
    query: str, project: Project, path_divisor: int = DEFAULT_PATH_DIVISOR
) -> int:
    """Effective score of a project: its best field, with path matches discounted."""
    return max(
        score(query, project.name),
        score(query, project.tag),
        score(query, project.description),
        score(query, project.path) // path_divisor,
    )


def rank(
    query: str,
    projects: Sequence[Project],
    path_divisor: int = DEFAULT_PATH_DIVISOR,
) -> List[int]:
    """Order catalogue indices for a query.

    An empty (or all-whitespace) query keeps every project in catalogue
    order. Otherwise non-matching projects are dropped and the rest are
    sorted by descending score; equal scores keep catalogue order.
    """
    query = query.strip()
    if not query:
        return list(range(len(projects)))

    scored = []
    for index, project in enumerate(projects):
        value = score_project(query, project, path_divisor)
        if value > 0:
            scored.append((value, index))

    scored.sort(key=lambda item: -item[0])
    return [index for _, index in scored]


def match_span(query: str, target: str) -> Optional[Tuple[int, int]]:
    """Locate ``query`` in ``target`` as a case-insensitive substring.

    Returns:
        (start, end) offsets into ``target``, or None
    """
    query = query.strip().lower()
    if not query:
        return None
    lowered = target.lower()
    if len(lowered) == len(target):
        start = lowered.find(query)
        return None if start == -1 else (start, start + len(query))

    # Lowercasing changed the length, so offsets into lowered are not
    # offsets into target
    width = len(query)
    for start in range(len(target) - width + 1):
        if target[start : start + width].lower() == query:
            return start, start + width
    return None
