"""Fuzzy subsequence matching with highlight positions."""

from __future__ import annotations

from dataclasses import dataclass

WORD_SEPARATORS = "/_- .:"

MATCH_SCORE = 16
RUN_BONUS = 20
MAX_RUN_STREAK = 16
BOUNDARY_BONUS = 35
MAX_GAP_PENALTY = 40
MAX_LEADING_PENALTY = 15


@dataclass(frozen=True)
class FuzzyMatch:
    score: int
    positions: tuple[int, ...]


def _is_boundary(candidate: str, idx: int) -> bool:
    if idx == 0:
        return True
    prev = candidate[idx - 1]
    if prev in WORD_SEPARATORS:
        return True
    return prev.islower() and candidate[idx].isupper()


def _align_from(
    start: int,
    query_folded: list[str],
    candidate: str,
    candidate_folded: list[str],
) -> FuzzyMatch | None:
    positions = [start]
    cursor = start + 1
    for needle in query_folded[1:]:
        while cursor < len(candidate_folded) and candidate_folded[cursor] != needle:
            cursor += 1
        if cursor >= len(candidate_folded):
            return None
        positions.append(cursor)
        cursor += 1

    score = -min(MAX_LEADING_PENALTY, start)
    run = 0
    prev_idx = -2
    for idx in positions:
        score += MATCH_SCORE
        if idx == prev_idx + 1:
            run += 1
            score += RUN_BONUS + min(MAX_RUN_STREAK, run * 4)
        else:
            if prev_idx >= 0:
                score -= min(MAX_GAP_PENALTY, (idx - prev_idx - 1) * 2)
            run = 0
        if _is_boundary(candidate, idx):
            score += BOUNDARY_BONUS
        prev_idx = idx

    score -= len(candidate) // 5
    return FuzzyMatch(score, tuple(positions))


def fuzzy_match(query: str, candidate: str) -> FuzzyMatch | None:
    """Score ``candidate`` against ``query``.

    Every query character must appear in ``candidate`` in order, compared
    case-insensitively. Contiguous runs, word-boundary hits and short
    candidates score higher. Among all alignments, the best scoring one wins
    and ties go to the earliest start. An empty query matches with a zero
    baseline score and no positions.
    """
    if not query:
        return FuzzyMatch(0, ())

    query_folded = [ch.casefold() for ch in query]
    candidate_folded = [ch.casefold() for ch in candidate]
    if len(query_folded) > len(candidate_folded):
        return None

    best: FuzzyMatch | None = None
    first = query_folded[0]
    for start, ch in enumerate(candidate_folded):
        if ch != first:
            continue
        aligned = _align_from(start, query_folded, candidate, candidate_folded)
        if aligned is None:
            # Later starts leave even less room for the rest of the query.
            break
        if best is None or aligned.score > best.score:
            best = aligned
    return best
