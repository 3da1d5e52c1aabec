"""
Typo-tolerant search used by the search modal.

Similarity is 1 - levenshtein / len(longer), compared case-insensitively.
"""
import re
from typing import Iterable, List, Sequence

DEFAULT_THRESHOLD = 0.6
SUGGESTION_THRESHOLD = 0.7

_WS = re.compile(r"\s+")


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return 1.0
    distance = levenshtein_distance(longer.lower(), shorter.lower())
    return (len(longer) - distance) / len(longer)


def _best_word_score(query: str, target: str) -> float:
    best = 0.0
    for qw in _WS.split(query):
        for tw in _WS.split(target):
            best = max(best, similarity(qw, tw))
    return best


def fuzzy_match(query: str, target: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    if not query or not target:
        return False
    q = query.lower().strip()
    t = target.lower().strip()
    if q in t:
        return True
    if _best_word_score(q, t) >= threshold:
        return True
    return similarity(q, t) >= threshold


def fuzzy_search_items(items: Iterable[dict], query: str, fields: Sequence[str], threshold: float = DEFAULT_THRESHOLD) -> List[dict]:
    """Filter items to those scoring >= threshold on any field, best first.

    Items containing the query as a plain substring rank ahead of fuzzy hits;
    ties keep input order.
    """
    items = list(items)
    if not (query or "").strip():
        return items
    q = query.lower().strip()

    scored = []
    for item in items:
        score, exact = 0.0, False
        for field in fields:
            value = item.get(field)
            if not value:
                continue
            text = str(value).lower()
            if q in text:
                exact, score = True, 1.0
                continue
            score = max(score, _best_word_score(q, text), similarity(q, text))
        if score >= threshold:
            scored.append((not exact, -score, item))

    scored.sort(key=lambda s: (s[0], s[1]))
    return [item for _, _, item in scored]


def get_search_suggestions(items: Iterable[dict], query: str, field: str = "title", max_suggestions: int = 5) -> List[str]:
    if not (query or "").strip():
        return []
    q = query.lower().strip()
    out: List[str] = []
    for item in items:
        value = item.get(field)
        if not value:
            continue
        text = str(value)
        if text in out:
            continue
        if text.lower().startswith(q) or fuzzy_match(q, text, SUGGESTION_THRESHOLD):
            out.append(text)
            if len(out) >= max_suggestions:
                break
    return out
