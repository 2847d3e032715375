"""
Relevance-ranked full-text search over published posts.

Works the same on PostgreSQL and SQLite: SQL narrows the candidates with
escaped ``ILIKE`` on every query stem, then each candidate is scored here
from term frequency in title and body.

Scoring, per field and per query stem that occurs in the field::

    weight * (0.5 + 0.5 * occurrences / field_token_count)

A term found at all is worth at least ``0.5 * weight``; repeated use in a
short field is worth up to ``weight``. Field scores are summed.

The prefilter keeps the newest ``SEARCH_CANDIDATE_LIMIT`` matching rows;
older matches beyond that window are not ranked.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import Post

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)

STOP_WORDS = frozenset(
    """
    a an and are as at be but by for from has have he her his i if in into is it
    its me my no not of on or our she so than that the their them then there these
    they this to was we were what when where which who will with you your
    """.split()
)

FIELD_WEIGHTS = {"title": 1.0, "body": 1.0}

# Upper bound on prefiltered rows scored per query
SEARCH_CANDIDATE_LIMIT = 500


def stem(word: str) -> str:
    """Very light English suffix stripping, enough to match plurals and tenses."""
    if len(word) <= 3:
        return word
    for suffix in ("ies", "ing", "ed", "es", "s"):
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            if suffix == "ies":
                return word[:-3] + "y"
            if suffix == "s" and word.endswith("ss"):
                return word
            return word[: -len(suffix)]
    return word


def tokenize(text: str) -> list[str]:
    """Case-fold, split on non-word characters, drop stop words, stem."""
    return [stem(tok) for tok in _TOKEN_RE.findall(text.casefold()) if tok not in STOP_WORDS]


def query_terms(query: str) -> list[str]:
    """Distinct stems of *query*, in order of first appearance."""
    return list(dict.fromkeys(tokenize(query)))


def score_text(terms: list[str], fields: dict[str, str]) -> float:
    score = 0.0
    for field, text in fields.items():
        tokens = tokenize(text)
        if not tokens:
            continue
        counts = Counter(tokens)
        weight = FIELD_WEIGHTS.get(field, 1.0)
        for term in terms:
            occurrences = counts.get(term, 0)
            if occurrences:
                score += weight * (0.5 + 0.5 * occurrences / len(tokens))
    return score


@dataclass(frozen=True)
class SearchHit:
    post: Post
    score: float


def _like_pattern(term: str) -> str:
    # "story" is the stem of "stories"; match on the shared root
    if term.endswith("y") and len(term) > 3:
        term = term[:-1]
    escaped = term.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")
    return f"%{escaped}%"


def _case_variants(term: str) -> list[str]:
    # SQLite only folds ASCII in LOWER/LIKE; PostgreSQL ILIKE handles the rest
    if term.isascii():
        return [term]
    return list(dict.fromkeys([term, term.capitalize(), term.upper()]))


async def search_posts(
    session: AsyncSession,
    query: str,
    limit: int,
    candidate_limit: int = SEARCH_CANDIDATE_LIMIT,
) -> list[SearchHit]:
    """Return up to *limit* published posts ranked by descending relevance.

    Only the *candidate_limit* newest posts that pass the SQL prefilter are
    scored, so a very common stem never loads the whole table.

    Callers must not pass an empty or whitespace-only *query*.
    """
    terms = query_terms(query)
    if not terms:
        return []

    matches = []
    for term in terms:
        for variant in _case_variants(term):
            pattern = _like_pattern(variant)
            matches.append(Post.title.ilike(pattern, escape="\\"))
            matches.append(Post.body.ilike(pattern, escape="\\"))

    result = await session.execute(
        select(Post)
        .where(Post.published.is_(True), or_(*matches))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(candidate_limit)
    )
    candidates = result.unique().scalars().all()

    hits = []
    for post in candidates:
        score = score_text(terms, {"title": post.title, "body": post.body})
        # Substring prefilter can admit posts that share no whole stem
        if score > 0:
            hits.append(SearchHit(post=post, score=score))

    hits.sort(key=lambda h: (h.score, h.post.created_at, h.post.id), reverse=True)
    return hits[:limit]
