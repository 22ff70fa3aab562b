"""
Sub-score calculators. Each returns a fraction in [0, 1]; missing data
scores 0 for that dimension instead of raising.
"""
import re
from typing import Iterable, List, NamedTuple, Optional, Sequence

from talentmatch.models.models import normalize_skills
from talentmatch.services.similarity import cosine_similarity

STOP_WORDS = frozenset({
    "the", "and", "for", "with", "that", "this", "from", "have", "has", "had",
    "you", "your", "are", "our", "their", "his", "her", "was", "were", "will",
    "can", "could", "should", "would", "may", "might", "of", "in", "on", "at",
    "to", "as", "by", "an", "a", "be",
})

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


class SkillMatch(NamedTuple):
    score: float
    matched: List[str]
    missing: List[str]


def tokenize(text: str) -> List[str]:
    """Lower-case words with punctuation stripped."""
    return _NON_ALNUM.sub(" ", (text or "").lower()).split()


def content_words(text: str) -> List[str]:
    out = []
    for w in tokenize(text):
        if len(w) > 2 and w not in STOP_WORDS and w not in out:
            out.append(w)
    return out


def experience_score(candidate_years: Optional[float], min_years: Optional[float]) -> float:
    if not min_years:
        return 1.0
    years = candidate_years or 0.0
    if years <= 0:
        return 0.0
    return min(years / min_years, 1.0)


def skill_score(required: Iterable[str], candidate: Iterable[str]) -> SkillMatch:
    req = normalize_skills(required)
    if not req:
        return SkillMatch(1.0, [], [])
    have = set(normalize_skills(candidate))
    matched = [s for s in req if s in have]
    missing = [s for s in req if s not in have]
    return SkillMatch(len(matched) / len(req), matched, missing)


def project_keywords(required_skills: Iterable[str], description: Optional[str] = None) -> List[str]:
    """Required skills (as normalized phrases) followed by description content words."""
    keywords = []
    for skill in normalize_skills(required_skills):
        phrase = " ".join(tokenize(skill))
        if phrase and phrase not in keywords:
            keywords.append(phrase)
    for word in content_words(description or ""):
        if word not in keywords:
            keywords.append(word)
    return keywords


def project_score(
    required_skills: Iterable[str],
    projects: Sequence[str],
    description: Optional[str] = None,
) -> float:
    """Share of job keywords that appear in the candidate's project text.

    A keyword matches on whole words, so "java" does not match "javascript".
    """
    text = " ".join(p for p in (projects or []) if p)
    if not text.strip():
        return 0.0
    keywords = project_keywords(required_skills, description)
    if not keywords:
        return 0.0
    haystack = f" {' '.join(tokenize(text))} "
    hits = sum(1 for k in keywords if f" {k} " in haystack)
    return hits / len(keywords)


def semantic_score(
    resume_embedding: Optional[Sequence[float]],
    job_embedding: Optional[Sequence[float]],
) -> float:
    # DimensionMismatch propagates; the pair is skipped by the caller
    if resume_embedding is None or job_embedding is None:
        return 0.0
    if len(resume_embedding) == 0 or len(job_embedding) == 0:
        return 0.0
    return cosine_similarity(resume_embedding, job_embedding)
