"""Candidate to interviewer compatibility scoring.

Scores are built from token overlap only, so the same inputs always give
the same numbers:

  score = 0.6 * coverage + 0.4 * relevance

* coverage:  share of job-requirement tokens found in the candidate's skills
* relevance: interviewer specialization keywords seen in the job text or the
  candidate's skills/position, three hits counting as full relevance
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from saturn_scheduler.models import Candidate, Interviewer, Specialization

COVERAGE_WEIGHT = 0.6
RELEVANCE_WEIGHT = 0.4
RELEVANCE_SATURATION = 3
UNSPECIFIED_RELEVANCE = 0.25
MAX_SKILL_GAPS = 3

_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#.]*")

STOPWORDS = frozenset("""
a about above after all also an and any are as at be been being both but by can
could do does for from has have having he her his how i if in into is it its
just least less may me more most must my need needs no not of on one or our out
over own per plus should so some such than that the their them then there these
they this those through to too under up us very was we well were what when where
which while who will with within would you your
""".split())

# Words that describe the role rather than a skill; never reported as gaps.
FILLER = frozenset("""
ability able background candidate candidates collaborate collaboration company
degree develop developer developers development engineer engineering engineers
environment excellent experience experienced expert expertise familiar
familiarity good great hands hire hiring ideal ideally join junior knowledge
lead looking mid mindset modern nice position preferred proficiency proficient
proven required requirement requirements responsibilities role senior skill
skills solid strong team teams technologies technology tools understanding work
working year years
frontend backend fullstack full-stack mobile devops data security qa product
design leadership
""".split())

SPECIALIZATION_KEYWORDS: dict[Specialization, frozenset[str]] = {
    Specialization.FRONTEND: frozenset({
        "frontend", "react", "vue", "angular", "javascript", "typescript", "css",
        "html", "next.js", "redux", "svelte", "ui", "web",
    }),
    Specialization.BACKEND: frozenset({
        "backend", "python", "java", "go", "golang", "node", "node.js", "django",
        "flask", "fastapi", "spring", "sql", "postgresql", "api", "apis", "rest",
        "graphql", "microservices", "ruby", "rails", "c#", ".net",
    }),
    Specialization.FULLSTACK: frozenset({
        "fullstack", "full-stack", "react", "node", "node.js", "javascript",
        "typescript", "api", "sql", "web", "python",
    }),
    Specialization.MOBILE: frozenset({
        "mobile", "ios", "android", "swift", "kotlin", "flutter", "react-native",
        "dart", "objective-c",
    }),
    Specialization.DEVOPS: frozenset({
        "devops", "docker", "kubernetes", "k8s", "aws", "gcp", "azure",
        "terraform", "ansible", "ci", "cd", "jenkins", "linux", "cloud", "sre",
    }),
    Specialization.DATA: frozenset({
        "data", "sql", "pandas", "spark", "analytics", "statistics", "etl",
        "airflow", "tableau", "bigquery", "snowflake", "warehouse", "r",
    }),
    Specialization.AI_ML: frozenset({
        "ai", "ml", "machine", "learning", "pytorch", "tensorflow", "llm",
        "nlp", "deep", "scikit-learn", "models", "vision", "python",
    }),
    Specialization.SECURITY: frozenset({
        "security", "cybersecurity", "penetration", "owasp", "iam", "siem",
        "compliance", "encryption", "threat", "vulnerability",
    }),
    Specialization.QA: frozenset({
        "qa", "testing", "test", "selenium", "cypress", "automation", "pytest",
        "jest", "quality", "playwright",
    }),
    Specialization.PRODUCT: frozenset({
        "product", "roadmap", "stakeholder", "stakeholders", "agile", "scrum",
        "strategy", "discovery", "metrics",
    }),
    Specialization.DESIGN: frozenset({
        "design", "ux", "ui", "figma", "sketch", "prototyping", "usability",
        "accessibility", "research",
    }),
    Specialization.LEADERSHIP: frozenset({
        "leadership", "lead", "manager", "management", "mentoring", "mentor",
        "architecture", "strategy", "hiring", "principal", "staff",
    }),
}


def words(text: str) -> list[str]:
    """Lower-cased tokens in first-seen order, stopwords removed."""
    seen: dict[str, None] = {}
    for match in _TOKEN_RE.findall((text or "").lower()):
        token = match.rstrip(".")
        if token and not token.isdigit() and token not in STOPWORDS:
            seen.setdefault(token, None)
    return list(seen)


def skill_tokens(text: str) -> list[str]:
    """Tokens that name a skill or technology (role filler removed)."""
    return [t for t in words(text) if t not in FILLER and (len(t) > 1 or t in ("c", "r"))]


@dataclass
class Compatibility:
    score: float
    coverage: float
    relevance: float
    matched_skills: list[str] = field(default_factory=list)
    specialization_hits: list[str] = field(default_factory=list)
    skill_gaps: list[str] = field(default_factory=list)


def compatibility(candidate: Candidate, interviewer: Interviewer, job_tokens: list[str],
                  job_words: set[str]) -> Compatibility:
    cand_skills = skill_tokens(candidate.skills)
    cand_set = set(cand_skills)

    matched = [t for t in job_tokens if t in cand_set]
    coverage = len(matched) / len(job_tokens) if job_tokens else 0.0
    gaps = [t for t in job_tokens if t not in cand_set][:MAX_SKILL_GAPS]

    if interviewer.specialization is None:
        relevance = UNSPECIFIED_RELEVANCE
        hits: list[str] = []
    else:
        context = job_words | set(words(candidate.skills)) | set(words(candidate.position))
        hits = sorted(SPECIALIZATION_KEYWORDS[interviewer.specialization] & context)
        relevance = min(1.0, len(hits) / RELEVANCE_SATURATION)

    score = round(COVERAGE_WEIGHT * coverage + RELEVANCE_WEIGHT * relevance, 2)
    return Compatibility(
        score=min(1.0, max(0.0, score)),
        coverage=coverage,
        relevance=relevance,
        matched_skills=matched,
        specialization_hits=hits,
        skill_gaps=gaps,
    )


def rationale(candidate: Candidate, interviewer: Interviewer, compat: Compatibility,
              job_token_count: int) -> str:
    parts = []
    if compat.matched_skills:
        parts.append(
            f"{candidate.name} covers {len(compat.matched_skills)} of {job_token_count} "
            f"job requirements ({', '.join(compat.matched_skills[:5])})"
        )
    else:
        parts.append(f"{candidate.name} lists none of the {job_token_count} job requirements")
    if compat.specialization_hits:
        parts.append(
            f"{interviewer.name}'s {interviewer.specialization_label} focus matches "
            f"{', '.join(compat.specialization_hits[:4])}"
        )
    elif interviewer.specialization is None:
        parts.append(f"{interviewer.name} is a general interviewer")
    else:
        parts.append(f"{interviewer.name}'s {interviewer.specialization_label} focus is a weak fit")
    return "; ".join(parts)


# ── Behavioral questions ──────────────────────────────────────────────────

BEHAVIORAL_QUESTIONS: dict[str, list[str]] = {
    "junior": [
        "Tell me about a time you had to learn a new technology quickly to finish a task. How did you approach it?",
        "Describe a piece of feedback you received on your work and what you changed because of it.",
        "Tell me about a time you were stuck on a problem. When and how did you ask for help?",
    ],
    "mid": [
        "Describe a project where requirements changed late. How did you adapt and keep the team aligned?",
        "Tell me about a disagreement with a teammate over a technical decision and how it was resolved.",
        "Describe a time you owned a production issue end to end. What did you learn from it?",
    ],
    "senior": [
        "Tell me about a time you mentored someone through a difficult problem. What was your approach?",
        "Describe a high-stakes technical decision you made with incomplete information. How did you manage the risk?",
        "Tell me about a time you had to push back on a stakeholder. How did you handle it?",
    ],
}

_YEARS_RE = re.compile(r"\d+(?:\.\d+)?")


def experience_level(experience: str) -> str:
    text = (experience or "").lower()
    match = _YEARS_RE.search(text)
    if match:
        years = float(match.group())
        if years < 2:
            return "junior"
        if years < 5:
            return "mid"
        return "senior"
    if any(w in text for w in ("senior", "lead", "principal", "staff")):
        return "senior"
    if any(w in text for w in ("junior", "entry", "graduate", "intern")):
        return "junior"
    return "mid"


def behavioral_question(candidate: Candidate, ordinal: int) -> str:
    bank = BEHAVIORAL_QUESTIONS[experience_level(candidate.experience)]
    return bank[ordinal % len(bank)]
