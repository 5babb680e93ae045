"""Shared utilities."""

from founder_discovery.core import EMBEDDING_DIM


def strip_json_from_response(raw: str) -> str:
    """Strip markdown/code fences from an LLM response and return JSON text."""
    s = (raw or "").strip()
    if "```" not in s:
        return s
    for part in s.split("```"):
        p = part.strip()
        if p.lower().startswith("json"):
            p = p[4:].strip()
        if p.startswith("{"):
            return p
    return s


def normalize_embedding(vec: list[float], dim: int = EMBEDDING_DIM) -> list[float]:
    """Truncate or zero-pad vector to fixed dimension (e.g. for DB storage)."""
    if len(vec) < dim:
        return vec[:dim] + [0.0] * (dim - len(vec))
    return vec[:dim]


def dedupe_terms(values: list[str] | None) -> list[str]:
    """Trim terms, drop blanks, and drop case-insensitive duplicates keeping first occurrence."""
    out: list[str] = []
    seen: set[str] = set()
    for v in values or []:
        term = (v or "").strip() if isinstance(v, str) else ""
        if not term or term.lower() in seen:
            continue
        seen.add(term.lower())
        out.append(term)
    return out
