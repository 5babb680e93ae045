"""Founder discovery: query parsing, candidate retrieval, person scoring, and result assembly."""

from .errors import CandidateRetrievalError, InvalidDiscoverRequest
from .pipeline import run_discover
from .query_parser import parse_discover_query, fallback_parsed_query
from .retriever import merge_candidates, retrieve_candidates
from .scorer import ScoreThresholds, rank_people, score_people
from .assembler import assemble_founders

__all__ = [
    "CandidateRetrievalError",
    "InvalidDiscoverRequest",
    "run_discover",
    "parse_discover_query",
    "fallback_parsed_query",
    "merge_candidates",
    "retrieve_candidates",
    "ScoreThresholds",
    "rank_people",
    "score_people",
    "assemble_founders",
]
