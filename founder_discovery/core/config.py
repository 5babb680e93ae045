from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the project root so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    # Engine and migrations read DATABASE_URL / SQL_ECHO from the environment directly
    database_url: str = "postgresql://localhost/founder_discovery"
    sql_echo: bool = False

    # Organization used when a discover request omits organization_id (no built-in default)
    default_organization_id: str

    # Chat (OpenAI-compatible); None => provider-specific default
    chat_api_base_url: str | None = None
    chat_api_key: str | None = None
    chat_model: str | None = None

    # Embeddings (OpenAI-compatible); dimension must match canonical_entities.embedding_512
    embed_api_base_url: str | None = None
    embed_api_key: str | None = None
    embed_model: str = "text-embedding-3-small"
    embed_dimension: int = 512

    openai_api_key: str | None = None

    # Discover ranking (tunable; subject looser than criteria)
    discover_subject_similarity_min: float = 0.3
    discover_criteria_similarity_min: float = 0.4
    discover_evidence_confidence_min: float = 0.35
    discover_candidate_limit: int = 100
    discover_matches_per_person: int = 5
    discover_default_num_results: int = 20
    discover_max_num_results: int = 100
    discover_timeout_seconds: float = 30.0
    # Concurrent per-founder enrichment lookups (each holds one DB connection)
    discover_enrichment_concurrency: int = 8

    # datapoint_entity_index.source_name carrying the LinkedIn profile URL
    linkedin_source_name: str = "linkedin_enrichment"

    # Rate limiting (per client IP; multi-instance needs Redis later)
    discover_rate_limit: str = "30/minute"

    # CORS (comma-separated origins; * allows all)
    cors_origins: str = "*"

    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parsed CORS origins for middleware."""
        raw = self.cors_origins.strip()
        return ["*"] if not raw else [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
