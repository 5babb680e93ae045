"""Shared API constants."""

# Vector size used by DB and embedding normalization (match migration 001)
EMBEDDING_DIM = 512

# matching_entities shown per founder
MATCHING_ENTITIES_LIMIT = 10

PROFILE_DATA_CATEGORY = "profile"
REJECTED_DATAPOINT_STATUS = "rejected"
