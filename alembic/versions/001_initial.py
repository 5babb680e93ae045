"""Initial schema: canonical entities, person, person datapoints, datapoint entity index.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from pgvector.sqlalchemy import Vector

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "canonical_entities",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("embedding_512", Vector(512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("type", "name", name="uq_canonical_entities_type_name"),
    )
    op.create_index("ix_canonical_entities_type", "canonical_entities", ["type"], unique=False)
    # HNSW for cosine nearest-neighbor (<=>); rows without an embedding are not indexed
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_canonical_entities_embedding_512_hnsw "
        "ON canonical_entities USING hnsw (embedding_512 vector_cosine_ops)"
    )

    op.create_table(
        "person",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("middle_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("occupation", sa.String(500), nullable=True),
        sa.Column("employer", sa.String(500), nullable=True),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("case_session_id", sa.String(255), nullable=True),
        sa.Column("organization_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_person_case_session_id", "person", ["case_session_id"], unique=False)
    op.create_index("ix_person_organization_id", "person", ["organization_id"], unique=False)

    op.create_table(
        "person_datapoints",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("person_id", sa.UUID(), sa.ForeignKey("person.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("data_category", sa.String(50), nullable=True),
        sa.Column("status", sa.String(50), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("snippet", sa.Text(), nullable=True),
        sa.Column("structured_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_person_datapoints_person_id", "person_datapoints", ["person_id"], unique=False)

    op.create_table(
        "datapoint_entity_index",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("person_id", sa.UUID(), sa.ForeignKey("person.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "datapoint_id",
            sa.UUID(),
            sa.ForeignKey("person_datapoints.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_value", sa.Text(), nullable=False),
        sa.Column("canonical_name", sa.String(500), nullable=True),
        sa.Column(
            "canonical_entity_id",
            sa.UUID(),
            sa.ForeignKey("canonical_entities.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0"),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("source_name", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_datapoint_entity_index_person_id", "datapoint_entity_index", ["person_id"], unique=False)
    op.create_index(
        "ix_datapoint_entity_index_canonical_entity_id",
        "datapoint_entity_index",
        ["canonical_entity_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_datapoint_entity_index_canonical_entity_id", table_name="datapoint_entity_index")
    op.drop_index("ix_datapoint_entity_index_person_id", table_name="datapoint_entity_index")
    op.drop_table("datapoint_entity_index")
    op.drop_index("ix_person_datapoints_person_id", table_name="person_datapoints")
    op.drop_table("person_datapoints")
    op.drop_index("ix_person_organization_id", table_name="person")
    op.drop_index("ix_person_case_session_id", table_name="person")
    op.drop_table("person")
    op.execute("DROP INDEX IF EXISTS ix_canonical_entities_embedding_512_hnsw")
    op.drop_index("ix_canonical_entities_type", table_name="canonical_entities")
    op.drop_table("canonical_entities")
