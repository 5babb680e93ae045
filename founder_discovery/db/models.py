import uuid

from sqlalchemy import (
    Column,
    String,
    Text,
    Float,
    DateTime,
    ForeignKey,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from pgvector.sqlalchemy import Vector

from founder_discovery.core.constants import EMBEDDING_DIM

from .session import Base


def uuid4_str():
    return str(uuid.uuid4())


class CanonicalEntity(Base):
    """Deduplicated real-world entity produced by offline entity resolution."""
    __tablename__ = "canonical_entities"

    id = Column(UUID(as_uuid=False), primary_key=True, default=uuid4_str)
    name = Column(String(500), nullable=False)
    # occupation, company, university, high_school, location, interest_subcategory
    type = Column(String(50), nullable=False)
    # Null until backfilled; such rows are skipped by vector search
    embedding = Column("embedding_512", Vector(EMBEDDING_DIM), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("type", "name", name="uq_canonical_entities_type_name"),
        Index("ix_canonical_entities_type", "type"),
    )


class Person(Base):
    __tablename__ = "person"

    id = Column(UUID(as_uuid=False), primary_key=True, default=uuid4_str)
    first_name = Column(String(255), nullable=True)
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    occupation = Column(String(500), nullable=True)
    employer = Column(String(500), nullable=True)
    location = Column(String(500), nullable=True)
    case_session_id = Column(String(255), nullable=True)
    organization_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    datapoints = relationship("PersonDatapoint", back_populates="person")
    evidence = relationship("DatapointEntityIndex", back_populates="person")

    __table_args__ = (
        Index("ix_person_case_session_id", "case_session_id"),
        Index("ix_person_organization_id", "organization_id"),
    )


class PersonDatapoint(Base):
    """Raw source document scraped for a person (profile pages, articles, ...)."""
    __tablename__ = "person_datapoints"

    id = Column(UUID(as_uuid=False), primary_key=True, default=uuid4_str)
    person_id = Column(UUID(as_uuid=False), ForeignKey("person.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=True)  # linkedin, instagram, article, ...
    data_category = Column(String(50), nullable=True)  # profile, web, ...
    status = Column(String(50), nullable=True)  # pending, approved, rejected
    url = Column(Text, nullable=True)
    title = Column(Text, nullable=True)
    snippet = Column(Text, nullable=True)
    structured_data = Column(JSONB, nullable=True)
    confidence = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    person = relationship("Person", back_populates="datapoints")

    __table_args__ = (Index("ix_person_datapoints_person_id", "person_id"),)


class DatapointEntityIndex(Base):
    """One extracted entity mention for a person; optionally resolved to a canonical entity."""
    __tablename__ = "datapoint_entity_index"

    id = Column(UUID(as_uuid=False), primary_key=True, default=uuid4_str)
    person_id = Column(UUID(as_uuid=False), ForeignKey("person.id", ondelete="CASCADE"), nullable=False)
    datapoint_id = Column(
        UUID(as_uuid=False), ForeignKey("person_datapoints.id", ondelete="SET NULL"), nullable=True
    )
    entity_type = Column(String(50), nullable=False)
    entity_value = Column(Text, nullable=False)
    canonical_name = Column(String(500), nullable=True)
    canonical_entity_id = Column(
        UUID(as_uuid=False), ForeignKey("canonical_entities.id", ondelete="SET NULL"), nullable=True
    )
    confidence = Column(Float, nullable=False, default=0.0)  # extraction certainty, 0..1
    source_url = Column(Text, nullable=True)
    source_name = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    person = relationship("Person", back_populates="evidence")

    __table_args__ = (
        Index("ix_datapoint_entity_index_person_id", "person_id"),
        Index("ix_datapoint_entity_index_canonical_entity_id", "canonical_entity_id"),
    )
