from sqlalchemy import (
    BigInteger, CheckConstraint, Column, ForeignKey, Integer, LargeBinary, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from collabdocs.db.base import Base, TimestampMixin


class Document(TimestampMixin, Base):
    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint("page_count BETWEEN 1 AND 10", name="ck_documents_page_count"),
        CheckConstraint("updated_at >= created_at", name="ck_documents_updated_after_created"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(BigInteger, nullable=False, index=True)
    title = Column(String(120), nullable=False)
    page_count = Column(Integer, nullable=False)

    # Relationships
    pages = relationship("DocumentPage", back_populates="document", cascade="all, delete-orphan", passive_deletes=True)
    collaborators = relationship(
        "DocumentCollaborator", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )
    join_requests = relationship(
        "DocumentJoinRequest", back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )


class DocumentPage(TimestampMixin, Base):
    __tablename__ = "document_pages"
    __table_args__ = (
        UniqueConstraint("doc_id", "page_index", name="uq_document_pages_doc_page"),
        CheckConstraint("page_index BETWEEN 0 AND 9", name="ck_document_pages_index"),
        CheckConstraint("style IN (1, 2, 3)", name="ck_document_pages_style"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    page_index = Column(Integer, nullable=False)
    style = Column(Integer, nullable=False, default=3)
    y_update = Column(LargeBinary, nullable=False, default=b"")

    # Relationships
    document = relationship("Document", back_populates="pages")
