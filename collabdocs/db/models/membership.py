from sqlalchemy import BigInteger, CheckConstraint, Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from collabdocs.db.base import Base


class DocumentCollaborator(Base):
    """Explicit editor rows. The owner lives on documents.owner_id only."""

    __tablename__ = "document_collaborators"
    __table_args__ = (
        CheckConstraint("role = 2", name="ck_document_collaborators_role"),
    )

    doc_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(BigInteger, primary_key=True, index=True)
    role = Column(Integer, nullable=False, default=2)
    added_at = Column(BigInteger, nullable=False)

    # Relationships
    document = relationship("Document", back_populates="collaborators")


class DocumentJoinRequest(Base):
    __tablename__ = "document_join_requests"
    __table_args__ = (
        UniqueConstraint("doc_id", "user_id", name="uq_document_join_requests_doc_user"),
        CheckConstraint("status IN (0, 1, 2)", name="ck_document_join_requests_status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(BigInteger, nullable=False)
    status = Column(Integer, nullable=False, default=0)  # 0=pending, 1=approved, 2=denied
    message = Column(Text, nullable=True)
    created_at = Column(BigInteger, nullable=False)
    decided_at = Column(BigInteger, nullable=True)
    decided_by = Column(BigInteger, nullable=True)

    # Relationships
    document = relationship("Document", back_populates="join_requests")
