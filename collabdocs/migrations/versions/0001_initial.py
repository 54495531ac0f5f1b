"""documents, pages, collaborators and join requests

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.String(length=120), nullable=False),
        sa.Column("page_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("page_count BETWEEN 1 AND 10", name="ck_documents_page_count"),
        sa.CheckConstraint("updated_at >= created_at", name="ck_documents_updated_after_created"),
    )
    op.create_index("ix_documents_owner_id", "documents", ["owner_id"])

    op.create_table(
        "document_pages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("doc_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("page_index", sa.Integer(), nullable=False),
        sa.Column("style", sa.Integer(), nullable=False),
        sa.Column("y_update", sa.LargeBinary(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.UniqueConstraint("doc_id", "page_index", name="uq_document_pages_doc_page"),
        sa.CheckConstraint("page_index BETWEEN 0 AND 9", name="ck_document_pages_index"),
        sa.CheckConstraint("style IN (1, 2, 3)", name="ck_document_pages_style"),
    )

    op.create_table(
        "document_collaborators",
        sa.Column("doc_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), primary_key=True),
        sa.Column("role", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("role = 2", name="ck_document_collaborators_role"),
    )
    op.create_index("ix_document_collaborators_user_id", "document_collaborators", ["user_id"])

    op.create_table(
        "document_join_requests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("doc_id", sa.Integer(), sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("decided_at", sa.BigInteger(), nullable=True),
        sa.Column("decided_by", sa.BigInteger(), nullable=True),
        sa.UniqueConstraint("doc_id", "user_id", name="uq_document_join_requests_doc_user"),
        sa.CheckConstraint("status IN (0, 1, 2)", name="ck_document_join_requests_status"),
    )


def downgrade():
    op.drop_table("document_join_requests")
    op.drop_index("ix_document_collaborators_user_id", table_name="document_collaborators")
    op.drop_table("document_collaborators")
    op.drop_table("document_pages")
    op.drop_index("ix_documents_owner_id", table_name="documents")
    op.drop_table("documents")
