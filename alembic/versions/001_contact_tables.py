"""Contact tables: acme_contacts and internal_contacts.

Revision ID: 001_contact_tables
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001_contact_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # AcmeCRM records, stored verbatim
    op.create_table(
        "acme_contacts",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("data", JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
    )
    op.create_index("idx_acme_contacts_created_at", "acme_contacts", ["created_at"])
    op.create_index("idx_acme_contacts_updated_at", "acme_contacts", ["updated_at"])

    op.create_table(
        "internal_contacts",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("company", sa.String(200), nullable=True),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("address", JSONB(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(50), server_default="active", nullable=False),
        sa.Column("tags", JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("custom_fields", JSONB(), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("source", sa.String(50), nullable=True),
        sa.Column("source_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.UniqueConstraint("source", "source_id", name="uq_internal_contacts_source"),
    )
    op.create_index("idx_internal_contacts_email", "internal_contacts", ["email"])


def downgrade() -> None:
    op.drop_index("idx_internal_contacts_email", table_name="internal_contacts")
    op.drop_table("internal_contacts")
    op.drop_index("idx_acme_contacts_updated_at", table_name="acme_contacts")
    op.drop_index("idx_acme_contacts_created_at", table_name="acme_contacts")
    op.drop_table("acme_contacts")
