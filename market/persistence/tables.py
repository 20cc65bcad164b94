"""SQLAlchemy table definitions for the marketplace auth store.

These table definitions are used with SQLAlchemy Core and manual mappers.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("username", String(256), nullable=False),
    Column("email", String(256), nullable=False),
    Column("password_hash", Text, nullable=True),  # NULL for OAuth-only accounts
    Column("email_confirmed", Boolean, nullable=False, server_default="false"),
    Column("lockout_end", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# Case-insensitive uniqueness
Index("uq_accounts_email_lower", func.lower(accounts_table.c.email), unique=True)
Index("uq_accounts_username_lower", func.lower(accounts_table.c.username), unique=True)

# ============================================================================
# ACCOUNT ROLES TABLE
# ============================================================================
account_roles_table = Table(
    "account_roles",
    metadata,
    Column(
        "account_id",
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("role", String(64), primary_key=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# ACCOUNT CLAIMS TABLE (profile data synced from external providers)
# ============================================================================
account_claims_table = Table(
    "account_claims",
    metadata,
    Column(
        "account_id",
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("claim_type", String(64), nullable=False),
    Column("claim_value", Text, nullable=False),
    UniqueConstraint("account_id", "claim_type", name="uq_account_claim_type"),
)

Index("idx_account_claims_account_id", account_claims_table.c.account_id)

# ============================================================================
# REFRESH TOKENS TABLE (one provider refresh token per account)
# ============================================================================
refresh_tokens_table = Table(
    "refresh_tokens",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "account_id",
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("token", Text, nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("account_id", name="uq_refresh_tokens_account_id"),
)
