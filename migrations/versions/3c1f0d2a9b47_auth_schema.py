"""auth_schema

Create the schema for marketplace authentication:
- Accounts (password or OAuth-only, case-insensitive unique email/username)
- Account roles
- Account claims (profile data synced from external providers)
- Refresh tokens (one provider refresh token per account)

Revision ID: 3c1f0d2a9b47
Revises:
Create Date: 2026-10-17 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f0d2a9b47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("username", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column(
            "email_confirmed", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("lockout_end", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_accounts_email_lower",
        "accounts",
        [sa.text("lower(email)")],
        unique=True,
    )
    op.create_index(
        "uq_accounts_username_lower",
        "accounts",
        [sa.text("lower(username)")],
        unique=True,
    )

    # ========================================================================
    # ACCOUNT_ROLES table
    # ========================================================================
    op.create_table(
        "account_roles",
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(64), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("account_id", "role"),
    )

    # ========================================================================
    # ACCOUNT_CLAIMS table
    # ========================================================================
    op.create_table(
        "account_claims",
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("claim_type", sa.String(64), nullable=False),
        sa.Column("claim_value", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("account_id", "claim_type", name="uq_account_claim_type"),
    )
    op.create_index(
        "idx_account_claims_account_id", "account_claims", ["account_id"]
    )

    # ========================================================================
    # REFRESH_TOKENS table
    # ========================================================================
    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", name="uq_refresh_tokens_account_id"),
    )

    # Trigger function to update updated_at timestamp
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    op.execute("""
        CREATE TRIGGER update_accounts_updated_at
        BEFORE UPDATE ON accounts
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)

    op.execute("""
        CREATE TRIGGER update_refresh_tokens_updated_at
        BEFORE UPDATE ON refresh_tokens
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    # Drop triggers
    op.execute("DROP TRIGGER IF EXISTS update_refresh_tokens_updated_at ON refresh_tokens")
    op.execute("DROP TRIGGER IF EXISTS update_accounts_updated_at ON accounts")

    # Drop trigger functions
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables (in reverse order of dependencies)
    op.drop_table("refresh_tokens")
    op.drop_table("account_claims")
    op.drop_table("account_roles")
    op.drop_index("uq_accounts_username_lower", table_name="accounts")
    op.drop_index("uq_accounts_email_lower", table_name="accounts")
    op.drop_table("accounts")
