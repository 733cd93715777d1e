"""Initial schema: provinces, users, donors, donations, password reset tokens.

Revision ID: 20261019000000
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "provinces",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_provinces_name"), "provinces", ["name"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("province_id", sa.String(length=36), nullable=False),
        sa.Column("is_provisional", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_province_id"), "users", ["province_id"], unique=False)

    op.create_table(
        "donors",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("bi_number", sa.String(length=64), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("birth_date", sa.String(length=32), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(length=1), nullable=False),
        sa.Column("municipality", sa.String(length=255), nullable=False),
        sa.Column("neighborhood", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("contact", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("position", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("department", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("blood_type", sa.String(length=3), nullable=False),
        sa.Column("rh_factor", sa.String(length=16), nullable=False),
        sa.Column("has_history", sa.Boolean(), nullable=False),
        sa.Column("previous_donations", sa.Integer(), nullable=False),
        sa.Column("last_donation", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("medical_restrictions", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_apt_to_donate", sa.Boolean(), nullable=False),
        sa.Column("available_for_future", sa.Boolean(), nullable=False),
        sa.Column("preferred_contact", sa.String(length=16), nullable=False),
        sa.Column("observations", sa.Text(), nullable=False, server_default=""),
        sa.Column("province_id", sa.String(length=36), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_donors_bi_number"), "donors", ["bi_number"], unique=True)
    op.create_index(op.f("ix_donors_blood_type"), "donors", ["blood_type"], unique=False)
    op.create_index(op.f("ix_donors_province_id"), "donors", ["province_id"], unique=False)
    op.create_index(op.f("ix_donors_created_by"), "donors", ["created_by"], unique=False)

    op.create_table(
        "donations",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("donor_id", sa.String(length=36), nullable=False),
        sa.Column("donation_date", sa.String(length=32), nullable=False),
        sa.Column("donation_time", sa.String(length=16), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_donations_donor_id"), "donations", ["donor_id"], unique=False)
    op.create_index(
        op.f("ix_donations_donation_date"), "donations", ["donation_date"], unique=False
    )

    op.create_table(
        "password_reset_tokens",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_password_reset_tokens_email"), "password_reset_tokens", ["email"], unique=False
    )
    op.create_index(
        op.f("ix_password_reset_tokens_token_hash"),
        "password_reset_tokens",
        ["token_hash"],
        unique=False,
    )
    op.create_index(
        op.f("ix_password_reset_tokens_expires_at"),
        "password_reset_tokens",
        ["expires_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("password_reset_tokens")
    op.drop_table("donations")
    op.drop_table("donors")
    op.drop_table("users")
    op.drop_table("provinces")
