"""Initial Boda schema: users, weddings, guests, contributions, payments.

UUID primary keys are generated in the application layer with
:func:`boda_api.common.ids.generate_uuid7`; timestamps are app-managed UTC.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from boda_api.db.types import GUID

# Revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def _timestamps() -> tuple[sa.Column, sa.Column]:
    """Common created_at / updated_at pair."""
    return (
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def _fk(table: str, column: str, target: str, *, ondelete: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column],
        [f"{target}.id"],
        name=f"{table}_{column}_fkey",
        ondelete=ondelete,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("email_canonical", sa.String(320), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failed_login_count", sa.Integer(), nullable=False),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email_canonical", name="users_email_canonical_key"),
    )

    op.create_table(
        "weddings",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("owner_id", GUID(), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("partner_one_name", sa.String(120), nullable=False),
        sa.Column("partner_two_name", sa.String(120), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("venue_name", sa.String(200), nullable=True),
        sa.Column("venue_address", sa.String(400), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("locale", sa.String(8), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("rsvp_deadline", sa.Date(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="weddings_pkey"),
        _fk("weddings", "owner_id", "users", ondelete="CASCADE"),
        sa.UniqueConstraint("slug", name="weddings_slug_key"),
    )
    op.create_index("weddings_owner_id_idx", "weddings", ["owner_id"])

    op.create_table(
        "guests",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("wedding_id", GUID(), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("email_canonical", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("attending_count", sa.Integer(), nullable=True),
        sa.Column("rsvp_status", sa.String(20), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("dietary_notes", sa.String(500), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("invite_code", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="guests_pkey"),
        _fk("guests", "wedding_id", "weddings", ondelete="CASCADE"),
        sa.UniqueConstraint("invite_code", name="guests_invite_code_key"),
        sa.UniqueConstraint("wedding_id", "email_canonical", name="guests_wedding_email_key"),
        sa.CheckConstraint("party_size >= 1", name="guests_party_size_positive_check"),
        sa.CheckConstraint(
            "attending_count IS NULL OR (attending_count >= 0 AND attending_count <= party_size)",
            name="guests_attending_count_range_check",
        ),
    )
    op.create_index("guests_wedding_id_idx", "guests", ["wedding_id"])
    op.create_index("guests_wedding_id_rsvp_status_idx", "guests", ["wedding_id", "rsvp_status"])

    op.create_table(
        "contributions",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("wedding_id", GUID(), nullable=False),
        sa.Column("contributor_name", sa.String(200), nullable=False),
        sa.Column("contributor_email", sa.String(320), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("status_detail", sa.String(120), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("provider_preference_id", sa.String(120), nullable=True),
        sa.Column("provider_payment_id", sa.String(120), nullable=True),
        sa.Column("checkout_url", sa.String(1000), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="contributions_pkey"),
        _fk("contributions", "wedding_id", "weddings", ondelete="CASCADE"),
        sa.CheckConstraint("amount > 0", name="contributions_amount_positive_check"),
    )
    op.create_index("contributions_wedding_id_idx", "contributions", ["wedding_id"])
    op.create_index(
        "contributions_wedding_id_status_idx", "contributions", ["wedding_id", "status"]
    )
    op.create_index(
        "contributions_provider_payment_id_idx", "contributions", ["provider_payment_id"]
    )

    op.create_table(
        "payment_configs",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("wedding_id", GUID(), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("access_token_encrypted", sa.Text(), nullable=True),
        sa.Column("access_token_last4", sa.String(4), nullable=True),
        sa.Column("public_key", sa.String(200), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False),
        sa.Column("min_amount", sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="payment_configs_pkey"),
        _fk("payment_configs", "wedding_id", "weddings", ondelete="CASCADE"),
        sa.UniqueConstraint("wedding_id", name="payment_configs_wedding_id_key"),
    )

    op.create_table(
        "payment_events",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("event_id", sa.String(200), nullable=False),
        sa.Column("topic", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(120), nullable=True),
        sa.Column("wedding_id", GUID(), nullable=True),
        sa.Column("contribution_id", GUID(), nullable=True),
        sa.Column("outcome", sa.String(40), nullable=False),
        sa.Column("received_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="payment_events_pkey"),
        _fk("payment_events", "wedding_id", "weddings", ondelete="SET NULL"),
        _fk("payment_events", "contribution_id", "contributions", ondelete="SET NULL"),
        sa.UniqueConstraint("provider", "event_id", name="payment_events_provider_event_key"),
    )


def downgrade() -> None:
    op.drop_table("payment_events")
    op.drop_table("payment_configs")
    op.drop_index("contributions_provider_payment_id_idx", table_name="contributions")
    op.drop_index("contributions_wedding_id_status_idx", table_name="contributions")
    op.drop_index("contributions_wedding_id_idx", table_name="contributions")
    op.drop_table("contributions")
    op.drop_index("guests_wedding_id_rsvp_status_idx", table_name="guests")
    op.drop_index("guests_wedding_id_idx", table_name="guests")
    op.drop_table("guests")
    op.drop_index("weddings_owner_id_idx", table_name="weddings")
    op.drop_table("weddings")
    op.drop_table("users")
