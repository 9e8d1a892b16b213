"""Initial catalog, review and listing-health schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-12
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "film",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("external_id", sa.String(), nullable=True),
        sa.Column("imdb_id", sa.String(), nullable=True),
        sa.Column("poster_url", sa.String(), nullable=True),
        sa.Column("synopsis", sa.Text(), nullable=True),
        sa.Column("letterboxd_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_film"),
        sa.UniqueConstraint("external_id", name="uq_film_film_external_id"),
    )

    op.create_table(
        "screening",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("film_id", sa.Uuid(), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("booking_url", sa.String(), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["film_id"],
            ["film.id"],
            name="fk_screening_screening_film_id_film",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_screening"),
        sa.UniqueConstraint(
            "film_id", "source_id", "starts_at", name="uq_screening_screening_film_id"
        ),
    )
    op.create_index("ix_screening_film_id", "screening", ["film_id"])
    op.create_index("ix_screening_source_id", "screening", ["source_id"])
    op.create_index("ix_screening_scraped_at", "screening", ["scraped_at"])

    op.create_table(
        "season_film",
        sa.Column("season_slug", sa.String(), nullable=False),
        sa.Column("film_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["film_id"],
            ["film.id"],
            name="fk_season_film_season_film_film_id_film",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("season_slug", "film_id", name="pk_season_film"),
    )

    op.create_table(
        "film_merge",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("duplicate_id", sa.Uuid(), nullable=False),
        sa.Column("canonical_id", sa.Uuid(), nullable=False),
        sa.Column("merged_count", sa.Integer(), nullable=False),
        sa.Column(
            "reason",
            sa.Enum("EXTERNAL_ID_COLLISION", "MANUAL", name="mergereason", native_enum=False),
            nullable=False,
        ),
        sa.Column("duplicate_title", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_film_merge"),
    )
    op.create_index("ix_film_merge_canonical_id", "film_merge", ["canonical_id"])

    op.create_table(
        "review_item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("film_id", sa.Uuid(), nullable=False),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("candidate_title", sa.String(), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("OPEN", "APPLIED", "DISMISSED", name="reviewstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["film_id"],
            ["film.id"],
            name="fk_review_item_review_item_film_id_film",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_review_item"),
    )
    op.create_index("ix_review_item_film_id", "review_item", ["film_id"])

    op.create_table(
        "source_baseline",
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("window_days", sa.Integer(), nullable=False),
        sa.Column("average", sa.Float(), nullable=False),
        sa.Column("minimum_count_guard", sa.Integer(), nullable=False),
        sa.Column(
            "tier",
            sa.Enum("SCRUTINIZED", "STANDARD", name="sourcetier", native_enum=False),
            nullable=False,
        ),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("source_id", name="pk_source_baseline"),
    )


def downgrade() -> None:
    op.drop_table("source_baseline")
    op.drop_index("ix_review_item_film_id", table_name="review_item")
    op.drop_table("review_item")
    op.drop_index("ix_film_merge_canonical_id", table_name="film_merge")
    op.drop_table("film_merge")
    op.drop_table("season_film")
    op.drop_index("ix_screening_scraped_at", table_name="screening")
    op.drop_index("ix_screening_source_id", table_name="screening")
    op.drop_index("ix_screening_film_id", table_name="screening")
    op.drop_table("screening")
    op.drop_table("film")
