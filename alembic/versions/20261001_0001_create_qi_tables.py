"""create roster, discharge, ranking, delay survey and peer survey tables

Revision ID: 20261001_0001
Revises:
Create Date: 2026-10-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261001_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # ---------------------------------------------------------------------------
    # roster
    # ---------------------------------------------------------------------------
    op.create_table(
        "roster",
        sa.Column("initials", sa.String(length=16), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("initials", name="pk_roster"),
    )
    op.create_index("ix_roster_active", "roster", ["active"])

    # ---------------------------------------------------------------------------
    # discharge_delays
    # Legacy rows only carry `reason`; newer rows carry cause/subcause.
    # ---------------------------------------------------------------------------
    op.create_table(
        "discharge_delays",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("provider_initials", sa.String(length=16), nullable=False),
        sa.Column("cause", sa.String(length=255), nullable=True),
        sa.Column("subcause", sa.String(length=255), nullable=True),
        sa.Column(
            "reason",
            sa.Text(),
            nullable=True,
            comment="Legacy single-field reason",
        ),
        sa.Column("patients_delayed", sa.Integer(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_discharge_delays"),
    )
    op.create_index("ix_discharge_delays_event_date", "discharge_delays", ["event_date"])
    op.create_index(
        "ix_discharge_delays_provider_date",
        "discharge_delays",
        ["provider_initials", "event_date"],
    )

    # ---------------------------------------------------------------------------
    # rank_reviews
    # ---------------------------------------------------------------------------
    op.create_table(
        "rank_reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("anonymized_reviewer_id", sa.String(length=64), nullable=False),
        sa.Column("reviewee_initials", sa.String(length=16), nullable=False),
        sa.Column("review_date", sa.Date(), nullable=False),
        sa.Column("note_tier", sa.String(length=4), nullable=True),
        sa.Column("work_tier", sa.String(length=4), nullable=True),
        sa.Column("social_tier", sa.String(length=4), nullable=True),
        sa.Column("note_feedback", sa.Text(), nullable=True),
        sa.Column("work_feedback", sa.Text(), nullable=True),
        sa.Column("social_feedback", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_rank_reviews"),
        sa.UniqueConstraint(
            "anonymized_reviewer_id",
            "reviewee_initials",
            "review_date",
            name="uq_rank_reviews_reviewer_reviewee_date",
        ),
    )
    op.create_index("ix_rank_reviews_review_date", "rank_reviews", ["review_date"])
    op.create_index(
        "ix_rank_reviews_reviewee_date",
        "rank_reviews",
        ["reviewee_initials", "review_date"],
    )

    # ---------------------------------------------------------------------------
    # delay_survey_responses / survey_assignments
    # ---------------------------------------------------------------------------
    op.create_table(
        "delay_survey_responses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("respondent_initials", sa.String(length=16), nullable=False),
        sa.Column("survey_date", sa.Date(), nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("answers", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_delay_survey_responses"),
        sa.UniqueConstraint(
            "respondent_initials",
            "survey_date",
            name="uq_delay_survey_responses_respondent_date",
        ),
    )
    op.create_index(
        "ix_delay_survey_responses_survey_date",
        "delay_survey_responses",
        ["survey_date"],
    )

    op.create_table(
        "survey_assignments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("initials", sa.String(length=16), nullable=False),
        sa.Column("survey_date", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_survey_assignments"),
        sa.UniqueConstraint("initials", "survey_date", name="uq_survey_assignments_initials_date"),
    )

    # ---------------------------------------------------------------------------
    # survey_versions → survey_questions → survey_responses
    # FKs ON DELETE CASCADE; at most one live version.
    # ---------------------------------------------------------------------------
    op.create_table(
        "survey_versions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_survey_versions"),
    )
    op.create_index(
        "ux_survey_versions_live",
        "survey_versions",
        ["is_live"],
        unique=True,
        postgresql_where=sa.text("is_live"),
    )

    op.create_table(
        "survey_questions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("version_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(
            ["version_id"],
            ["survey_versions.id"],
            name="fk_survey_questions_version_id_survey_versions",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_survey_questions"),
    )
    op.create_index(
        "ix_survey_questions_version_sort",
        "survey_questions",
        ["version_id", "sort_order"],
    )

    op.create_table(
        "survey_responses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("version_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("respondent_initials", sa.String(length=16), nullable=False),
        sa.Column("response_date", sa.Date(), nullable=False),
        sa.Column(
            "selected_initials",
            postgresql.ARRAY(sa.String(length=16)),
            nullable=False,
            server_default=sa.text("'{}'::varchar[]"),
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["version_id"],
            ["survey_versions.id"],
            name="fk_survey_responses_version_id_survey_versions",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["survey_questions.id"],
            name="fk_survey_responses_question_id_survey_questions",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_survey_responses"),
        sa.UniqueConstraint(
            "version_id",
            "question_id",
            "respondent_initials",
            "response_date",
            name="uq_survey_responses_version_question_respondent_date",
        ),
    )
    op.create_index(
        "ix_survey_responses_lookup",
        "survey_responses",
        ["version_id", "question_id", "response_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_survey_responses_lookup", table_name="survey_responses")
    op.drop_table("survey_responses")

    op.drop_index("ix_survey_questions_version_sort", table_name="survey_questions")
    op.drop_table("survey_questions")

    op.drop_index("ux_survey_versions_live", table_name="survey_versions")
    op.drop_table("survey_versions")

    op.drop_table("survey_assignments")

    op.drop_index("ix_delay_survey_responses_survey_date", table_name="delay_survey_responses")
    op.drop_table("delay_survey_responses")

    op.drop_index("ix_rank_reviews_reviewee_date", table_name="rank_reviews")
    op.drop_index("ix_rank_reviews_review_date", table_name="rank_reviews")
    op.drop_table("rank_reviews")

    op.drop_index("ix_discharge_delays_provider_date", table_name="discharge_delays")
    op.drop_index("ix_discharge_delays_event_date", table_name="discharge_delays")
    op.drop_table("discharge_delays")

    op.drop_index("ix_roster_active", table_name="roster")
    op.drop_table("roster")
