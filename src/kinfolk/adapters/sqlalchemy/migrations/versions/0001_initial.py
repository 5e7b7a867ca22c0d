"""Family, member and relationship tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

MARITAL_STATUSES = ("SINGLE", "MARRIED", "DIVORCED", "WIDOWED", "UNKNOWN")
GENDERS = ("MALE", "FEMALE", "OTHER", "UNKNOWN")
RELATIONSHIP_TYPES = ("PARENT", "CHILD", "SPOUSE")


def upgrade() -> None:
    op.create_table(
        "family",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_family")),
    )
    op.create_table(
        "family_member",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("birth_year", sa.Integer(), nullable=True),
        sa.Column("death_year", sa.Integer(), nullable=True),
        sa.Column("deceased", sa.Boolean(), nullable=False),
        sa.Column("living_place", sa.String(), nullable=False),
        sa.Column(
            "marital_status",
            sa.Enum(*MARITAL_STATUSES, name="maritalstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("occupation", sa.String(), nullable=True),
        sa.Column(
            "gender",
            sa.Enum(*GENDERS, name="gender", native_enum=False),
            nullable=False,
        ),
        sa.Column("is_placeholder", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["family_id"],
            ["family.id"],
            name=op.f("fk_family_member_family_id_family"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_family_member")),
    )
    op.create_index(
        op.f("ix_family_member_family_id"), "family_member", ["family_id"], unique=False
    )
    op.create_index(
        "ix_family_member_natural_key",
        "family_member",
        ["family_id", "full_name", "birth_year", "living_place"],
        unique=False,
    )
    op.create_table(
        "relationship",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("source_id", sa.Uuid(), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(*RELATIONSHIP_TYPES, name="relationshiptype", native_enum=False),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["source_id"],
            ["family_member.id"],
            name=op.f("fk_relationship_source_id_family_member"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_id"],
            ["family_member.id"],
            name=op.f("fk_relationship_target_id_family_member"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_relationship")),
        sa.UniqueConstraint(
            "source_id", "target_id", "type", name=op.f("uq_relationship_source_id")
        ),
    )
    op.create_index(
        op.f("ix_relationship_source_id"), "relationship", ["source_id"], unique=False
    )
    op.create_index(
        op.f("ix_relationship_target_id"), "relationship", ["target_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_relationship_target_id"), table_name="relationship")
    op.drop_index(op.f("ix_relationship_source_id"), table_name="relationship")
    op.drop_table("relationship")
    op.drop_index("ix_family_member_natural_key", table_name="family_member")
    op.drop_index(op.f("ix_family_member_family_id"), table_name="family_member")
    op.drop_table("family_member")
    op.drop_table("family")
