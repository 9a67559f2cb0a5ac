"""Initial schema: organisations, teams, rights profiles, members and audit entries.

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-03-02 00:00:00.000000

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "1a2b3c4d5e6f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("organisations"):
        op.create_table(
            "organisations",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("member_label", sa.String(), nullable=False, server_default="member"),
            sa.Column("require_mfa", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("max_employees", sa.Integer(), nullable=False, server_default="5"),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    if not inspector.has_table("teams"):
        op.create_table(
            "teams",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("organisation_id", sa.Uuid(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["organisation_id"], ["organisations.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("organisation_id", "name", name="uq_teams_org_name"),
        )
        op.create_index(op.f("ix_teams_organisation_id"), "teams", ["organisation_id"])

    if not inspector.has_table("rights_profiles"):
        op.create_table(
            "rights_profiles",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("organisation_id", sa.Uuid(), nullable=False),
            sa.Column("profile_type", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("rights", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["organisation_id"], ["organisations.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint(
                "organisation_id",
                "profile_type",
                "name",
                name="uq_rights_profiles_org_type_name",
            ),
        )
        op.create_index(
            op.f("ix_rights_profiles_organisation_id"),
            "rights_profiles",
            ["organisation_id"],
        )
        op.create_index(
            op.f("ix_rights_profiles_profile_type"),
            "rights_profiles",
            ["profile_type"],
        )

    if not inspector.has_table("members"):
        op.create_table(
            "members",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("organisation_id", sa.Uuid(), nullable=False),
            sa.Column("first_name", sa.String(), nullable=False),
            sa.Column("last_name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
            sa.Column("role", sa.String(), nullable=False, server_default="employee"),
            sa.Column("team_id", sa.Uuid(), nullable=True),
            sa.Column("payroll_number", sa.String(), nullable=True),
            sa.Column("invited_at", sa.DateTime(), nullable=True),
            sa.Column("admin_profile_id", sa.Uuid(), nullable=True),
            sa.Column("employee_profile_id", sa.Uuid(), nullable=True),
            sa.Column("permissions", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["organisation_id"], ["organisations.id"]),
            sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
            sa.ForeignKeyConstraint(["admin_profile_id"], ["rights_profiles.id"]),
            sa.ForeignKeyConstraint(["employee_profile_id"], ["rights_profiles.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("organisation_id", "email", name="uq_members_org_email"),
        )
        op.create_index(op.f("ix_members_organisation_id"), "members", ["organisation_id"])
        op.create_index(op.f("ix_members_role"), "members", ["role"])
        op.create_index(op.f("ix_members_team_id"), "members", ["team_id"])

    if not inspector.has_table("audit_entries"):
        op.create_table(
            "audit_entries",
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("organisation_id", sa.Uuid(), nullable=False),
            sa.Column("actor_id", sa.Uuid(), nullable=False),
            sa.Column("actor_name", sa.String(), nullable=False),
            sa.Column("action", sa.String(), nullable=False),
            sa.Column("target_type", sa.String(), nullable=False),
            sa.Column("target_id", sa.Uuid(), nullable=True),
            sa.Column("target_label", sa.String(), nullable=True),
            sa.Column("changes", sa.JSON(), nullable=True),
            sa.Column("metadata", sa.JSON(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["organisation_id"], ["organisations.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            op.f("ix_audit_entries_organisation_id"),
            "audit_entries",
            ["organisation_id"],
        )
        op.create_index(op.f("ix_audit_entries_actor_id"), "audit_entries", ["actor_id"])
        op.create_index(op.f("ix_audit_entries_action"), "audit_entries", ["action"])
        op.create_index(op.f("ix_audit_entries_created_at"), "audit_entries", ["created_at"])


def downgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table("audit_entries"):
        op.drop_index(op.f("ix_audit_entries_created_at"), table_name="audit_entries")
        op.drop_index(op.f("ix_audit_entries_action"), table_name="audit_entries")
        op.drop_index(op.f("ix_audit_entries_actor_id"), table_name="audit_entries")
        op.drop_index(op.f("ix_audit_entries_organisation_id"), table_name="audit_entries")
        op.drop_table("audit_entries")

    if inspector.has_table("members"):
        op.drop_index(op.f("ix_members_team_id"), table_name="members")
        op.drop_index(op.f("ix_members_role"), table_name="members")
        op.drop_index(op.f("ix_members_organisation_id"), table_name="members")
        op.drop_table("members")

    if inspector.has_table("rights_profiles"):
        op.drop_index(op.f("ix_rights_profiles_profile_type"), table_name="rights_profiles")
        op.drop_index(op.f("ix_rights_profiles_organisation_id"), table_name="rights_profiles")
        op.drop_table("rights_profiles")

    if inspector.has_table("teams"):
        op.drop_index(op.f("ix_teams_organisation_id"), table_name="teams")
        op.drop_table("teams")

    if inspector.has_table("organisations"):
        op.drop_table("organisations")
