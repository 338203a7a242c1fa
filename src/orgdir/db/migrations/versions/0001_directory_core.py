"""create directory core tables

Revision ID: 0001_directory_core
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_directory_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(64)

CONTACT_KIND = sa.Enum("EMAIL", "PHONE", "ADDRESS", name="contact_kind")
PRINCIPAL_KIND = sa.Enum("ADMIN", "TEACHER", "STUDENT", "STAKEHOLDER", name="principal_kind")


def _ts_cols():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("id_number", sa.String(64), nullable=False),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
        sa.UniqueConstraint("id_number", name="uq_organizations_id_number"),
    )

    op.create_table(
        "facilities",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("id_number", sa.String(64), nullable=False),
        sa.Column("organization_id", ID, nullable=True),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_facilities"),
        sa.UniqueConstraint("id_number", name="uq_facilities_id_number"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_facilities_organization_id_organizations", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_facilities_organization_id", "facilities", ["organization_id"])

    op.create_table(
        "persons",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("organization_id", ID, nullable=True),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_persons"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_persons_organization_id_organizations", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_persons_organization_id", "persons", ["organization_id"])

    op.create_table(
        "person_facilities",
        sa.Column("person_id", ID, nullable=False),
        sa.Column("facility_id", ID, nullable=False),
        sa.PrimaryKeyConstraint("person_id", "facility_id", name="pk_person_facilities"),
        sa.ForeignKeyConstraint(
            ["person_id"], ["persons.id"],
            name="fk_person_facilities_person_id_persons", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["facility_id"], ["facilities.id"],
            name="fk_person_facilities_facility_id_facilities", ondelete="CASCADE",
        ),
    )

    op.create_table(
        "contact_addresses",
        sa.Column("id", ID, nullable=False),
        sa.Column("kind", CONTACT_KIND, nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("person_id", ID, nullable=True),
        sa.Column("facility_id", ID, nullable=True),
        sa.Column("organization_id", ID, nullable=True),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_contact_addresses"),
        sa.ForeignKeyConstraint(
            ["person_id"], ["persons.id"], name="fk_contact_addresses_person_id_persons"
        ),
        sa.ForeignKeyConstraint(
            ["facility_id"], ["facilities.id"],
            name="fk_contact_addresses_facility_id_facilities",
        ),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_contact_addresses_organization_id_organizations",
        ),
        sa.CheckConstraint(
            "(CASE WHEN person_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN facility_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN organization_id IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="ck_contact_addresses_single_owner",
        ),
    )
    op.create_index("ix_contact_addresses_person_id", "contact_addresses", ["person_id"])
    op.create_index("ix_contact_addresses_facility_id", "contact_addresses", ["facility_id"])
    op.create_index(
        "ix_contact_addresses_organization_id", "contact_addresses", ["organization_id"]
    )

    op.create_table(
        "principals",
        sa.Column("id", ID, nullable=False),
        sa.Column("person_id", ID, nullable=False),
        sa.Column("kind", PRINCIPAL_KIND, nullable=False),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_principals"),
        sa.UniqueConstraint("person_id", name="uq_principals_person_id"),
        sa.ForeignKeyConstraint(
            ["person_id"], ["persons.id"], name="fk_principals_person_id_persons"
        ),
    )

    op.create_table(
        "accounts",
        sa.Column("id", ID, nullable=False),
        sa.Column("principal_id", ID, nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("provider", sa.String(64), server_default="auth0", nullable=False),
        sa.Column("provider_sub", sa.Text(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_ts_cols(),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
        sa.UniqueConstraint("principal_id", name="uq_accounts_principal_id"),
        sa.UniqueConstraint("username", name="uq_accounts_username"),
        sa.ForeignKeyConstraint(
            ["principal_id"], ["principals.id"], name="fk_accounts_principal_id_principals"
        ),
    )


def downgrade() -> None:
    op.drop_table("accounts")
    op.drop_table("principals")
    op.drop_index("ix_contact_addresses_organization_id", table_name="contact_addresses")
    op.drop_index("ix_contact_addresses_facility_id", table_name="contact_addresses")
    op.drop_index("ix_contact_addresses_person_id", table_name="contact_addresses")
    op.drop_table("contact_addresses")
    op.drop_table("person_facilities")
    op.drop_index("ix_persons_organization_id", table_name="persons")
    op.drop_table("persons")
    op.drop_index("ix_facilities_organization_id", table_name="facilities")
    op.drop_table("facilities")
    op.drop_table("organizations")
    PRINCIPAL_KIND.drop(op.get_bind(), checkfirst=True)
    CONTACT_KIND.drop(op.get_bind(), checkfirst=True)
