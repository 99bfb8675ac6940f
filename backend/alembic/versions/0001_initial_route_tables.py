"""Create trucking_routes, ptyss_routes and agency_routes.

Revision ID: 0001
Revises:
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None


def _shipping_route_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("origin", sa.String(100), nullable=False),
        sa.Column("destination", sa.String(100), nullable=False),
        sa.Column("container_type", sa.String(50), nullable=False),
        sa.Column("route_type", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("client", sa.String(255), nullable=False),
        sa.Column("route_area", sa.String(100), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "trucking_routes",
        *_shipping_route_columns(),
        sa.Column("container_size", sa.String(20), nullable=False, server_default=""),
        sa.UniqueConstraint(
            "name", "origin", "destination", "container_type", "route_type",
            "status", "client", "route_area", "container_size",
            name="uq_trucking_routes_identity",
        ),
    )
    op.create_index("ix_trucking_routes_name", "trucking_routes", ["name"])

    op.create_table(
        "ptyss_routes",
        *_shipping_route_columns(),
        sa.UniqueConstraint(
            "name", "origin", "destination", "container_type", "route_type",
            "status", "client", "route_area",
            name="uq_ptyss_routes_identity",
        ),
    )
    op.create_index("ix_ptyss_routes_name", "ptyss_routes", ["name"])

    op.create_table(
        "agency_routes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("pickup_location", sa.String(255), nullable=False),
        sa.Column("dropoff_location", sa.String(255), nullable=False),
        sa.Column("pickup_site_type", sa.String(255), nullable=True),
        sa.Column("dropoff_site_type", sa.String(255), nullable=True),
        sa.Column("pricing", sa.JSON(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=True),
        sa.Column("waiting_time_rate", sa.Float(), nullable=True),
        sa.Column("extra_passenger_rate", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("distance", sa.Float(), nullable=True),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    for column in (
        "pickup_location", "dropoff_location", "pickup_site_type",
        "dropoff_site_type", "is_active",
    ):
        op.create_index(f"ix_agency_routes_{column}", "agency_routes", [column])


def downgrade() -> None:
    op.drop_table("agency_routes")
    op.drop_index("ix_ptyss_routes_name", table_name="ptyss_routes")
    op.drop_table("ptyss_routes")
    op.drop_index("ix_trucking_routes_name", table_name="trucking_routes")
    op.drop_table("trucking_routes")
