"""Initial schema: users, vehicles, trips, VIP trips, cancelations, offers, wallet ledgers"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _money(name: str, nullable: bool = False, default: str | None = "0") -> sa.Column:
    return sa.Column(name, sa.Numeric(10, 2), nullable=nullable, server_default=default)


def _lookup_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("ar_name", sa.String(100), nullable=False),
        sa.Column("en_name", sa.String(100), nullable=False),
    )


def _wallet_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="SET NULL"), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("transaction_type", sa.String(30), nullable=False),
        sa.Column("previous_balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("current_balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(f"idx_{name}_user", name, ["user_id"])
    op.create_index(f"idx_{name}_trip", name, ["trip_id"])


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(36), unique=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("national_id", sa.String(20), nullable=True),
        sa.Column("preferred_language", sa.String(5), nullable=False, server_default="ar"),
        _money("user_wallet_balance"),
        _money("driver_wallet_balance"),
        sa.Column("passenger_cancel_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("driver_cancel_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("discount_app_share_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("passenger_rate", sa.Float, nullable=False, server_default="5"),
        sa.Column("driver_rate", sa.Float, nullable=False, server_default="5"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "user_fcm_tokens",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(500), nullable=False),
    )
    op.create_index("idx_fcm_tokens_user", "user_fcm_tokens", ["user_id"])

    for name in ("vehicle_colors", "vehicle_classes", "vehicle_types", "vehicle_names"):
        _lookup_table(name)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("serial_no", sa.String(50), nullable=False),
        sa.Column("plate_alphabet", sa.String(10), nullable=True),
        sa.Column("plate_alphabet_ar", sa.String(10), nullable=True),
        sa.Column("plate_number", sa.String(10), nullable=True),
        sa.Column("seats_no", sa.Integer, nullable=False, server_default="4"),
        sa.Column("production_year", sa.Integer, nullable=True),
        sa.Column("color_id", sa.Integer, sa.ForeignKey("vehicle_colors.id"), nullable=True),
        sa.Column("class_id", sa.Integer, sa.ForeignKey("vehicle_classes.id"), nullable=True),
        sa.Column("type_id", sa.Integer, sa.ForeignKey("vehicle_types.id"), nullable=True),
        sa.Column("name_id", sa.Integer, sa.ForeignKey("vehicle_names.id"), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_vehicles_driver", "vehicles", ["driver_id"])

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False, server_default="ANY"),
        sa.Column("features", sa.JSON, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("pickup_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("distance", sa.Float, nullable=True),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=True),
        _money("driver_app_share", nullable=True, default=None),
        _money("user_app_share", nullable=True, default=None),
        _money("user_debt", nullable=True, default=None),
        _money("driver_tax", nullable=True, default=None),
        _money("user_tax", nullable=True, default=None),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_trips_status", "trips", ["status"])
    op.create_index("idx_trips_driver", "trips", ["driver_id"])

    op.create_table(
        "vip_trips",
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("passenger_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("pickup_location_lat", sa.Float, nullable=False),
        sa.Column("pickup_location_lng", sa.Float, nullable=False),
        sa.Column("pickup_description", sa.String(500), nullable=False),
        sa.Column("destination_location_lat", sa.Float, nullable=False),
        sa.Column("destination_location_lng", sa.Float, nullable=False),
        sa.Column("destination_description", sa.String(500), nullable=False),
        sa.Column("payment_method", sa.String(10), nullable=False, server_default="CASH"),
        _money("user_debt"),
        _money("user_app_share"),
        _money("app_share_discount"),
        _money("discount"),
    )
    op.create_index("idx_vip_trips_passenger", "vip_trips", ["passenger_id"])

    op.create_table(
        "basic_trips",
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("seats", sa.Integer, nullable=False, server_default="4"),
    )
    op.create_table(
        "basic_trip_passengers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "basic_trip_id", sa.Integer, sa.ForeignKey("basic_trips.trip_id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("passenger_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
    )
    op.create_index("idx_basic_trip_passengers_trip", "basic_trip_passengers", ["basic_trip_id"])
    op.create_index("idx_basic_trip_passengers_passenger", "basic_trip_passengers", ["passenger_id"])

    op.create_table(
        "cancelations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "trip_id", sa.Integer, sa.ForeignKey("vip_trips.trip_id", ondelete="CASCADE"), unique=True, nullable=False
        ),
        sa.Column("canceled_by", sa.String(10), nullable=False),
        sa.Column("reason", sa.String(30), nullable=False),
        sa.Column("note", sa.String(1000), nullable=True),
        sa.Column("passenger_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "offers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Integer, sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("driver_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_offers_trip", "offers", ["trip_id"])
    op.create_index("idx_offers_driver", "offers", ["driver_id"])

    _wallet_table("passenger_wallet_transactions")
    _wallet_table("driver_wallet_transactions")

    op.create_table(
        "recent_addresses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("alias", sa.String(255), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("lng", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_recent_addresses_user", "recent_addresses", ["user_id"])


def downgrade() -> None:
    op.drop_table("recent_addresses")
    op.drop_table("driver_wallet_transactions")
    op.drop_table("passenger_wallet_transactions")
    op.drop_table("offers")
    op.drop_table("cancelations")
    op.drop_table("basic_trip_passengers")
    op.drop_table("basic_trips")
    op.drop_table("vip_trips")
    op.drop_table("trips")
    op.drop_table("vehicles")
    for name in ("vehicle_names", "vehicle_types", "vehicle_classes", "vehicle_colors"):
        op.drop_table(name)
    op.drop_table("user_fcm_tokens")
    op.drop_table("users")
