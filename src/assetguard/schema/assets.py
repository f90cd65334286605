"""The IT asset database as exposed to natural-language querying."""

from __future__ import annotations

from assetguard.schema._types import ColumnSpec, Relationship, SchemaDescriptor, TableSpec


def _timestamps() -> tuple[ColumnSpec, ...]:
    return (
        ColumnSpec("createdAt", "DATETIME", "When the record was created"),
        ColumnSpec("updatedAt", "DATETIME", "When the record was last updated"),
    )


ASSETS = TableSpec(
    name="assets",
    description="Main table holding IT assets and inventory",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique asset UUID"),
        ColumnSpec("asset_code", "VARCHAR(20)", "Unique asset code (format: AST-XXXXXX)"),
        ColumnSpec("name", "VARCHAR(255)", "Asset name"),
        ColumnSpec("description", "TEXT", "Detailed asset description"),
        ColumnSpec("category_id", "INT", "Foreign key to categories"),
        ColumnSpec("location_id", "INT", "Foreign key to locations"),
        ColumnSpec("vendor_id", "INT", "Foreign key to vendors (nullable)"),
        ColumnSpec("brand", "VARCHAR(100)", "Asset brand"),
        ColumnSpec("model", "VARCHAR(100)", "Asset model"),
        ColumnSpec("serial_number", "VARCHAR(100)", "Asset serial number"),
        ColumnSpec("purchase_date", "DATE", "Purchase date"),
        ColumnSpec("purchase_price", "DECIMAL(15,2)", "Purchase price in Rupiah"),
        ColumnSpec("warranty_expired", "DATE", "Date the warranty ends"),
        ColumnSpec(
            "status",
            "ENUM",
            "Asset status: available=free to assign, in_use=assigned to someone, "
            "maintenance=under repair, disposed=written off",
            values=("available", "in_use", "maintenance", "disposed"),
        ),
        ColumnSpec(
            "condition",
            "ENUM",
            "Physical condition of the asset",
            values=("new", "good", "fair", "poor"),
        ),
        ColumnSpec("assigned_to", "INT", "Foreign key to users (nullable): who holds the asset"),
        ColumnSpec("notes", "TEXT", "Additional notes"),
        ColumnSpec("image", "VARCHAR(255)", "Path to the asset image"),
        *_timestamps(),
    ),
)

CATEGORIES = TableSpec(
    name="categories",
    description="Asset categories",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique category UUID"),
        ColumnSpec("name", "VARCHAR(100)", "Category name (e.g. Laptop, Monitor, Printer)"),
        ColumnSpec("description", "TEXT", "Category description"),
        *_timestamps(),
    ),
)

LOCATIONS = TableSpec(
    name="locations",
    description="Places where assets are stored",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique location UUID"),
        ColumnSpec("name", "VARCHAR(100)", "Location name (e.g. Building A, Floor 2, IT Room)"),
        ColumnSpec("building", "VARCHAR(100)", "Building name"),
        ColumnSpec("floor", "VARCHAR(20)", "Floor"),
        ColumnSpec("room", "VARCHAR(100)", "Room name"),
        ColumnSpec("description", "TEXT", "Location description"),
        *_timestamps(),
    ),
)

VENDORS = TableSpec(
    name="vendors",
    description="Asset vendors and suppliers",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique vendor UUID"),
        ColumnSpec("name", "VARCHAR(100)", "Vendor or company name"),
        ColumnSpec("contact_person", "VARCHAR(100)", "Contact person"),
        ColumnSpec("email", "VARCHAR(100)", "Vendor email"),
        ColumnSpec("phone", "VARCHAR(20)", "Phone number"),
        ColumnSpec("address", "TEXT", "Vendor address"),
        ColumnSpec("description", "TEXT", "Vendor description"),
        *_timestamps(),
    ),
)

USERS = TableSpec(
    name="users",
    description="System users",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique user UUID"),
        ColumnSpec("name", "VARCHAR(100)", "Full name"),
        ColumnSpec("email", "VARCHAR(100)", "User email"),
        ColumnSpec("password", "VARCHAR(255)", "Hashed login secret"),
        ColumnSpec(
            "role",
            "ENUM",
            "User role: admin=administrator, staff=regular staff",
            values=("admin", "staff"),
        ),
        ColumnSpec("department", "VARCHAR(100)", "Department"),
        ColumnSpec("phone", "VARCHAR(20)", "Phone number"),
        ColumnSpec("is_active", "BOOLEAN", "Whether the user is active"),
        ColumnSpec("refresh_token", "TEXT", "Session renewal token"),
        *_timestamps(),
    ),
    restricted_columns=frozenset({"password", "refresh_token"}),
)

TRANSACTIONS = TableSpec(
    name="transactions",
    description="Asset transactions and usage history",
    columns=(
        ColumnSpec("id", "INT", "Primary key"),
        ColumnSpec("uuid", "VARCHAR(36)", "Unique transaction UUID"),
        ColumnSpec("asset_id", "INT", "Foreign key to assets"),
        ColumnSpec("user_id", "INT", "Foreign key to users: who performed the transaction"),
        ColumnSpec(
            "type",
            "ENUM",
            "Transaction type: assignment=handed out, return=given back, "
            "maintenance=sent for repair, disposal=written off",
            values=("assignment", "return", "maintenance", "disposal"),
        ),
        ColumnSpec(
            "assigned_to", "INT", "Foreign key to users: who received the asset (assignments)"
        ),
        ColumnSpec("transaction_date", "DATE", "Transaction date"),
        ColumnSpec("return_date", "DATE", "Return date (nullable)"),
        ColumnSpec("notes", "TEXT", "Transaction notes"),
        *_timestamps(),
    ),
)

ASSET_SCHEMA = SchemaDescriptor(
    tables=(ASSETS, CATEGORIES, LOCATIONS, VENDORS, USERS, TRANSACTIONS),
    relationships=(
        Relationship("assets.category_id", "categories.id"),
        Relationship("assets.location_id", "locations.id"),
        Relationship("assets.vendor_id", "vendors.id"),
        Relationship("assets.assigned_to", "users.id"),
        Relationship("transactions.asset_id", "assets.id"),
        Relationship("transactions.user_id", "users.id"),
        Relationship("transactions.assigned_to", "users.id"),
    ),
    allowed_tables=frozenset(
        {"assets", "categories", "locations", "vendors", "users", "transactions"}
    ),
    restricted_columns=frozenset({"password", "refresh_token"}),
    allowed_operations=frozenset({"SELECT"}),
)
