"""Create loads and standalone receipts.

- loads: freight load records with an optional canonical receipt reference
- receipts: standalone receipt ledger for uploads made before a load exists
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "c4d1e8a2f6b9"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "loads",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("current_location", sa.Text(), nullable=False),
        sa.Column("destination_location", sa.Text(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("weight_unit", sa.Text(), nullable=False),
        sa.Column("truck_length", sa.Float(), nullable=False),
        sa.Column("length_unit", sa.Text(), nullable=False),
        sa.Column("contact_number", sa.Text(), nullable=False),
        sa.Column("staff_contact_number", sa.Text(), nullable=False),
        sa.Column("receipt_storage_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("weight_unit IN ('kg', 'ton')", name=op.f("ck_loads_weight_unit")),
        sa.CheckConstraint("length_unit IN ('m', 'ft')", name=op.f("ck_loads_length_unit")),
    )
    op.create_index("ix_loads_receipt_storage_id", "loads", ["receipt_storage_id"])
    op.create_index("ix_loads_created_at", "loads", ["created_at"])

    op.create_table(
        "receipts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("storage_reference", sa.Text(), nullable=False),
        sa.Column("kind", sa.Text(), server_default=sa.text("'standalone'"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_receipts_storage_reference", "receipts", ["storage_reference"])


def downgrade() -> None:
    op.drop_index("ix_receipts_storage_reference", table_name="receipts")
    op.drop_table("receipts")
    op.drop_index("ix_loads_created_at", table_name="loads")
    op.drop_index("ix_loads_receipt_storage_id", table_name="loads")
    op.drop_table("loads")
