"""create reading platform tables

Revision ID: 5c0e1a7d9b21
Revises:
Create Date: 2026-10-18 10:12:04.318220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c0e1a7d9b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="reader"),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("security_question", sa.String(), nullable=True),
        sa.Column("security_answer_hash", sa.String(), nullable=True),
        sa.Column("email_notifications_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_role", "profiles", ["role"])

    op.create_table(
        "author_profile",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("bio", sa.String(), nullable=False, server_default=""),
        sa.Column("profile_picture_url", sa.String(), nullable=True),
        sa.Column("custom_links", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("author_note", sa.String(), nullable=True),
        sa.Column("cover_image_url", sa.String(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_books_is_published", "books", ["is_published"])

    op.create_table(
        "chapters",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("book_id", sa.Uuid(), sa.ForeignKey("books.id", ondelete="CASCADE"), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("chapter_number", sa.Integer(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("chapter_number > 0", name="chapter_number_positive"),
        sa.CheckConstraint("price >= 0", name="chapter_price_non_negative"),
        sa.UniqueConstraint("book_id", "chapter_number", name="unique_chapter_number_per_book"),
    )
    op.create_index("ix_chapters_book_id", "chapters", ["book_id"])
    op.create_index("ix_chapters_is_published", "chapters", ["is_published"])

    op.create_table(
        "purchases",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("chapter_id", sa.Uuid(), sa.ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount_paid", sa.Float(), nullable=False),
        sa.Column("gateway_order_id", sa.String(), nullable=False),
        sa.Column("gateway_payment_id", sa.String(), nullable=True),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("purchased_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount_paid >= 0", name="purchase_amount_non_negative"),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed')",
            name="purchase_status_valid",
        ),
    )
    op.create_index("ix_purchases_user_id", "purchases", ["user_id"])
    op.create_index("ix_purchases_chapter_id", "purchases", ["chapter_id"])
    op.create_index("ix_purchases_payment_status", "purchases", ["payment_status"])
    op.create_index("ix_purchases_gateway_order_id", "purchases", ["gateway_order_id"])
    op.create_index(
        "uq_purchases_user_chapter_completed",
        "purchases",
        ["user_id", "chapter_id"],
        unique=True,
        postgresql_where=sa.text("payment_status = 'completed'"),
    )

    op.create_table(
        "email_notifications_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("chapter_id", sa.Uuid(), sa.ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("notification_type", sa.String(), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_email_notifications_log_chapter_id", "email_notifications_log", ["chapter_id"])


def downgrade():
    op.drop_table("email_notifications_log")
    op.drop_index("uq_purchases_user_chapter_completed", table_name="purchases")
    op.drop_table("purchases")
    op.drop_table("chapters")
    op.drop_table("books")
    op.drop_table("author_profile")
    op.drop_index("ix_profiles_role", table_name="profiles")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
