"""Profiles, files and analyses."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Alembic revision identifiers.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(320)),
        sa.Column("full_name", sa.String(256)),
        sa.Column("api_quota_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("api_quota_limit", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "files",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("file_name", sa.String(512), nullable=False),
        sa.Column("file_type", sa.String(128)),
        sa.Column("file_url", sa.Text()),
        sa.Column("file_size", sa.BigInteger()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_files_user_id", "files", ["user_id"])

    op.create_table(
        "analyses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("file_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="completed"),
        sa.Column("confidence_score", sa.Float()),
        sa.Column("is_deepfake", sa.Boolean()),
        sa.Column("detection_method", sa.String(64)),
        sa.Column("raw_result", postgresql.JSONB()),
        sa.Column("processing_time", sa.Integer()),
        sa.Column("request_id", sa.String(64)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )

    op.create_index("idx_analyses_user_id", "analyses", ["user_id"])
    op.create_index("idx_analyses_file_id", "analyses", ["file_id"])
    op.create_index("idx_analyses_status", "analyses", ["status"])


def downgrade():
    op.drop_table("analyses")
    op.drop_index("ix_files_user_id", table_name="files")
    op.drop_table("files")
    op.drop_table("profiles")
