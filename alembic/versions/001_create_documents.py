"""001: create documents table

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # documents.updated_at is maintained by the database, not by the store
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE documents (
            collection      VARCHAR(64)     NOT NULL,
            id              VARCHAR(64)     NOT NULL,
            body            JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT pk_documents PRIMARY KEY (collection, id),
            CONSTRAINT ck_documents_body_object CHECK (jsonb_typeof(body) = 'object')
        );
    """)
    op.execute("CREATE INDEX idx_documents_body ON documents USING GIN (body jsonb_path_ops);")
    op.execute("""
        CREATE TRIGGER trg_documents_updated_at
            BEFORE UPDATE ON documents
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute(
        "COMMENT ON TABLE documents IS "
        "'Schema-less items keyed by (collection, id): price-snapshots, guesses, users';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS documents CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_touch_updated_at();")
