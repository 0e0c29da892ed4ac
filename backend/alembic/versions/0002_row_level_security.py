"""row_level_security

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Postgres (Supabase) only. Mirrors event_platform.services.access_policy at
the database level for clients that reach the tables directly (PostgREST,
dashboards, ad hoc SQL):

- events: creator or org admin/owner may insert/update/delete; public rows readable
- event_templates: owner or org admin/owner for everything; public rows readable
- event_drafts: owner or org admin/owner; never public

Also installs save_event_draft / load_event_draft / create_event_from_template
as SECURITY INVOKER functions so they run under the caller's policies.
Identifiers are text columns, hence the auth.uid()::text casts.
"""
from typing import Sequence, Union
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NO_ORGANIZATION_KEY = "00000000-0000-0000-0000-000000000000"


def _is_org_manager(org_column: str) -> str:
    return f"""EXISTS (
                SELECT 1 FROM org_members m
                WHERE m.org_id = {org_column}
                  AND m.user_id = auth.uid()::text
                  AND m.role IN ('admin', 'owner')
            )"""


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return

    # --- events ---
    op.execute("ALTER TABLE events ENABLE ROW LEVEL SECURITY")
    event_writer = f"""(
            auth.uid()::text = created_by
            OR (owner_context_type = 'organization' AND {_is_org_manager('events.owner_context_id')})
        )"""
    op.execute(f"CREATE POLICY events_insert ON events FOR INSERT WITH CHECK {event_writer}")
    op.execute(f"CREATE POLICY events_update ON events FOR UPDATE USING {event_writer}")
    op.execute(f"CREATE POLICY events_delete ON events FOR DELETE USING {event_writer}")
    op.execute(f"CREATE POLICY events_select ON events FOR SELECT USING (visibility = 'public' OR {event_writer})")

    # --- event_templates ---
    op.execute("ALTER TABLE event_templates ENABLE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY event_templates_manage ON event_templates
            FOR ALL
            USING (
                auth.uid()::text = user_id
                OR (organization_id IS NOT NULL AND {_is_org_manager('event_templates.organization_id')})
            )
    """)
    op.execute("CREATE POLICY event_templates_public_select ON event_templates FOR SELECT USING (is_public = true)")

    # --- event_drafts ---
    op.execute("ALTER TABLE event_drafts ENABLE ROW LEVEL SECURITY")
    op.execute(f"""
        CREATE POLICY event_drafts_manage ON event_drafts
            FOR ALL
            USING (
                auth.uid()::text = user_id
                OR (organization_id IS NOT NULL AND {_is_org_manager('event_drafts.organization_id')})
            )
    """)

    # --- helper functions ---
    op.execute(f"""
        CREATE OR REPLACE FUNCTION public.save_event_draft(p_draft_data JSONB, p_organization_id TEXT DEFAULT NULL)
        RETURNS TEXT
        LANGUAGE plpgsql
        SECURITY INVOKER
        SET search_path = public
        AS $$
        DECLARE
            v_draft_id TEXT;
        BEGIN
            INSERT INTO event_drafts (id, user_id, organization_id, organization_key, draft_data, last_saved, created_at, updated_at)
            VALUES (gen_random_uuid()::text, auth.uid()::text, p_organization_id,
                    COALESCE(p_organization_id, '{NO_ORGANIZATION_KEY}'), p_draft_data::json, NOW(), NOW(), NOW())
            ON CONFLICT (user_id, organization_key)
            DO UPDATE SET draft_data = EXCLUDED.draft_data, last_saved = NOW(), updated_at = NOW()
            RETURNING id INTO v_draft_id;
            RETURN v_draft_id;
        END;
        $$
    """)
    op.execute(f"""
        CREATE OR REPLACE FUNCTION public.load_event_draft(p_organization_id TEXT DEFAULT NULL)
        RETURNS JSONB
        LANGUAGE plpgsql
        SECURITY INVOKER
        SET search_path = public
        AS $$
        DECLARE
            v_draft_data JSONB;
        BEGIN
            SELECT d.draft_data::jsonb INTO v_draft_data
            FROM event_drafts d
            WHERE d.user_id = auth.uid()::text
              AND d.organization_key = COALESCE(p_organization_id, '{NO_ORGANIZATION_KEY}');
            RETURN COALESCE(v_draft_data, '{{}}'::jsonb);
        END;
        $$
    """)
    op.execute(f"""
        CREATE OR REPLACE FUNCTION public.create_event_from_template(p_template_id TEXT)
        RETURNS JSONB
        LANGUAGE plpgsql
        SECURITY INVOKER
        SET search_path = public
        AS $$
        DECLARE
            v_template_data JSONB;
        BEGIN
            SELECT t.template_data::jsonb INTO v_template_data
            FROM event_templates t
            WHERE t.id = p_template_id
              AND (t.user_id = auth.uid()::text OR t.is_public = true
                   OR (t.organization_id IS NOT NULL AND {_is_org_manager('t.organization_id')}));

            IF v_template_data IS NULL THEN
                RAISE EXCEPTION 'Template not found or access denied';
            END IF;

            UPDATE event_templates SET usage_count = usage_count + 1 WHERE id = p_template_id;
            RETURN v_template_data;
        END;
        $$
    """)
    for signature in ("save_event_draft(JSONB, TEXT)", "load_event_draft(TEXT)", "create_event_from_template(TEXT)"):
        op.execute(f"GRANT EXECUTE ON FUNCTION public.{signature} TO authenticated")


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("DROP FUNCTION IF EXISTS public.create_event_from_template(TEXT)")
    op.execute("DROP FUNCTION IF EXISTS public.load_event_draft(TEXT)")
    op.execute("DROP FUNCTION IF EXISTS public.save_event_draft(JSONB, TEXT)")
    op.execute("DROP POLICY IF EXISTS event_drafts_manage ON event_drafts")
    op.execute("ALTER TABLE event_drafts DISABLE ROW LEVEL SECURITY")
    op.execute("DROP POLICY IF EXISTS event_templates_public_select ON event_templates")
    op.execute("DROP POLICY IF EXISTS event_templates_manage ON event_templates")
    op.execute("ALTER TABLE event_templates DISABLE ROW LEVEL SECURITY")
    for action in ("select", "delete", "update", "insert"):
        op.execute(f"DROP POLICY IF EXISTS events_{action} ON events")
    op.execute("ALTER TABLE events DISABLE ROW LEVEL SECURITY")
