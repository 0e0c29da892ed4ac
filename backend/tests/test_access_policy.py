"""Tests for the row-level authorization predicates.

The pure predicates are exercised with plain namespaces and a stub
``manages`` callback; the database-backed helpers run against SQLite.
"""
from types import SimpleNamespace

import pytest

from event_platform.errors import AccessDenied
from event_platform.models.event import Event, OwnerContextType, Visibility
from event_platform.models.event_draft import EventDraft
from event_platform.models.event_template import EventTemplate
from event_platform.models.organization import Organization, OrgMember, OrgRole, organization_key
from event_platform.models.user import User
from event_platform.services import access_policy
from event_platform.services.access_policy import Operation

USER = "11111111-1111-1111-1111-111111111111"
OTHER = "22222222-2222-2222-2222-222222222222"
ORG = "33333333-3333-3333-3333-333333333333"

WRITE_OPS = [Operation.insert, Operation.update, Operation.delete]


def manages_nothing(org_id):
    return False


def manages_org(org_id):
    return org_id == ORG


def _event(created_by=OTHER, owner_type=OwnerContextType.organization, owner_id=ORG, visibility=Visibility.private):
    return SimpleNamespace(
        created_by=created_by,
        owner_context_type=owner_type,
        owner_context_id=owner_id,
        visibility=visibility,
    )


def _template(user_id=OTHER, organization_id=None, is_public=False):
    return SimpleNamespace(user_id=user_id, organization_id=organization_id, is_public=is_public)


class TestEventPredicate:
    """Creator, or admin/owner of the owning organization."""

    @pytest.mark.parametrize("operation", WRITE_OPS)
    def test_non_manager_rejected_for_org_event(self, operation):
        assert not access_policy.event_allowed(USER, _event(), operation, manages_nothing)

    @pytest.mark.parametrize("operation", WRITE_OPS)
    def test_org_manager_allowed(self, operation):
        assert access_policy.event_allowed(USER, _event(), operation, manages_org)

    def test_creator_allowed_without_membership(self):
        event = _event(created_by=USER)
        assert access_policy.event_allowed(USER, event, Operation.insert, manages_nothing)

    def test_membership_ignored_for_individual_event(self):
        event = _event(owner_type=OwnerContextType.individual, owner_id=ORG)
        assert not access_policy.event_allowed(USER, event, Operation.update, manages_org)

    def test_public_event_readable_by_anyone(self):
        event = _event(visibility=Visibility.public)
        assert access_policy.event_allowed(USER, event, Operation.select, manages_nothing)
        assert not access_policy.event_allowed(USER, event, Operation.update, manages_nothing)

    def test_private_event_hidden_from_strangers(self):
        assert not access_policy.event_allowed(USER, _event(), Operation.select, manages_nothing)

    def test_anonymous_actor_never_writes(self):
        event = _event(created_by=None)
        assert not access_policy.event_allowed(None, event, Operation.insert, manages_org)

    def test_membership_not_consulted_for_creator(self):
        calls = []

        def manages(org_id):
            calls.append(org_id)
            return False

        access_policy.event_allowed(USER, _event(created_by=USER), Operation.update, manages)
        assert calls == []


class TestTemplateAndDraftPredicates:
    """Owner, org admin/owner, plus public reads for templates only."""

    def test_owner_allowed(self):
        template = _template(user_id=USER)
        for operation in Operation:
            assert access_policy.template_allowed(USER, template, operation, manages_nothing)

    def test_public_template_read_only(self):
        template = _template(is_public=True)
        assert access_policy.template_allowed(USER, template, Operation.select, manages_nothing)
        assert not access_policy.template_allowed(USER, template, Operation.update, manages_nothing)
        assert not access_policy.template_allowed(USER, template, Operation.delete, manages_nothing)

    def test_org_manager_manages_org_template(self):
        template = _template(organization_id=ORG)
        assert access_policy.template_allowed(USER, template, Operation.delete, manages_org)

    def test_private_template_of_other_user_denied(self):
        assert not access_policy.template_allowed(USER, _template(), Operation.select, manages_org)

    def test_draft_has_no_public_read(self):
        draft = SimpleNamespace(user_id=OTHER, organization_id=None, is_public=True)
        assert not access_policy.draft_allowed(USER, draft, Operation.select, manages_org)

    def test_org_manager_reaches_org_draft(self):
        draft = SimpleNamespace(user_id=OTHER, organization_id=ORG)
        assert access_policy.draft_allowed(USER, draft, Operation.select, manages_org)


class TestOrganizationKey:
    def test_none_maps_to_sentinel(self):
        assert organization_key(None) == "00000000-0000-0000-0000-000000000000"
        assert organization_key("") == organization_key(None)

    def test_org_maps_to_itself(self):
        assert organization_key(ORG) == ORG


@pytest.fixture
def seeded(db):
    """USER is admin of ORG, OTHER is a plain member."""
    db.add_all([User(user_id=USER, display_name="user"), User(user_id=OTHER, display_name="other")])
    db.add(Organization(id=ORG, name="Org", slug="org"))
    db.flush()
    db.add_all([
        OrgMember(org_id=ORG, user_id=USER, role=OrgRole.admin),
        OrgMember(org_id=ORG, user_id=OTHER, role=OrgRole.member),
    ])
    db.commit()
    return db


class TestDatabaseBackedAuthorization:
    def test_manages_organization(self, seeded):
        assert access_policy.manages_organization(seeded, USER, ORG)
        assert not access_policy.manages_organization(seeded, OTHER, ORG)

    def test_authorize_dispatches_by_model(self, seeded):
        event = Event(
            created_by=OTHER,
            owner_context_type=OwnerContextType.organization,
            owner_context_id=ORG,
            visibility=Visibility.private,
        )
        assert access_policy.authorize(seeded, USER, event, Operation.insert)
        assert not access_policy.authorize(seeded, "44444444-4444-4444-4444-444444444444", event, Operation.insert)

        draft = EventDraft(user_id=OTHER, organization_id=None, organization_key=organization_key(None))
        assert not access_policy.authorize(seeded, USER, draft, Operation.select)

    def test_require_raises(self, seeded):
        template = EventTemplate(user_id=USER, organization_id=None, is_public=False)
        access_policy.require(seeded, USER, template, Operation.update)
        with pytest.raises(AccessDenied):
            access_policy.require(seeded, OTHER, template, Operation.update)

    def test_unknown_row_type(self, seeded):
        with pytest.raises(TypeError):
            access_policy.authorize(seeded, USER, object(), Operation.select)

    def test_visible_templates_clause(self, seeded):
        seeded.add_all([
            EventTemplate(user_id=OTHER, organization_key=organization_key(None), name="mine-not",
                          template_data={}, is_public=False),
            EventTemplate(user_id=OTHER, organization_key=organization_key(None), name="public",
                          template_data={}, is_public=True),
            EventTemplate(user_id=OTHER, organization_id=ORG, organization_key=ORG, name="org",
                          template_data={}, is_public=False),
        ])
        seeded.commit()

        visible = seeded.query(EventTemplate).filter(access_policy.visible_templates_clause(USER)).all()
        assert {t.name for t in visible} == {"public", "org"}

        no_public = seeded.query(EventTemplate).filter(
            access_policy.visible_templates_clause(USER, include_public=False)
        ).all()
        assert {t.name for t in no_public} == {"org"}
