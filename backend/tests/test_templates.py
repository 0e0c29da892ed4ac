"""Tests for event templates: visibility, instantiation and usage counting."""
import logging
import uuid

from sqlalchemy.exc import OperationalError
from tests.conftest import auth_headers, create_test_user, create_test_org, add_org_member

from event_platform.services import template_service


def _create_template(client, user_id, name="Meetup", **extra):
    body = {"name": name, "template_data": {"title": name, "venue": "Main Hall"}}
    body.update(extra)
    resp = client.post("/api/templates/", json=body, headers=auth_headers(user_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def _instantiate(client, user_id, template_id):
    return client.post(f"/api/templates/{template_id}/instantiate", headers=auth_headers(user_id))


def _usage(client, user_id, template_id):
    listed = client.get("/api/templates/", headers=auth_headers(user_id)).json()
    return next(t["usage_count"] for t in listed if t["id"] == template_id)


class TestCreateTemplate:
    def test_create(self, client):
        user = create_test_user(client)
        tpl = _create_template(client, user["user_id"])
        assert tpl["user_id"] == user["user_id"]
        assert tpl["usage_count"] == 0
        assert tpl["is_public"] is False

    def test_duplicate_name_in_scope(self, client):
        user = create_test_user(client)
        _create_template(client, user["user_id"], name="Dup")
        resp = client.post(
            "/api/templates/", json={"name": "Dup", "template_data": {}}, headers=auth_headers(user["user_id"]),
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == "template-name-taken"

    def test_same_name_in_other_scope(self, client):
        user = create_test_user(client)
        org = create_test_org(client, owner_id=user["user_id"])
        _create_template(client, user["user_id"], name="Dup")
        tpl = _create_template(client, user["user_id"], name="Dup", organization_id=org["id"])
        assert tpl["organization_id"] == org["id"]

    def test_empty_name_rejected(self, client):
        user = create_test_user(client)
        resp = client.post("/api/templates/", json={"name": ""}, headers=auth_headers(user["user_id"]))
        assert resp.status_code == 400


class TestInstantiate:
    def test_public_template_counts_use(self, client):
        author = create_test_user(client, name="Author")
        user = create_test_user(client, name="User")
        tpl = _create_template(client, author["user_id"], is_public=True)

        resp = _instantiate(client, user["user_id"], tpl["id"])
        assert resp.status_code == 200
        assert resp.json()["template_data"] == {"title": "Meetup", "venue": "Main Hall"}
        assert _usage(client, author["user_id"], tpl["id"]) == 1

        _instantiate(client, author["user_id"], tpl["id"])
        assert _usage(client, author["user_id"], tpl["id"]) == 2

    def test_private_template_denied(self, client):
        author = create_test_user(client, name="Author")
        user = create_test_user(client, name="User")
        tpl = _create_template(client, author["user_id"])

        resp = _instantiate(client, user["user_id"], tpl["id"])
        assert resp.status_code == 404
        assert resp.json()["code"] == "access-denied-or-not-found"
        assert _usage(client, author["user_id"], tpl["id"]) == 0

    def test_unknown_template_same_error(self, client):
        user = create_test_user(client)
        resp = _instantiate(client, user["user_id"], str(uuid.uuid4()))
        assert resp.status_code == 404
        assert resp.json()["code"] == "access-denied-or-not-found"

    def test_org_admin_but_not_member(self, client):
        owner = create_test_user(client, name="Owner")
        admin = create_test_user(client, name="Admin")
        member = create_test_user(client, name="Member")
        org = create_test_org(client, owner_id=owner["user_id"])
        add_org_member(client, org["id"], owner["user_id"], admin["user_id"], role="admin")
        add_org_member(client, org["id"], owner["user_id"], member["user_id"], role="member")
        tpl = _create_template(client, owner["user_id"], organization_id=org["id"])

        assert _instantiate(client, admin["user_id"], tpl["id"]).status_code == 200
        assert _instantiate(client, member["user_id"], tpl["id"]).status_code == 404

    def test_failed_usage_bump_does_not_fail_read(self, client, monkeypatch, caplog):
        user = create_test_user(client)
        tpl = _create_template(client, user["user_id"])

        def broken_update(*args, **kwargs):
            raise OperationalError("UPDATE event_templates", {}, Exception("database is locked"))

        monkeypatch.setattr(template_service, "update", broken_update)
        with caplog.at_level(logging.WARNING, logger="event_platform.services.template_service"):
            resp = _instantiate(client, user["user_id"], tpl["id"])

        assert resp.status_code == 200
        assert resp.json()["template_data"] == {"title": "Meetup", "venue": "Main Hall"}
        assert "Could not bump usage_count" in caplog.text
        monkeypatch.undo()
        assert _usage(client, user["user_id"], tpl["id"]) == 0


class TestListAndDelete:
    def test_list_visibility(self, client):
        author = create_test_user(client, name="Author")
        user = create_test_user(client, name="User")
        _create_template(client, author["user_id"], name="Public", is_public=True)
        _create_template(client, author["user_id"], name="Hidden")
        _create_template(client, user["user_id"], name="Own")

        names = {t["name"] for t in client.get("/api/templates/", headers=auth_headers(user["user_id"])).json()}
        assert names == {"Public", "Own"}

        resp = client.get("/api/templates/", params={"include_public": "false"}, headers=auth_headers(user["user_id"]))
        assert {t["name"] for t in resp.json()} == {"Own"}

    def test_list_ordered_by_usage(self, client):
        user = create_test_user(client)
        _create_template(client, user["user_id"], name="Alpha")
        beta = _create_template(client, user["user_id"], name="Beta")
        _instantiate(client, user["user_id"], beta["id"])

        names = [t["name"] for t in client.get("/api/templates/", headers=auth_headers(user["user_id"])).json()]
        assert names == ["Beta", "Alpha"]

    def test_delete(self, client):
        author = create_test_user(client, name="Author")
        other = create_test_user(client, name="Other")
        tpl = _create_template(client, author["user_id"], is_public=True)

        assert client.delete(f"/api/templates/{tpl['id']}", headers=auth_headers(other["user_id"])).status_code == 404
        assert client.delete(f"/api/templates/{tpl['id']}", headers=auth_headers(author["user_id"])).status_code == 204
        assert _instantiate(client, author["user_id"], tpl["id"]).status_code == 404
