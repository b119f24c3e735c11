from __future__ import annotations

from typer.testing import CliRunner

from reviewhub_cli.commands import admin_cmd
from reviewhub_cli.config import default_config
from reviewhub_client import AuthError

runner = CliRunner()


class _FakeClient:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def get_admin_users(self, **kwargs):
        self.calls.append(("get_admin_users", kwargs))
        return {"users": [{"id": 1, "username": "ann", "email": "ann@example.test", "is_admin": True}]}

    def update_review_status(self, review_id, is_active):
        self.calls.append(("update_review_status", review_id, is_active))

    def bulk_update_reviews(self, review_ids, updates):
        self.calls.append(("bulk_update_reviews", review_ids, updates))

    def bulk_update_products(self, product_ids, updates):
        self.calls.append(("bulk_update_products", product_ids, updates))

    def get_admin_dashboard(self):
        raise AuthError(403, "Admin access required")

    def admin_get_deletion_requests(self, status="pending"):
        self.calls.append(("admin_get_deletion_requests", status))
        return {"deletion_requests": [{"id": 3, "user_id": 8, "reason": "moving on"}]}

    def close(self) -> None:
        return None


def _patch(monkeypatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr(admin_cmd, "load_config", default_config)
    monkeypatch.setattr(admin_cmd, "make_client", lambda *_args, **_kwargs: client)
    return client


def test_users_defaults(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["users"])

    assert result.exit_code == 0, result.output
    assert client.calls == [
        ("get_admin_users", {"page": 1, "per_page": 20, "search": "", "sort_by": "created_at", "order": "desc"})
    ]
    assert "ann@example.test" in result.output


def test_single_review_status_uses_status_route(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["review-status", "5", "--inactive"])

    assert result.exit_code == 0, result.output
    assert client.calls == [("update_review_status", 5, False)]


def test_many_review_ids_use_bulk_update(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["review-status", "5", "6", "7", "--active"])

    assert result.exit_code == 0, result.output
    assert client.calls == [("bulk_update_reviews", [5, 6, 7], {"is_active": True})]


def test_bulk_product_status(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["product-status", "1", "2", "--inactive"])

    assert result.exit_code == 0
    assert client.calls == [("bulk_update_products", [1, 2], {"is_active": False})]


def test_dashboard_forbidden(monkeypatch) -> None:
    _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["dashboard"])

    assert result.exit_code == 2
    assert "Unauthorized (403)" in result.output


def test_deletion_requests_table(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(admin_cmd.app, ["deletion-requests", "--status", "completed"])

    assert result.exit_code == 0
    assert client.calls == [("admin_get_deletion_requests", "completed")]
    assert "moving on" in result.output
