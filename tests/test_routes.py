"""HTTP-level tests for the public and admin routes."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agentmart.config import settings
from agentmart.dependencies import (
    get_admin_agent_service,
    get_agent_repository,
    get_contact_repository,
    get_draft_store,
    get_package_repository,
    get_purchase_service,
    get_user_admin_service,
)
from agentmart.drafts import AgentDraft
from agentmart.exceptions import (
    AuthenticationRequiredError,
    BackendError,
    MissingFieldsError,
    PaymentDeclinedError,
    ProtectedRoleError,
    PurchaseRequiredError,
)
from agentmart.main import create_app
from agentmart.models import (
    AgentPage,
    ContactRequest,
    ContactStatus,
    Package,
    Profile,
    Role,
    UserSummary,
)
from tests.factories import make_agent, make_purchase, make_session

USER = {"Authorization": "Bearer user-1-token"}
ADMIN = {"Authorization": "Bearer admin-1-token"}


@pytest.fixture
def mock_agents() -> MagicMock:
    agents = MagicMock()
    agents.list_all = AsyncMock(return_value=[make_agent()])
    agents.get = AsyncMock(return_value=make_agent())
    agents.fetch_page = AsyncMock(
        return_value=AgentPage(
            agents=[make_agent()], total_count=1, total_pages=1, current_page=1, page_size=10
        )
    )
    return agents


@pytest.fixture
def mock_packages() -> MagicMock:
    packages = MagicMock()
    packages.list_all = AsyncMock(return_value=[Package(id="p1", name="Basic", price=29)])
    packages.get = AsyncMock(return_value=Package(id="p1", name="Basic", price=29))
    packages.set_popular = AsyncMock(
        return_value=Package(id="p1", name="Basic", price=29, is_popular=True)
    )
    packages.update_features = AsyncMock(
        return_value=Package(id="p1", name="Basic", price=29, features=["a", "b"])
    )
    packages.create = AsyncMock()
    packages.delete = AsyncMock(return_value=True)
    return packages


@pytest.fixture
def mock_contacts() -> MagicMock:
    contacts = MagicMock()
    stored = ContactRequest(id="c1", name="Ada", email="ada@example.com", message="Hello")
    contacts.submit = AsyncMock(return_value=stored)
    contacts.list_requests = AsyncMock(return_value=[stored])
    contacts.update_status = AsyncMock(
        return_value=stored.model_copy(update={"status": ContactStatus.IN_PROGRESS})
    )
    contacts.delete = AsyncMock(return_value=True)
    return contacts


@pytest.fixture
def mock_drafts() -> MagicMock:
    drafts = MagicMock()
    drafts.get = AsyncMock(return_value=None)
    drafts.save = AsyncMock()
    drafts.clear = AsyncMock()
    return drafts


@pytest.fixture
def mock_purchase_service() -> MagicMock:
    service = MagicMock()
    service.checkout = AsyncMock(return_value=make_purchase(payment_status="completed"))
    service.download = AsyncMock(return_value=("1_invoice.json", b'{"agent": 1}'))
    return service


@pytest.fixture
def mock_admin_agents() -> MagicMock:
    service = MagicMock()
    service.create_agent = AsyncMock(return_value=make_agent(id="new-agent"))
    service.delete_agent = AsyncMock()
    return service


@pytest.fixture
def mock_users() -> MagicMock:
    service = MagicMock()
    service.list_users = AsyncMock(
        return_value=[UserSummary(id="u1", email="ada@example.com", role=Role.USER)]
    )
    service.toggle_role = AsyncMock(return_value=Profile(id="u1", role=Role.ADMIN))
    return service


@pytest.fixture
def mock_backend() -> MagicMock:
    backend = MagicMock()
    backend.with_token.return_value = backend
    backend.auth.sign_out = AsyncMock()
    return backend


@pytest.fixture
def app(
    mock_backend,
    mock_agents,
    mock_packages,
    mock_contacts,
    mock_drafts,
    mock_purchase_service,
    mock_admin_agents,
    mock_users,
) -> FastAPI:
    sessions = {
        "user-1-token": make_session(),
        "admin-1-token": make_session(role=Role.ADMIN, user_id="admin-1"),
    }
    resolver = MagicMock()
    resolver.resolve = AsyncMock(side_effect=lambda token: sessions[token])

    application = create_app(backend=mock_backend, redis=MagicMock(), session_resolver=resolver)
    application.dependency_overrides.update(
        {
            get_agent_repository: lambda: mock_agents,
            get_package_repository: lambda: mock_packages,
            get_contact_repository: lambda: mock_contacts,
            get_draft_store: lambda: mock_drafts,
            get_purchase_service: lambda: mock_purchase_service,
            get_admin_agent_service: lambda: mock_admin_agents,
            get_user_admin_service: lambda: mock_users,
        }
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": settings.VERSION}


class TestAgentListing:
    def test_first_page(self, client: TestClient, mock_agents: MagicMock) -> None:
        response = client.get("/api/agents")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["has_more"] is False
        assert body["items"][0]["price"] == 19.99
        mock_agents.fetch_page.assert_awaited_once_with(1, settings.DEFAULT_PAGE_SIZE)

    def test_page_size_is_capped(self, client: TestClient, mock_agents: MagicMock) -> None:
        client.get("/api/agents", params={"page": 2, "page_size": 5000})

        mock_agents.fetch_page.assert_awaited_once_with(2, settings.MAX_PAGE_SIZE)

    def test_page_zero_is_rejected(self, client: TestClient) -> None:
        assert client.get("/api/agents", params={"page": 0}).status_code == 422


class TestCatalog:
    def test_backend_agents(self, client: TestClient) -> None:
        body = client.get("/api/services").json()

        assert body["fallback"] is False
        assert [a["id"] for a in body["items"]] == ["agent-1"]

    def test_backend_failure_serves_samples(
        self, client: TestClient, mock_agents: MagicMock
    ) -> None:
        mock_agents.list_all.side_effect = BackendError("down", 503)

        body = client.get("/api/services").json()

        assert body["fallback"] is True
        assert body["total"] == 6

    def test_empty_catalog_serves_filtered_samples(
        self, client: TestClient, mock_agents: MagicMock
    ) -> None:
        mock_agents.list_all.return_value = []

        body = client.get(
            "/api/services", params={"importance": "High", "price_sort": "desc"}
        ).json()

        assert body["fallback"] is True
        assert [a["id"] for a in body["items"]] == ["5", "2"]

    def test_all_importance_keeps_everything(
        self, client: TestClient, mock_agents: MagicMock
    ) -> None:
        mock_agents.list_all.return_value = []

        response = client.get("/api/services", params={"importance": "all"})

        assert response.status_code == 200
        assert response.json()["total"] == 6

    def test_invalid_importance(self, client: TestClient) -> None:
        assert client.get("/api/services", params={"importance": "Urgent"}).status_code == 422


class TestAgentDetail:
    def test_backend_agent(self, client: TestClient) -> None:
        body = client.get("/api/services/agent-1").json()

        assert body["fallback"] is False
        assert body["agent"]["name"] == "Invoice Parser"

    def test_sample_detail_when_backend_has_none(
        self, client: TestClient, mock_agents: MagicMock
    ) -> None:
        mock_agents.get.return_value = None

        body = client.get("/api/services/1").json()

        assert body["fallback"] is True
        assert body["agent"]["name"] == "Email Automation Agent"
        assert len(body["agent"]["faqs"]) == 4

    def test_unknown_agent(self, client: TestClient, mock_agents: MagicMock) -> None:
        mock_agents.get.return_value = None

        response = client.get("/api/services/999")

        assert response.status_code == 404
        assert response.json() == {"detail": "Agent not found: 999"}


class TestPurchase:
    def test_checkout(self, client: TestClient, mock_purchase_service: MagicMock) -> None:
        response = client.post("/api/services/agent-1/purchase", headers=USER)

        assert response.status_code == 200
        assert response.json()["payment_status"] == "completed"
        session, agent_id = mock_purchase_service.checkout.await_args.args
        assert session.user_id == "user-1"
        assert agent_id == "agent-1"

    def test_anonymous_checkout(
        self, client: TestClient, mock_purchase_service: MagicMock
    ) -> None:
        mock_purchase_service.checkout.side_effect = AuthenticationRequiredError

        response = client.post("/api/services/agent-1/purchase")

        assert response.status_code == 401
        assert response.json() == {"detail": "Please log in to continue."}

    def test_declined_payment(self, client: TestClient, mock_purchase_service: MagicMock) -> None:
        mock_purchase_service.checkout.side_effect = PaymentDeclinedError("Card declined")

        response = client.post("/api/services/agent-1/purchase", headers=USER)

        assert response.status_code == 402
        assert response.json() == {"detail": "Payment failed: Card declined"}


class TestDownload:
    def test_download_is_an_attachment(self, client: TestClient) -> None:
        response = client.get("/api/services/agent-1/download", headers=USER)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.headers["content-disposition"] == (
            "attachment; filename=\"1_invoice.json\"; filename*=UTF-8''1_invoice.json"
        )
        assert response.content == b'{"agent": 1}'

    def test_non_ascii_file_name(
        self, client: TestClient, mock_purchase_service: MagicMock
    ) -> None:
        mock_purchase_service.download.return_value = ("1712_агент.json", b"{}")

        response = client.get("/api/services/agent-1/download", headers=USER)

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            "attachment; filename=\"1712______.json\"; "
            "filename*=UTF-8''1712_%D0%B0%D0%B3%D0%B5%D0%BD%D1%82.json"
        )

    def test_quote_in_file_name(
        self, client: TestClient, mock_purchase_service: MagicMock
    ) -> None:
        mock_purchase_service.download.return_value = ('1_say "hi".json', b"{}")

        response = client.get("/api/services/agent-1/download", headers=USER)

        assert response.headers["content-disposition"] == (
            "attachment; filename=\"1_say _hi_.json\"; filename*=UTF-8''1_say%20%22hi%22.json"
        )

    def test_without_purchase(self, client: TestClient, mock_purchase_service: MagicMock) -> None:
        mock_purchase_service.download.side_effect = PurchaseRequiredError

        response = client.get("/api/services/agent-1/download", headers=USER)

        assert response.status_code == 403
        assert response.json() == {
            "detail": "You haven't purchased this agent or the purchase is not complete."
        }


class TestPackages:
    def test_backend_packages(self, client: TestClient) -> None:
        body = client.get("/api/packages").json()

        assert body["fallback"] is False
        assert body["items"][0]["name"] == "Basic"

    def test_empty_serves_samples(self, client: TestClient, mock_packages: MagicMock) -> None:
        mock_packages.list_all.return_value = []

        body = client.get("/api/packages").json()

        assert body["fallback"] is True
        assert [p["price"] for p in body["items"]] == [29.0, 99.0, "Custom"]


class TestContact:
    def test_submit(self, client: TestClient, mock_contacts: MagicMock) -> None:
        response = client.post(
            "/api/contact",
            json={"name": "Ada", "email": "ada@example.com", "message": "Hello"},
        )

        assert response.status_code == 201
        assert response.json()["status"] == "new"
        mock_contacts.submit.assert_awaited_once()

    def test_invalid_email(self, client: TestClient, mock_contacts: MagicMock) -> None:
        response = client.post(
            "/api/contact", json={"name": "Ada", "email": "nope", "message": "Hello"}
        )

        assert response.status_code == 422
        mock_contacts.submit.assert_not_awaited()


class TestAuthRoutes:
    def test_anonymous_session(self, client: TestClient) -> None:
        body = client.get("/api/auth/session").json()

        assert body["is_logged_in"] is False
        assert body["is_admin"] is False

    def test_admin_session(self, client: TestClient) -> None:
        body = client.get("/api/auth/session", headers=ADMIN).json()

        assert body["is_admin"] is True
        assert body["role"] == "admin"

    def test_sign_out(self, client: TestClient, mock_backend: MagicMock) -> None:
        response = client.post("/api/auth/sign-out", headers=USER)

        assert response.status_code == 204
        mock_backend.auth.sign_out.assert_awaited_once_with("user-1-token")

    def test_sign_out_without_session(self, client: TestClient) -> None:
        assert client.post("/api/auth/sign-out").status_code == 401


class TestAdminAccess:
    def test_user_gets_403_with_redirect_hint(self, client: TestClient) -> None:
        response = client.get("/api/admin/users", headers=USER)

        assert response.status_code == 403
        assert response.json() == {"detail": "Admin access required", "redirect_to": "/"}

    def test_browser_is_sent_home(self, client: TestClient) -> None:
        response = client.get(
            "/api/admin/users",
            headers={**USER, "Accept": "text/html"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_anonymous_is_denied(self, client: TestClient, mock_users: MagicMock) -> None:
        assert client.get("/api/admin/users").status_code == 403
        mock_users.list_users.assert_not_awaited()


class TestAdminAgents:
    def test_create_agent(self, client: TestClient, mock_admin_agents: MagicMock) -> None:
        response = client.post(
            "/api/admin/agents",
            headers=ADMIN,
            files={"file": ("agent.json", b"{}", "application/json")},
            data={"name": "Parser", "price": "9.99", "importance": "High"},
        )

        assert response.status_code == 201
        assert response.json()["id"] == "new-agent"
        session, form, filename, content_type, content = (
            mock_admin_agents.create_agent.await_args.args
        )
        assert session.user_id == "admin-1"
        assert form.name == "Parser"
        assert form.price == Decimal("9.99")
        assert filename == "agent.json"
        assert content_type == "application/json"
        assert content == b"{}"

    def test_create_agent_missing_name(
        self, client: TestClient, mock_admin_agents: MagicMock
    ) -> None:
        mock_admin_agents.create_agent.side_effect = MissingFieldsError(["name"])

        response = client.post(
            "/api/admin/agents",
            headers=ADMIN,
            files={"file": ("agent.json", b"{}", "application/json")},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Please fill in all required fields: name"}

    def test_list_agents(self, client: TestClient, mock_agents: MagicMock) -> None:
        response = client.get("/api/admin/agents", headers=ADMIN, params={"page": 1})

        assert response.status_code == 200
        assert response.json()["total_pages"] == 1
        mock_agents.fetch_page.assert_awaited_once_with(1, 10)

    def test_delete_agent(self, client: TestClient, mock_admin_agents: MagicMock) -> None:
        response = client.delete("/api/admin/agents/agent-1", headers=ADMIN)

        assert response.status_code == 204
        mock_admin_agents.delete_agent.assert_awaited_once_with("agent-1")

    def test_draft_round_trip(self, client: TestClient, mock_drafts: MagicMock) -> None:
        saved = client.put(
            "/api/admin/agents/draft", headers=ADMIN, json={"name": "Half done"}
        )
        assert saved.status_code == 200
        mock_drafts.save.assert_awaited_once_with("admin-1", AgentDraft(name="Half done"))

        mock_drafts.get.return_value = AgentDraft(name="Half done")
        assert client.get("/api/admin/agents/draft", headers=ADMIN).json()["name"] == "Half done"

        assert client.delete("/api/admin/agents/draft", headers=ADMIN).status_code == 204
        mock_drafts.clear.assert_awaited_once_with("admin-1")


class TestAdminPackages:
    def test_toggle_popular(self, client: TestClient, mock_packages: MagicMock) -> None:
        response = client.post("/api/admin/packages/p1/toggle-popular", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["is_popular"] is True
        mock_packages.set_popular.assert_awaited_once_with("p1", True)

    def test_update_features_accepts_json_string(
        self, client: TestClient, mock_packages: MagicMock
    ) -> None:
        response = client.put(
            "/api/admin/packages/p1/features", headers=ADMIN, json={"features": '["a", "b"]'}
        )

        assert response.status_code == 200
        mock_packages.update_features.assert_awaited_once_with("p1", ["a", "b"])

    def test_delete_missing_package(self, client: TestClient, mock_packages: MagicMock) -> None:
        mock_packages.delete.return_value = False

        response = client.delete("/api/admin/packages/missing", headers=ADMIN)

        assert response.status_code == 404
        assert response.json() == {"detail": "Package not found: missing"}


class TestAdminContactRequests:
    def test_list_by_status(self, client: TestClient, mock_contacts: MagicMock) -> None:
        response = client.get(
            "/api/admin/contact-requests", headers=ADMIN, params={"status": "in-progress"}
        )

        assert response.status_code == 200
        mock_contacts.list_requests.assert_awaited_once_with(ContactStatus.IN_PROGRESS)

    def test_update_status(self, client: TestClient, mock_contacts: MagicMock) -> None:
        response = client.patch(
            "/api/admin/contact-requests/c1", headers=ADMIN, json={"status": "in-progress"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "in-progress"

    def test_unknown_status(self, client: TestClient) -> None:
        response = client.patch(
            "/api/admin/contact-requests/c1", headers=ADMIN, json={"status": "archived"}
        )

        assert response.status_code == 422


class TestAdminUsers:
    def test_search(self, client: TestClient, mock_users: MagicMock) -> None:
        response = client.get("/api/admin/users", headers=ADMIN, params={"search": "ada"})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        mock_users.list_users.assert_awaited_once_with("ada")

    def test_promote(self, client: TestClient) -> None:
        response = client.post("/api/admin/users/u1/toggle-role", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    def test_admin_is_protected(self, client: TestClient, mock_users: MagicMock) -> None:
        mock_users.toggle_role.side_effect = ProtectedRoleError

        response = client.post("/api/admin/users/a1/toggle-role", headers=ADMIN)

        assert response.status_code == 403
        assert response.json() == {"detail": "Cannot modify admin"}


class TestErrorHandling:
    def test_unknown_path(self, client: TestClient) -> None:
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["path"] == "/api/nope"

    def test_unexpected_error_is_generic(self, app: FastAPI, mock_agents: MagicMock) -> None:
        mock_agents.fetch_page.side_effect = RuntimeError("secret internals")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/agents")

        assert response.status_code == 500
        body = response.json()
        assert "secret internals" not in body["detail"]
        assert len(body["error_id"]) == 8
