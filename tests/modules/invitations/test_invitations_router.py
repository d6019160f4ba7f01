"""
HTTP tests for the invitation endpoints: error translation, auth and rate limits.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from symposium.core.config import Settings
from symposium.core.context import AppContext
from symposium.core.database import get_db
from symposium.core.security import create_access_token
from symposium.core.storage import FileStorage
from symposium.main import create_app
from symposium.modules.invitations.tokens import TokenPurpose, compose_token

SERVICE = "symposium.modules.invitations.service"


@pytest.fixture
def app(mock_db, mock_mailer, tmp_path):
    settings = Settings(upload_dir=str(tmp_path))
    context = AppContext(
        settings=settings,
        engine=MagicMock(),
        session_maker=MagicMock(),
        mailer=mock_mailer,
        storage=FileStorage(tmp_path, settings.uploads_url),
    )
    application = create_app(settings, context=context)

    async def override_db():
        yield mock_db

    application.dependency_overrides[get_db] = override_db
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


def _bearer(user_id, role: str) -> dict[str, str]:
    token = create_access_token(
        str(user_id), additional_claims={"email": "user@example.com", "role": role}
    )
    return {"Authorization": f"Bearer {token}"}


class TestPublicForms:
    """Token-gated form endpoints."""

    @pytest.mark.asyncio
    async def test_malformed_token_is_400(self, client):
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock()

            response = await client.get("/api/v1/statement-form", params={"token": "abc"})

            repo.get_by_id.assert_not_called()
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_TOKEN_FORMAT"

    @pytest.mark.asyncio
    async def test_missing_token_is_400(self, client):
        response = await client.get("/api/v1/photo-release-form")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_student_is_404(self, client):
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock(return_value=None)

            response = await client.get(
                "/api/v1/statement-form",
                params={"token": compose_token(uuid4(), TokenPurpose.PARENT)},
            )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_mismatched_token_is_403(self, client, sample_student):
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock(return_value=sample_student)

            response = await client.get(
                "/api/v1/statement-form",
                params={"token": compose_token(sample_student.id, TokenPurpose.PARENT)},
            )

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "INVALID_INVITATION"

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self, client):
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock(side_effect=RuntimeError("connection reset by peer"))

            response = await client.get(
                "/api/v1/statement-form",
                params={"token": compose_token(uuid4(), TokenPurpose.TEACHER)},
            )

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "INTERNAL_ERROR"
        assert "connection reset" not in response.text


class TestSendInvitation:
    """Authenticated send endpoints."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.post(
            "/api/v1/send-statement-invitation",
            json={"type": "teacher", "email": "t@example.com"},
        )
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_advisor_cannot_send_statement_invitation(self, client):
        response = await client.post(
            "/api/v1/send-statement-invitation",
            json={"type": "teacher", "email": "t@example.com"},
            headers=_bearer(uuid4(), "advisor"),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_rate_limited_after_ten(self, client, sample_student, apply_update):
        headers = _bearer(sample_student.id, "student")
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock(side_effect=apply_update)

            for _ in range(10):
                response = await client.post(
                    "/api/v1/send-statement-invitation",
                    json={"type": "parent", "email": "p@example.com"},
                    headers=headers,
                )
                assert response.status_code == 200

            response = await client.post(
                "/api/v1/send-statement-invitation",
                json={"type": "parent", "email": "p@example.com"},
                headers=headers,
            )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "3600"

    @pytest.mark.asyncio
    async def test_email_failure_is_500(self, client, mock_mailer, sample_student):
        mock_mailer.send_statement_invitation = AsyncMock(return_value=False)
        with patch(f"{SERVICE}.student_repository") as repo:
            repo.get_by_id = AsyncMock(return_value=sample_student)
            repo.update = AsyncMock()

            response = await client.post(
                "/api/v1/send-statement-invitation",
                json={"type": "mentor", "email": "m@example.com"},
                headers=_bearer(sample_student.id, "student"),
            )

            repo.update.assert_not_called()
        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "EMAIL_DELIVERY_FAILED"


class TestUnexpectedErrors:
    """Dashboard endpoints answer unexpected failures with the JSON error body."""

    @pytest.mark.asyncio
    async def test_student_dashboard(self, client):
        user_id = uuid4()
        with patch("symposium.modules.students.service.repository") as repo:
            repo.get_by_id = AsyncMock(side_effect=RuntimeError("pool exhausted"))

            response = await client.get(
                "/api/v1/students/me", headers=_bearer(user_id, "student")
            )

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "INTERNAL_ERROR"
        assert "pool exhausted" not in response.text

    @pytest.mark.asyncio
    async def test_admin_stats(self, client):
        with patch(
            "symposium.modules.admin.router.service.get_dashboard_stats",
            AsyncMock(side_effect=RuntimeError("pool exhausted")),
        ):
            response = await client.get(
                "/api/v1/admin/stats", headers=_bearer(uuid4(), "director")
            )

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "INTERNAL_ERROR"


class TestAdminGuard:
    @pytest.mark.asyncio
    async def test_student_cannot_reach_admin(self, client):
        response = await client.get("/api/v1/admin/stats", headers=_bearer(uuid4(), "student"))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
