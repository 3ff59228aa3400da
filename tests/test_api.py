"""
Tests for the HTTP API.

The application is built with `create_app` and exercised with FastAPI's
TestClient. The lifespan is not run: services are injected through
dependency overrides, their repositories replaced with AsyncMocks.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pydantic import SecretStr
from pymongo.errors import PyMongoError

from matchday.api import create_app
from matchday.api.dependencies import (
    ADMIN_TOKEN_HEADER,
    get_auth_service,
    get_bet_service,
    get_db_connection,
    get_group_service,
    get_user_service,
)
from matchday.clients.football_api import FootballApiClient, FootballApiError
from matchday.config.settings import AppSettings, FootballApiSettings, Settings
from matchday.db.connection import DatabaseConnection
from matchday.errors import MatchdayError
from matchday.repositories import (
    BetRepository,
    GameRepository,
    GroupRepository,
    SessionRepository,
    UserRepository,
)
from matchday.services import AuthService, BetService, GroupService, UserService

ADMIN_TOKEN = "test-admin-token"
PASSWORD = "secret"


def returns_argument(model):
    return model


def make_settings(environment: str = "development") -> Settings:
    return Settings(
        app=AppSettings(
            environment=environment,
            admin_api_token=SecretStr(ADMIN_TOKEN),
            session_secret=SecretStr("test-session-secret"),
        ),
    )


class Services:
    """Real services over mocked repositories, shared by one test's app."""

    def __init__(self, mock_db, settings: Settings, user, football_api) -> None:
        self.user = user

        self.auth = AuthService(mock_db, settings.app)
        self.auth.user_repo = AsyncMock(spec=UserRepository)
        self.auth.user_repo.find_by_username.side_effect = (
            lambda username: user if username == user.username else None
        )
        self.auth.user_repo.get_by_id.return_value = user
        self.auth.bet_repo = AsyncMock(spec=BetRepository)
        self.auth.bet_repo.get_many_by_ids.return_value = []

        # Sessions behave like a tiny store so cookies round-trip
        self.sessions: dict[str, object] = {}
        self.auth.session_repo = AsyncMock(spec=SessionRepository)
        self.auth.session_repo.create.side_effect = self._store_session
        self.auth.session_repo.get_active.side_effect = lambda sid: self.sessions.get(str(sid))

        self.users = UserService(mock_db)
        self.users.repository = AsyncMock(spec=UserRepository)
        self.users.repository.create.side_effect = returns_argument
        self.users.group_repo = AsyncMock(spec=GroupRepository)

        self.groups = GroupService(mock_db, football_api, FootballApiSettings())
        self.groups.group_repo = AsyncMock(spec=GroupRepository)
        self.groups.group_repo.create.side_effect = returns_argument
        self.groups.group_repo.add_upcoming_game.side_effect = self._link_game
        self.groups.game_repo = AsyncMock(spec=GameRepository)
        self.groups.game_repo.create.side_effect = returns_argument

        self.bets = BetService(mock_db)
        self.bets.bet_repo = AsyncMock(spec=BetRepository)
        self.bets.bet_repo.create.side_effect = returns_argument
        self.bets.bet_repo.find_by_user_and_game.return_value = None
        self.bets.game_repo = AsyncMock(spec=GameRepository)
        self.bets.user_repo = AsyncMock(spec=UserRepository)

    def _store_session(self, session):
        self.sessions[str(session.id)] = session
        return session

    def _link_game(self, group_id, game_id, **kwargs):
        stored = self.groups.group_repo.create.await_args.args[0]
        return stored.model_copy(update={"upcoming_games": [game_id]})


@pytest.fixture
def football_api(payloads, future) -> AsyncMock:
    api = AsyncMock(spec=FootballApiClient)
    api.get_team.return_value = payloads.response("teams", [payloads.team_item()])
    api.get_team_statistics.return_value = payloads.response(
        "teams/statistics", payloads.statistics()
    )
    api.get_standings.return_value = payloads.response("standings", [payloads.standings_item()])
    api.get_fixtures.return_value = payloads.response(
        "fixtures", [payloads.fixture_item(777, future)]
    )
    return api


@pytest.fixture
def user(user_factory):
    return user_factory.create(username="jan.novak", password=PASSWORD)


def build_client(services: Services, settings: Settings, **kwargs) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_auth_service] = lambda: services.auth
    app.dependency_overrides[get_user_service] = lambda: services.users
    app.dependency_overrides[get_group_service] = lambda: services.groups
    app.dependency_overrides[get_bet_service] = lambda: services.bets
    return TestClient(app, **kwargs)


@pytest.fixture
def services(mock_db, user, football_api) -> Services:
    return Services(mock_db, make_settings(), user, football_api)


@pytest.fixture
def client(services) -> TestClient:
    return build_client(services, make_settings(), raise_server_exceptions=False)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {ADMIN_TOKEN_HEADER: ADMIN_TOKEN}


def login(client: TestClient, username: str = "jan.novak", password: str = PASSWORD):
    return client.post("/auth/login", json={"username": username, "password": password})


# =============================================================================
# Admin
# =============================================================================


class TestAdminAuth:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/admin/groups/team/upcoming"),
            ("post", "/admin/users"),
            ("post", "/admin/groups"),
        ],
    )
    def test_missing_token_rejected(self, client, method, path):
        response = client.request(method.upper(), path, json={})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED_REQUEST"

    def test_wrong_token_rejected(self, client):
        response = client.get(
            "/admin/groups/team/upcoming", headers={ADMIN_TOKEN_HEADER: "guess"}
        )

        assert response.status_code == 401

    def test_upcoming_games_not_implemented(self, client, admin_headers):
        response = client.get("/admin/groups/team/upcoming", headers=admin_headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Endpoint not implemented."


class TestAdminUsers:
    def test_create_user(self, client, services, admin_headers, group_factory):
        group = group_factory.create()
        services.users.group_repo.get_by_id.return_value = group

        response = client.post(
            "/admin/users",
            headers=admin_headers,
            json={
                "username": "petr",
                "email": "petr@example.com",
                "password": "pw",
                "group": str(group.id),
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "petr"
        assert body["group_id"] == str(group.id)
        assert "password" not in body

    def test_group_missing(self, client, services, admin_headers):
        services.users.group_repo.get_by_id.return_value = None

        response = client.post(
            "/admin/users",
            headers=admin_headers,
            json={
                "username": "petr",
                "email": "petr@example.com",
                "password": "pw",
                "group": str(ObjectId()),
            },
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Selected group doesn't exist."
        services.users.repository.create.assert_not_awaited()


class TestAdminGroups:
    body = {"name": "Office League", "team": 40, "league": 39, "season": 2024}

    def test_create_group(self, client, services, admin_headers):
        response = client.post("/admin/groups", headers=admin_headers, json=self.body)

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Office League"
        assert body["followed_teams"][0]["api_id"] == 40
        assert len(body["upcoming_games"]) == 1

    def test_team_not_found(self, client, services, admin_headers, football_api, payloads):
        football_api.get_team.return_value = payloads.response("teams", [])

        response = client.post("/admin/groups", headers=admin_headers, json=self.body)

        assert response.status_code == 404
        assert response.json()["message"].startswith("Team information not found.")
        services.groups.group_repo.create.assert_not_awaited()

    def test_standings_not_found(self, client, services, admin_headers, football_api, payloads):
        football_api.get_standings.return_value = payloads.response("standings", [])

        response = client.post("/admin/groups", headers=admin_headers, json=self.body)

        assert response.status_code == 404
        services.groups.group_repo.create.assert_not_awaited()

    def test_football_api_failure(self, client, services, admin_headers, football_api):
        football_api.get_team_statistics.side_effect = FootballApiError("timeout")

        response = client.post("/admin/groups", headers=admin_headers, json=self.body)

        assert response.status_code == 500
        assert response.json() == {
            "message": "Internal server error.",
            "code": "INTERNAL_SERVER_ERROR",
        }
        services.groups.group_repo.create.assert_not_awaited()

    def test_upcoming_game_failure_keeps_group(
        self, client, services, admin_headers, football_api, payloads
    ):
        football_api.get_fixtures.return_value = payloads.response("fixtures", [])

        response = client.post("/admin/groups", headers=admin_headers, json=self.body)

        assert response.status_code == 500
        services.groups.group_repo.create.assert_awaited_once()

    def test_invalid_body(self, client, admin_headers):
        response = client.post("/admin/groups", headers=admin_headers, json={"name": "x"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST_BODY"


# =============================================================================
# Auth
# =============================================================================


class TestLogin:
    def test_current_user_without_session(self, client):
        response = client.get("/auth/user")

        assert response.status_code == 200
        assert response.json() is None

    def test_login(self, client, services, user):
        response = login(client)

        assert response.status_code == 200
        assert response.json() == {"message": "Login successful."}
        assert len(services.sessions) == 1
        services.auth.user_repo.update_login.assert_awaited_once_with(user.id)

    def test_login_wrong_password(self, client, services):
        response = login(client, password="nope")

        assert response.status_code == 401
        assert services.sessions == {}

    def test_current_user_scorer_is_int(self, client, services, user, bet_factory):
        bet = bet_factory.create(user_id=user.id, scorer="256")
        services.auth.bet_repo.get_many_by_ids.return_value = [bet]
        login(client)

        response = client.get("/auth/user")

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "jan.novak"
        assert body["bets"][0]["scorer"] == 256
        assert "password" not in body


class TestLogout:
    def test_logout_clears_session(self, client, services):
        login(client)

        response = client.get("/auth/logout")

        assert response.status_code == 200
        assert client.get("/auth/user").json() is None
        services.auth.session_repo.delete_by_id.assert_not_awaited()

    def test_production_logout_deletes_session(self, mock_db, user, football_api):
        settings = make_settings("production")
        services = Services(mock_db, settings, user, football_api)
        client = build_client(services, settings, base_url="https://testserver")
        login(client)
        (session_id,) = services.sessions

        response = client.get("/auth/logout")

        assert response.status_code == 200
        services.auth.session_repo.delete_by_id.assert_awaited_once_with(session_id)

    def test_production_logout_survives_store_failure(self, mock_db, user, football_api):
        settings = make_settings("production")
        services = Services(mock_db, settings, user, football_api)
        services.auth.session_repo.delete_by_id.side_effect = PyMongoError("down")
        client = build_client(services, settings, base_url="https://testserver")
        login(client)

        response = client.get("/auth/logout")

        assert response.status_code == 200

    def test_logout_without_session(self, client):
        assert client.get("/auth/logout").status_code == 200


class TestChangePassword:
    body = {"old_password": PASSWORD, "new_password": "new", "confirmed_password": "new"}

    def test_requires_session(self, client):
        response = client.post("/auth/password", json=self.body)

        assert response.status_code == 401

    def test_change_password(self, client, services, user):
        login(client)

        response = client.post("/auth/password", json=self.body)

        assert response.status_code == 200
        user_id, _ = services.auth.user_repo.update_password.await_args.args
        assert user_id == user.id

    def test_camel_case_body(self, client, services):
        login(client)

        response = client.post(
            "/auth/password",
            json={"oldPassword": PASSWORD, "newPassword": "new", "confirmedPassword": "new"},
        )

        assert response.status_code == 200

    @pytest.mark.parametrize("missing", ["old_password", "new_password", "confirmed_password"])
    def test_missing_field(self, client, services, missing):
        login(client)
        body = {**self.body, missing: ""}

        response = client.post("/auth/password", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST_BODY"
        services.auth.user_repo.update_password.assert_not_awaited()

    def test_passwords_dont_match(self, client, services):
        login(client)

        response = client.post(
            "/auth/password", json={**self.body, "confirmed_password": "other"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Passwords don't match."

    def test_wrong_old_password(self, client, services):
        login(client)

        response = client.post("/auth/password", json={**self.body, "old_password": "wrong"})

        assert response.status_code == 401
        services.auth.user_repo.update_password.assert_not_awaited()

    def test_user_gone(self, client, services):
        login(client)
        services.auth.user_repo.get_by_id.side_effect = [services.user, None]

        response = client.post("/auth/password", json=self.body)

        assert response.status_code == 404


# =============================================================================
# Bets & Health
# =============================================================================


class TestBets:
    def test_requires_session(self, client):
        response = client.post(
            "/bets", json={"game": str(ObjectId()), "home_team_score": 1, "away_team_score": 0}
        )

        assert response.status_code == 401

    def test_place_bet(self, client, services, user, game_factory):
        game = game_factory.create(group_id=user.group_id)
        services.bets.game_repo.get_by_id.return_value = game
        login(client)

        response = client.post(
            "/bets",
            json={
                "game": str(game.id),
                "home_team_score": 2,
                "away_team_score": 0,
                "scorer": "306",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["points"] == 0
        assert body["scorer"] == 306

    def test_bet_on_started_game(self, client, services, user, game_factory, past):
        services.bets.game_repo.get_by_id.return_value = game_factory.create(
            group_id=user.group_id, date=past
        )
        login(client)

        response = client.post(
            "/bets", json={"game": str(ObjectId()), "home_team_score": 1, "away_team_score": 1}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BET_NOT_ALLOWED"


class TestHealth:
    def test_health(self, services):
        settings = make_settings()
        connection = MagicMock(spec=DatabaseConnection)
        connection.health_check = AsyncMock(return_value={"status": "connected", "healthy": True})
        client = build_client(services, settings)
        client.app.dependency_overrides[get_db_connection] = lambda: connection

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "development"


class TestUnexpectedErrors:
    ORIGIN = "http://localhost:3000"

    def test_unhandled_error_keeps_cors_headers(self, client, services):
        services.auth.user_repo.find_by_username.side_effect = RuntimeError("boom")

        response = client.post(
            "/auth/login",
            json={"username": "jan.novak", "password": PASSWORD},
            headers={"Origin": self.ORIGIN},
        )

        assert response.status_code == 500
        assert response.json() == {
            "message": "Internal server error.",
            "code": "INTERNAL_SERVER_ERROR",
        }
        assert response.headers["access-control-allow-origin"] == self.ORIGIN
        assert services.sessions == {}

    def test_unhandled_error_does_not_escape_app(self, services):
        # This client re-raises errors that reach the server error middleware
        client = build_client(services, make_settings())
        services.auth.user_repo.find_by_username.side_effect = RuntimeError("boom")

        response = login(client)

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_SERVER_ERROR"

    def test_football_api_error_is_domain_error(self, client, services, admin_headers, football_api):
        football_api.get_team.side_effect = FootballApiError("Bad gateway", status_code=502)

        response = client.post(
            "/admin/groups",
            headers={**admin_headers, "Origin": self.ORIGIN},
            json=TestAdminGroups.body,
        )

        assert isinstance(FootballApiError("x"), MatchdayError)
        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error."
        assert response.headers["access-control-allow-origin"] == self.ORIGIN
