"""
Общие фикстуры для тестов клиента.

Предоставляет:
- Фейковый сервис идентификации на FastAPI (in-memory пользователи, роли, токены)
- API клиент, подключенный к сервису через httpx.ASGITransport
- Хранилище токена в памяти
"""

from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import Body, Depends, FastAPI, File, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from nauth_client import APIClient, ClientConfig, MemoryStorage, TokenStore


API_URL = "http://nauth.test"
MAX_IMAGE_BYTES = 1024

TEST_EMAIL = "user@test.com"
TEST_PASSWORD = "Secret123!"
TEST_TOKEN = "abc"


# ============================================================================
# FAKE IDENTITY SERVICE
# ============================================================================

def create_fake_service() -> FastAPI:
    """
    Фейковый сервис идентификации.

    ``app.state.requests`` хранит (method, path, headers) каждого запроса.
    """
    app = FastAPI()
    app.state.requests = []
    app.state.users = {
        1: {
            "userId": 1,
            "email": TEST_EMAIL,
            "name": "Test User",
            "isAdmin": True,
            "status": 1,
            "idDocument": "52998224725",
            "roles": [{"roleId": 1, "slug": "admin", "name": "Admin"}],
            "phones": [{"phone": "11987654321"}],
            "addresses": [],
        }
    }
    app.state.passwords = {TEST_EMAIL: TEST_PASSWORD}
    app.state.tokens = {TEST_TOKEN: 1}
    app.state.roles = {
        1: {"roleId": 1, "slug": "admin", "name": "Admin"},
        2: {"roleId": 2, "slug": "user", "name": "User"},
    }
    app.state.recovery_hashes = {"valid-hash": TEST_EMAIL}

    @app.middleware("http")
    async def record_requests(request: Request, call_next):
        app.state.requests.append(
            {
                "method": request.method,
                "path": request.url.path,
                "headers": dict(request.headers),
            }
        )
        return await call_next(request)

    def current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Not authenticated")
        user_id = app.state.tokens.get(authorization[len("Bearer "):])
        if user_id is None:
            raise HTTPException(status_code=401, detail="Token expired")
        return app.state.users[user_id]

    def issue_token(user_id: int) -> str:
        token = f"token-{user_id}-{len(app.state.tokens)}"
        app.state.tokens[token] = user_id
        return token

    @app.post("/auth/login")
    async def login(payload: Dict[str, Any] = Body(...)):
        email = payload.get("email")
        if app.state.passwords.get(email) != payload.get("password"):
            return JSONResponse(status_code=401, content={"message": "Invalid email or password"})
        user = next(u for u in app.state.users.values() if u["email"] == email)
        token = TEST_TOKEN if email == TEST_EMAIL else issue_token(user["userId"])
        return {"token": token, "user": user}

    @app.post("/auth/register", status_code=201)
    async def register(payload: Dict[str, Any] = Body(...)):
        email = payload.get("email")
        if email in app.state.passwords:
            raise HTTPException(status_code=409, detail="Email already registered")
        user_id = max(app.state.users) + 1
        user = {"userId": user_id, "email": email, "name": payload.get("name", ""), "status": 1}
        app.state.users[user_id] = user
        app.state.passwords[email] = payload.get("password")
        # Ответ в транспортной обертке
        return {"success": True, "data": {"token": issue_token(user_id), "user": user}}

    @app.get("/auth/me")
    async def me(user: Dict[str, Any] = Depends(current_user)):
        return user

    @app.post("/auth/recovery", status_code=204)
    async def recovery(payload: Dict[str, Any] = Body(...)):
        return None

    @app.post("/auth/reset-password", status_code=204)
    async def reset_password(payload: Dict[str, Any] = Body(...)):
        email = app.state.recovery_hashes.pop(payload.get("recoveryHash"), None)
        if email is None:
            raise HTTPException(status_code=400, detail="Recovery link expired")
        app.state.passwords[email] = payload.get("newPassword")
        return None

    @app.post("/users/change-password", status_code=204)
    async def change_password(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        if app.state.passwords[user["email"]] != payload.get("currentPassword"):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        app.state.passwords[user["email"]] = payload.get("newPassword")
        return None

    @app.post("/users/image")
    async def upload_image(
        file: UploadFile = File(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        content = await file.read()
        if len(content) > MAX_IMAGE_BYTES:
            return JSONResponse(status_code=413, content={"message": "Image exceeds 1 KB"})
        return {"imageUrl": f"https://cdn.nauth.test/{user['userId']}/{file.filename}"}

    @app.post("/users/search")
    async def search_users(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        query = payload.get("query", "").lower()
        page, page_size = payload.get("page", 1), payload.get("pageSize", 10)
        found: List[Dict[str, Any]] = [
            u for u in app.state.users.values()
            if query in u["email"].lower() or query in u.get("name", "").lower()
        ]
        start = (page - 1) * page_size
        return {"items": found[start:start + page_size], "total": len(found)}

    @app.get("/users/{user_id}")
    async def get_user(user_id: int, user: Dict[str, Any] = Depends(current_user)):
        if user_id not in app.state.users:
            raise HTTPException(status_code=404, detail="User not found")
        return app.state.users[user_id]

    @app.post("/users", status_code=201)
    async def create_user(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        if payload.get("email") in app.state.passwords:
            raise HTTPException(status_code=409, detail="Email already registered")
        user_id = max(app.state.users) + 1
        created = {**payload, "userId": user_id}
        created.pop("password", None)
        app.state.users[user_id] = created
        app.state.passwords[payload["email"]] = payload.get("password")
        return created

    @app.put("/users")
    async def update_user(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        user_id = payload.get("userId") or user["userId"]
        updated = {**app.state.users[user_id], **payload, "userId": user_id}
        app.state.users[user_id] = updated
        return updated

    @app.get("/roles")
    async def list_roles(user: Dict[str, Any] = Depends(current_user)):
        return {"data": list(app.state.roles.values())}

    @app.get("/roles/{role_id}")
    async def get_role(role_id: int, user: Dict[str, Any] = Depends(current_user)):
        if role_id not in app.state.roles:
            raise HTTPException(status_code=404, detail="Role not found")
        return app.state.roles[role_id]

    @app.post("/roles", status_code=201)
    async def create_role(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        role_id = max(app.state.roles) + 1
        role = {**payload, "roleId": role_id}
        app.state.roles[role_id] = role
        return role

    @app.put("/roles")
    async def update_role(
        payload: Dict[str, Any] = Body(...),
        user: Dict[str, Any] = Depends(current_user),
    ):
        role_id = payload["roleId"]
        app.state.roles[role_id] = {**app.state.roles[role_id], **payload}
        return app.state.roles[role_id]

    @app.delete("/roles/{role_id}", status_code=204)
    async def delete_role(role_id: int, user: Dict[str, Any] = Depends(current_user)):
        app.state.roles.pop(role_id, None)
        return None

    return app


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def config() -> ClientConfig:
    """Конфигурация без отпечатка и с хранилищем в памяти."""
    return ClientConfig(api_url=API_URL, storage_type="session", enable_fingerprinting=False)


@pytest.fixture
def service() -> FastAPI:
    return create_fake_service()


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore(MemoryStorage())


@pytest.fixture
async def client(config, service, token_store):
    """API клиент, подключенный к фейковому сервису."""
    api = APIClient(
        config,
        token_store=token_store,
        transport=httpx.ASGITransport(app=service),
    )
    yield api
    await api.aclose()


@pytest.fixture
async def logged_in_client(client):
    """Клиент с выполненным входом тестового пользователя."""
    await client.login(TEST_EMAIL, TEST_PASSWORD)
    return client
