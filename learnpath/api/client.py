"""
HTTP client for the learnpath backend.

Wraps httpx with:
- Bearer token injection from LocalStorage on every request
- Forced logout on any 401 response
- A single ApiError type for HTTP and transport failures
"""

import logging
from typing import Any, Callable, Optional

import httpx

from learnpath.config import DEFAULT_TIMEOUT
from learnpath.storage import TOKEN_KEY, USER_KEY, LocalStorage

from .resources import AuthAPI, ChatAPI, LessonsAPI, QuizAPI, TopicsAPI

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when a backend call fails (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnauthorizedError(ApiError):
    """Raised on 401, after the stored credentials have been cleared."""

    pass


class BearerTokenAuth(httpx.Auth):
    """Read the token at send time so a login mid-session is picked up."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def auth_flow(self, request: httpx.Request):
        token = self.storage.get_item(TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if isinstance(body.get(key), str):
                return body[key]
    return f"Request failed with status {response.status_code}"


class ApiClient:
    """
    Async client for the REST API.

    A fresh httpx.AsyncClient is opened per request so the client can be
    driven from separate event loops (one ``asyncio.run`` per Streamlit
    interaction).
    """

    def __init__(
        self,
        base_url: str,
        storage: LocalStorage,
        timeout: float = DEFAULT_TIMEOUT,
        on_unauthorized: Optional[Callable[[], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            storage: LocalStorage holding the auth token
            timeout: Per-request timeout in seconds
            on_unauthorized: Called after credentials are cleared on a 401
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized
        self.transport = transport

        self.auth = AuthAPI(self)
        self.topics = TopicsAPI(self)
        self.lessons = LessonsAPI(self)
        self.quizzes = QuizAPI(self)
        self.chat = ChatAPI(self)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            auth=BearerTokenAuth(self.storage),
            headers={"Content-Type": "application/json"},
            transport=self.transport,
        )

    def _handle_unauthorized(self):
        """Token expired or invalid: drop credentials and notify the app."""
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
        if self.on_unauthorized:
            self.on_unauthorized()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None when empty).

        Raises:
            UnauthorizedError: On 401
            ApiError: On any other failure
        """
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the server: {e}") from e

        if response.status_code == 401:
            logger.warning(f"{method} {path} returned 401, logging out")
            self._handle_unauthorized()
            raise UnauthorizedError(_error_message(response), status_code=401)

        if response.is_error:
            message = _error_message(response)
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
