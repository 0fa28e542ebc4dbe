import httpx
import logging
from typing import Any, Optional, Protocol, Tuple
from voucher_admin.config import settings
from voucher_admin.errors import (
    AdminError, ApiError, AuthenticationError, NetworkError, NotFound, ValidationError
)
from voucher_admin.utils.security import bearer_header

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    """Supplies the bearer token of whoever the call is made for"""

    def get_token(self) -> Optional[str]:
        ...


class StaticCredentials:
    """Credential provider for a token already known to the caller"""

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def get_token(self) -> Optional[str]:
        return self.token


def _error_message(response: httpx.Response, default: str) -> Tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return (response.text or default), None

    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            if isinstance(payload.get(key), str) and payload[key]:
                return payload[key], payload
    return default, payload


def error_for_response(response: httpx.Response) -> AdminError:
    """Map a platform error response onto the admin error taxonomy"""
    status_code = response.status_code
    message, payload = _error_message(response, f"Request failed with status {status_code}")

    if status_code == 404:
        return NotFound(message)
    if status_code == 401:
        return AuthenticationError(message)
    if status_code in (400, 422):
        errors = payload.get("errors") if isinstance(payload, dict) else None
        fields = {str(k): str(v) for k, v in errors.items()} if isinstance(errors, dict) else None
        return ValidationError(message, fields=fields)
    return ApiError(message, status_code=status_code, payload=payload)


class ApiClient:
    """
    Generic JSON client for the platform API.

    Every call carries the X-API-Key header (when configured) and the bearer
    token the injected credential provider returns at call time. httpx errors
    never leave this class: they surface as NetworkError or as the taxonomy
    error matching the response status.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.API_KEY
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        headers.update(bearer_header(self.credentials.get_token()))
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded body.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Query parameters (None values are dropped)
            json: JSON body

        Returns:
            Decoded JSON, the raw text for non-JSON bodies, or None when empty
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed without response: {e!r}")
            raise NetworkError("No response received from server. Please check your network connection.")

        if response.is_error:
            error = error_for_response(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {error.message}")
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json if json is not None else {})

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json if json is not None else {})

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
