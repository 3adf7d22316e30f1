#!/usr/bin/env python3
"""
api_client.py
-------------
HTTP client for the Folio API.

ApiClient wraps httpx.Client: it sends the bearer token when one is
set, drops None query parameters, and unwraps the response envelope.
Every failure (network error, non-2xx status, `success: false` body)
surfaces as ApiClientError.

Usage:
    client = ApiClient("http://127.0.0.1:8000")
    client.login("admin@leechy.dev", "secret")
    posts = client.get("/api/blogs", params={"status": "published"})
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional, Tuple

# --- Third-party imports ---
import httpx

DEFAULT_TIMEOUT = 10.0


class ApiClientError(Exception):
    """
    Failed API call.

    Attributes:
        status: HTTP status code (0 for network failures)
        message: Error message from the server or transport
        code: Machine-readable error code, when the server sent one
    """

    def __init__(self, status: int, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"ApiClientError(status={self.status}, message={self.message!r})"


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}


class ApiClient:
    """
    JSON API client.

    Attributes:
        base_url: Server root, e.g. http://127.0.0.1:8000
        token: Bearer token sent with every request, when set
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Args:
            base_url: Server root URL
            token: Initial bearer token
            transport: httpx transport (tests pass a MockTransport)
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._http = httpx.Client(base_url=self.base_url, transport=transport, timeout=timeout)

    # ---- Lifecycle ----
    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ---- Requests ----
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request and return the decoded envelope.

        Raises:
            ApiClientError: Transport failure, error status or a body
                with success false
        """
        try:
            response = self._http.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
                files=files,
                data=data,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise ApiClientError(0, f"Network error: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if response.is_error:
                raise ApiClientError(response.status_code, response.reason_phrase)
            raise ApiClientError(response.status_code, "Unexpected response body")

        if response.is_error or body.get("success") is False:
            raise ApiClientError(
                response.status_code,
                body.get("error") or response.reason_phrase,
                body.get("code"),
            )
        return body

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET and return the envelope's data."""
        return self.request("GET", path, params=params).get("data")

    def get_page(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[Any], Dict[str, Any]]:
        """GET a list endpoint; returns (items, pagination)."""
        body = self.request("GET", path, params=params)
        return body.get("data") or [], body.get("pagination") or {}

    def post(self, path: str, payload: Any = None) -> Any:
        return self.request("POST", path, json=payload).get("data")

    def put(self, path: str, payload: Any = None) -> Any:
        return self.request("PUT", path, json=payload).get("data")

    def patch(self, path: str, payload: Any = None) -> Any:
        return self.request("PATCH", path, json=payload).get("data")

    def delete(self, path: str, payload: Any = None) -> Any:
        return self.request("DELETE", path, json=payload).get("data")

    # ---- Endpoints with their own shapes ----
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Log in and keep the returned token for later requests.

        Returns:
            {"user": {...}, "token": "...", "expires_in": seconds}
        """
        body = self.request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = body.get("token")
        return {key: body.get(key) for key in ("user", "token", "expires_in")}

    def me(self) -> Dict[str, Any]:
        return self.get("/api/auth/me")

    def search(self, query: str, limit: int = 10) -> Dict[str, Any]:
        return self.get("/api/search", params={"q": query, "limit": limit})

    def upload(
        self, files: List[Tuple[str, bytes, str]], alt_text: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Upload files to the media library.

        Args:
            files: (filename, content, content_type) tuples
            alt_text: Alt text applied to every uploaded file

        Returns:
            One result per file; failed files carry an 'error' key
        """
        multipart = [("files", (name, content, content_type)) for name, content, content_type in files]
        form = {"alt_text": alt_text} if alt_text else None
        return self.request("POST", "/api/media", files=multipart, data=form).get("data") or []
