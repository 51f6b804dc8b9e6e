"""HTTP request layer for the media backend."""

import json
import uuid
from typing import Any, Optional

import httpx

from common.config import Config
from common.logging_config import get_logger
from mediaclient.exceptions import ApiConnectionError, ApiError, PayloadError
from mediaclient.token_store import TokenStore

logger = get_logger(__name__)

JSON_CONTENT_TYPE = 'application/json'
FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


class ApiClient:
    """
    Thin HTTP client for the backend REST API.

    One request per call: no retries and no backoff. Non-success responses
    are turned into ApiError carrying the server's error detail.
    """

    def __init__(self, config: Config, token_store: Optional[TokenStore] = None):
        """
        Initialize API client.

        Args:
            config: Configuration instance
            token_store: Token storage; defaults to one backed by ``config``
        """
        self.config = config
        self.token_store = token_store or TokenStore(config)
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id: Optional[str] = None
        logger.info(f"Initialized ApiClient [base_url={config.get_base_url()}]")

    def _auth_header(self) -> dict:
        """
        Get Authorization header for the stored token.

        Returns:
            Dictionary with the Authorization header, empty when logged out
        """
        token = self.token_store.get_token()
        if not token:
            return {}
        return {'Authorization': f'Bearer {token}'}

    def _build_headers(
        self,
        headers: Optional[dict],
        *,
        multipart: bool,
        form: bool,
    ) -> dict:
        merged: dict = {}
        if not multipart:
            merged['Content-Type'] = FORM_CONTENT_TYPE if form else JSON_CONTENT_TYPE
        if headers:
            merged.update(headers)
        merged.update(self._auth_header())
        self.request_id = str(uuid.uuid4())
        merged['X-Request-ID'] = self.request_id
        return merged

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug(f"Making request: {method} {path} [request_id={self.request_id}]")
        try:
            response = self.session.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout: {method} {path} error={e} [request_id={self.request_id}]")
            raise ApiConnectionError("Request timed out. Server may be overloaded.") from e
        except httpx.TransportError as e:
            logger.error(f"Network error: {method} {path} error={e} [request_id={self.request_id}]")
            raise ApiConnectionError(
                f"Cannot connect to API server at {self.config.get_base_url()}. Is it running?"
            ) from e

        logger.debug(
            f"Response received: {method} {path} status={response.status_code} [request_id={self.request_id}]"
        )
        return response

    def _format_error(self, response: httpx.Response) -> str:
        """
        Extract a human-readable message from an error response.

        Prefers the JSON ``detail`` field, then the JSON body, then the raw
        text, then the status line.
        """
        text = response.text
        try:
            payload = json.loads(text)
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get('detail'):
            detail = payload['detail']
            message = detail if isinstance(detail, str) else json.dumps(detail)
        elif payload is not None:
            message = json.dumps(payload)
        else:
            message = text

        return message or f"{response.status_code} {response.reason_phrase}".strip()

    def _decode(self, response: httpx.Response) -> Any:
        content_type = response.headers.get('content-type', '')
        if JSON_CONTENT_TYPE in content_type:
            try:
                return response.json()
            except ValueError as e:
                raise PayloadError(f"Invalid JSON in response to {response.request.url.path}") from e
        return response.text

    def request(
        self,
        path: str,
        method: str = 'GET',
        *,
        json: Any = None,
        data: Optional[dict] = None,
        files: Optional[dict] = None,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> Any:
        """
        Send one request and decode the response.

        Args:
            path: Path relative to the configured base URL
            method: HTTP method
            json: JSON body
            data: Form fields (url-encoded, or multipart when ``files`` is given)
            files: Multipart file fields
            params: Query parameters
            headers: Extra headers; they override the default content type

        Returns:
            Parsed JSON for JSON responses, otherwise the body text

        Raises:
            ApiError: On a non-success status
            ApiConnectionError: When the server cannot be reached
            PayloadError: When a JSON response cannot be decoded
        """
        request_headers = self._build_headers(
            headers,
            multipart=files is not None,
            form=data is not None and files is None,
        )

        response = self._send(
            method,
            path,
            json=json,
            data=data,
            files=files,
            params=params,
            headers=request_headers,
        )

        if not response.is_success:
            message = self._format_error(response)
            logger.warning(
                f"Request failed: {method} {path} status={response.status_code} [request_id={self.request_id}]"
            )
            raise ApiError(message, response.status_code)

        return self._decode(response)

    def upload(self, path: str, files: dict, data: Optional[dict] = None) -> Any:
        """
        POST a multipart body with only the bearer header attached.

        The error message is the raw response text, not the JSON detail.

        Raises:
            ApiError: On a non-success status
            ApiConnectionError: When the server cannot be reached
        """
        self.request_id = str(uuid.uuid4())
        response = self._send(
            'POST',
            path,
            files=files,
            data=data or None,
            headers=self._auth_header(),
        )

        if not response.is_success:
            logger.warning(f"Upload failed: POST {path} status={response.status_code}")
            raise ApiError(
                response.text or f"{response.status_code} {response.reason_phrase}".strip(),
                response.status_code,
            )

        return self._decode(response)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
