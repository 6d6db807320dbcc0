"""
HTTP transport shared by the Monzo clients.
"""

import logging
from typing import Any

import requests

from .config import MonzoConfig
from .errors import MonzoAPIError, MonzoConnectionError, MonzoError

logger = logging.getLogger(__name__)


class Transport:
    """
    Issues requests against the Monzo API.

    - One requests.Session per transport, no automatic retries
    - Authorization header supplied per request, never stored on the session
    - Bodies sent form-encoded (``data``) or as JSON (``json_data``)
    - Non-2xx responses raised as MonzoAPIError
    """

    def __init__(self, config: MonzoConfig | None = None, session: requests.Session | None = None):
        self.config = config or MonzoConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout = self.config.timeout

        # A caller-supplied session is used as is, its headers untouched
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        endpoint: str,
        authorization: str | None = None,
        params: dict | None = None,
        data: dict | None = None,
        json_data: dict | None = None,
        unwrap: str | None = None,
        require: tuple[str, ...] = (),
    ) -> Any:
        """
        Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Path below the base URL, e.g. "/accounts"
            authorization: Value for the Authorization header
            params: Query string parameters; None values are dropped
            data: Form-encoded body
            json_data: JSON body
            unwrap: Top-level key to return instead of the whole body
            require: Top-level keys a successful body must carry

        Raises:
            MonzoConnectionError: Connection failure or timeout
            MonzoAPIError: Non-2xx response, undecodable body or missing field
        """
        url = f"{self.base_url}{endpoint}"
        headers = {"Accept": "application/json"}
        if authorization:
            headers["Authorization"] = authorization
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("API Request: %s %s", method, url)

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                json=json_data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            logger.error("Connection error to %s: %s", url, e)
            raise MonzoConnectionError(f"Failed to connect to Monzo at {self.base_url}: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error("Timeout for %s: %s", url, e)
            raise MonzoConnectionError(f"Request to Monzo timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Request error for %s: %s", url, e)
            raise MonzoError(f"Request failed: {e}") from e

        logger.debug("Response status: %s", response.status_code)

        if not response.ok:
            raise self._api_error(response)

        if not response.content:
            body: Any = {}
        else:
            try:
                body = response.json()
            except ValueError as e:
                raise MonzoAPIError(
                    status_code=response.status_code,
                    message=f"Response is not valid JSON: {e}",
                    response_body=response.text,
                ) from e

        missing = [key for key in require if not isinstance(body, dict) or not body.get(key)]
        if missing:
            raise MonzoAPIError(
                status_code=response.status_code,
                message=f"Response has no '{missing[0]}' field",
                response_body=response.text,
            )

        if unwrap is not None:
            if not isinstance(body, dict) or unwrap not in body:
                raise MonzoAPIError(
                    status_code=response.status_code,
                    message=f"Response has no '{unwrap}' field",
                    response_body=response.text,
                )
            return body[unwrap]
        return body

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _api_error(response: requests.Response) -> MonzoAPIError:
        code = None
        message = response.reason or ""
        try:
            error_json = response.json()
            if isinstance(error_json, dict):
                code = error_json.get("code")
                message = error_json.get("message") or message
        except ValueError:
            pass

        logger.error("API Error %s: %s", response.status_code, message)
        logger.debug("Full response body: %s", response.text)

        return MonzoAPIError(
            status_code=response.status_code,
            message=message,
            response_body=response.text,
            code=code,
        )
