"""Client for the dot-deploy service API."""

from typing import Any

import httpx
from pydantic import SecretStr

from dot_deploy import __version__
from dot_deploy.utils.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = "dot-deploy"


class DeployApiResponse:
    """Status code and body of a dot-deploy API call."""

    def __init__(self, status_code: int, text: str, data: dict[str, Any] | None = None):
        self.status_code = status_code
        self.text = text
        self.data = data

    @classmethod
    def from_httpx(cls, resp: httpx.Response) -> "DeployApiResponse":
        """Keep the parsed body only when it is a JSON object."""
        try:
            data = resp.json()
        except ValueError:
            data = None
        return cls(resp.status_code, resp.text, data if isinstance(data, dict) else None)

    def json(self) -> dict[str, Any] | None:
        return self.data


class DeployApiClient:
    """Thin HTTP client for the dot-deploy registration endpoints."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    async def post_json(
        self, url: str, body: dict[str, Any], secret: SecretStr
    ) -> DeployApiResponse:
        """POST ``body`` as JSON, authenticated with the run's bearer secret.

        Non-2xx statuses are returned, not raised; the caller decides what a
        failure is.
        """
        headers = {
            "Authorization": f"Bearer {secret.get_secret_value()}",
            "User-Agent": f"{USER_AGENT}/{__version__}",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.post(url, json=body, headers=headers)

        logger.debug("deploy_api.response", url=url, status_code=resp.status_code)
        return DeployApiResponse.from_httpx(resp)
