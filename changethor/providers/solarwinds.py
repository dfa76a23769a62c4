"""SolarWinds Service Desk (Samanage) change ticket system."""

import json
import logging

import httpx

from changethor.models import ChangeRequest, ChangeResponse
from changethor.providers.base import ChangeSystem
from changethor.settings import ChangeThorSettings

logger = logging.getLogger(__name__)

CHANGES_PATH = "/changes.json"


class SolarWindsClient(ChangeSystem):
    def __init__(self, settings: ChangeThorSettings) -> None:
        if not settings.solarwinds_token:
            raise RuntimeError("solarwinds_token is required")
        self._client = httpx.Client(
            base_url=settings.solarwinds_url.rstrip("/"),
            headers={
                "X-Samanage-Authorization": f"Bearer {settings.solarwinds_token.get_secret_value()}",
                "Accept": "application/json",
            },
            timeout=30,
        )

    def close(self) -> None:
        self._client.close()

    def submit(self, request: ChangeRequest) -> ChangeResponse | None:
        payload = request.to_payload()
        logger.debug("Creating change ticket with payload: %s", json.dumps(payload, indent=2))

        try:
            response = self._client.post(CHANGES_PATH, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Error contacting SolarWinds: %s", exc)
            return None

        if not response.is_success:
            logger.warning(
                "SolarWinds rejected change ticket. Status: %s, Response: %s",
                response.status_code,
                response.text,
            )
            return None

        logger.debug("Change ticket creation response: %s", response.text)
        try:
            created = ChangeResponse.model_validate(response.json())
        except ValueError as exc:
            logger.warning("Unreadable SolarWinds response: %s", exc)
            return None

        logger.debug("Created change ticket %s (ID: %s)", created.number, created.id)
        return created
