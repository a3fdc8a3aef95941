"""
Opt-in usage analytics.

Consent and the anonymous session id are kept in the user settings file.
Events are only sent when the user agreed and an analytics endpoint is
configured; a failing endpoint never fails a command.
"""
import json
import logging
import os
import platform
import sys
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

import click
import requests

from .config import SETTINGS_PATH
from .models import CommandOptions
from .sessions import create_session
from .version import __version__

logger = logging.getLogger(__name__)

EVENT_ID_DEPLOY_END = "deploy_end"
EVENT_ID_CONTRACT_DEPLOYED = "contract_deployed"

TRACKING_ENABLED_KEY = "trackingEnabled"
TRACKING_SESSION_ID_KEY = "trackingSessionId"
ANALYTICS_URL_KEY = "analyticsUrl"

CONSENT_PROMPT = (
    "Please help us improve near-deploy by sharing anonymous usage data "
    "(commands run, network, success or failure). Would you like to opt in?"
)


class EventTracker:
    """Sends analytics events for the current user"""

    def __init__(
        self,
        settings_path: str = SETTINGS_PATH,
        analytics_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 5
    ):
        self.settings_path = Path(settings_path)
        self._analytics_url = analytics_url
        self._session = session
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = create_session(retry_count=1)
        return self._session

    def load_settings(self) -> Dict[str, Any]:
        try:
            with open(self.settings_path, "r") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning(f"Ignoring malformed settings file {self.settings_path}")
            return {}

    def save_settings(self, settings: Dict[str, Any]) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, "w") as f:
            json.dump(settings, f, indent=2)

    @property
    def analytics_url(self) -> Optional[str]:
        return (
            self._analytics_url
            or os.environ.get("NEAR_ANALYTICS_URL")
            or self.load_settings().get(ANALYTICS_URL_KEY)
        )

    def should_track(self) -> bool:
        return self.load_settings().get(TRACKING_ENABLED_KEY) is True

    def ask_for_consent_if_needed(self, options: CommandOptions, interactive: Optional[bool] = None) -> bool:
        """
        Ask once whether usage data may be shared and remember the answer.

        Non-interactive sessions are never prompted and are not tracked.

        Returns:
            Whether tracking is enabled
        """
        settings = self.load_settings()
        if TRACKING_ENABLED_KEY in settings:
            return settings[TRACKING_ENABLED_KEY] is True

        if interactive is None:
            interactive = sys.stdin.isatty()
        if not interactive:
            logger.debug("Not asking for analytics consent in a non-interactive session")
            return False

        enabled = click.confirm(CONSENT_PROMPT, default=False)
        settings[TRACKING_ENABLED_KEY] = enabled
        if enabled:
            settings[TRACKING_SESSION_ID_KEY] = uuid.uuid4().hex
        self.save_settings(settings)

        # Record the opt-in itself
        self.track("tracking_consent", {"enabled": enabled}, options)
        return enabled

    def _user_id(self) -> str:
        settings = self.load_settings()
        if TRACKING_SESSION_ID_KEY not in settings:
            settings[TRACKING_SESSION_ID_KEY] = uuid.uuid4().hex
            self.save_settings(settings)
        return settings[TRACKING_SESSION_ID_KEY]

    def _send(self, event: Dict[str, Any]) -> None:
        url = self.analytics_url
        if not url:
            logger.debug(f"No analytics endpoint configured, dropping event {event['event']}")
            return
        try:
            response = self.session.post(url, json=event, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to send analytics event {event['event']}: {e}")

    def track(self, event_id: str, properties: Dict[str, Any], options: CommandOptions) -> None:
        """Send ``event_id`` with ``properties`` and the environment it ran in"""
        if not self.should_track():
            return

        event = {
            "event": event_id,
            "properties": {
                "distinct_id": self._user_id(),
                "near_deploy_version": __version__,
                "os": platform.system(),
                "network_id": options.network_id,
                "node_url": options.node_url,
                "timestamp": int(time.time() * 1000),
                **properties,
            },
        }
        logger.debug(f"Tracking {event_id}: {properties}")
        self._send(event)

    def track_deployed_contract(self) -> None:
        """Bump the per-user count of deployed contracts"""
        if not self.should_track():
            return
        self._send({
            "event": EVENT_ID_CONTRACT_DEPLOYED,
            "properties": {
                "distinct_id": self._user_id(),
                "deployed_contracts": 1,
            },
        })
