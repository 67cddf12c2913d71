from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

PUSH_ENDPOINT = "https://api.line.me/v2/bot/message/push"
BOT_INFO_ENDPOINT = "https://api.line.me/v2/bot/info"


@dataclass(frozen=True)
class LineConfig:
    access_token: str
    group_id: str
    timeout: int = 20


@dataclass(slots=True)
class DispatchResult:
    success: bool
    error: str | None = None

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}


@dataclass(slots=True)
class BotInfo:
    display_name: str
    user_id: str


class LineDispatcher:
    def __init__(self, config: LineConfig, session: requests.Session | None = None) -> None:
        if not config.access_token:
            raise RuntimeError("LINE access token is missing; run `plnotify configure` first.")
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.access_token}",
        }

    def push(self, text: str) -> DispatchResult:
        if not self.config.group_id:
            raise RuntimeError("LINE group id is missing; run `plnotify configure` first.")
        payload = {
            "to": self.config.group_id,
            "messages": [{"type": "text", "text": text}],
        }
        try:
            response = self.session.post(
                PUSH_ENDPOINT,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.error("LINE push failed: %s", exc)
            return DispatchResult(success=False, error=str(exc))

        if response.status_code == 200:
            logger.info("LINE push succeeded")
            return DispatchResult(success=True)

        logger.error("LINE push failed: %s %s", response.status_code, response.text)
        return DispatchResult(success=False, error=f"エラーコード: {response.status_code}")

    def bot_info(self) -> BotInfo:
        response = self.session.get(
            BOT_INFO_ENDPOINT,
            headers={"Authorization": f"Bearer {self.config.access_token}"},
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        body = response.json()
        return BotInfo(
            display_name=body.get("displayName", ""),
            user_id=body.get("userId", ""),
        )
