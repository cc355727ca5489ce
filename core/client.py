# =============================================================================
# core/client.py  —  Bento REST Client
# =============================================================================
#
# WHAT THIS FILE DOES:
#   A thin async wrapper over the Bento v1 REST API.  One method per remote
#   operation a tool needs; each method makes one HTTP request (upsert is
#   the only method that makes two: import, then read back).
#
# WHAT IT DOES NOT DO:
#   No retries, no caching, no pooling across calls.  Every request opens
#   its own httpx.AsyncClient, so a BentoClient is cheap to build per tool
#   call and holds nothing between calls.
#
# AUTH:
#   HTTP Basic with publishable_key:secret_key, plus site_uuid as a query
#   parameter on every request.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from core.config import DEFAULT_API_BASE_URL, BentoCredentials

logger = logging.getLogger(__name__)

USER_AGENT = "bento-mcp-python"


class BentoAPIError(RuntimeError):
    """A non-2xx response from the Bento API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None so they are not sent at all."""
    return {k: v for k, v in payload.items() if v is not None}


def _error_message(response: httpx.Response) -> str:
    if response.status_code == 401:
        return "Not authorized: check BENTO_PUBLISHABLE_KEY and BENTO_SECRET_KEY"
    if response.status_code == 429:
        return "Rate limited by the Bento API"
    body = (response.text or "").strip()[:500]
    return f"Bento API {response.status_code}: {body or response.reason_phrase}"


class BentoClient:
    def __init__(
        self,
        credentials: BentoCredentials,
        base_url: str = DEFAULT_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        query = {"site_uuid": self.credentials.site_uuid}
        query.update(_compact(params or {}))

        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.credentials.publishable_key, self.credentials.secret_key),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=self._transport,
        ) as http:
            logger.debug("%s %s", method, path)
            response = await http.request(method, path, params=query, json=json)

        if response.status_code >= 400:
            raise BentoAPIError(response.status_code, _error_message(response))
        if not response.content:
            return None
        return response.json()

    async def _get(self, path: str, **params: Any) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        return await self._request("POST", path, json=body)

    @staticmethod
    def _data(body: Any) -> Any:
        if isinstance(body, dict):
            return body.get("data")
        return body

    @staticmethod
    def _results(body: Any) -> int:
        if isinstance(body, dict):
            return int(body.get("results") or 0)
        return 0

    # -------------------------------------------------------------------------
    # Subscribers
    # -------------------------------------------------------------------------
    async def get_subscriber(
        self, email: Optional[str] = None, uuid: Optional[str] = None
    ) -> Any:
        body = await self._get("/fetch/subscribers", email=email, uuid=uuid)
        return self._data(body)

    async def create_subscriber(self, email: str) -> Any:
        body = await self._post("/fetch/subscribers", {"subscriber": {"email": email}})
        return self._data(body)

    async def import_subscribers(self, subscribers: list[dict[str, Any]]) -> int:
        body = await self._post("/batch/subscribers", {"subscribers": subscribers})
        return self._results(body)

    async def upsert_subscriber(
        self,
        email: str,
        fields: Optional[dict[str, Any]] = None,
        tags: Optional[str] = None,
        remove_tags: Optional[str] = None,
    ) -> Any:
        record = {"email": email, **(fields or {})}
        record.update(_compact({"tags": tags, "remove_tags": remove_tags}))
        await self.import_subscribers([record])
        return await self.get_subscriber(email=email)

    async def remove_tag(self, email: str, tag_name: str) -> Any:
        command = {"command": "remove_tag", "email": email, "query": tag_name}
        body = await self._post("/fetch/commands", {"command": [command]})
        return self._data(body)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------
    async def track_events(self, events: list[dict[str, Any]]) -> int:
        body = await self._post("/batch/events", {"events": [_compact(e) for e in events]})
        return self._results(body)

    async def _track_one(self, event: dict[str, Any]) -> bool:
        return await self.track_events([event]) == 1

    async def track(
        self,
        email: str,
        type: str,
        fields: Optional[dict[str, Any]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> bool:
        return await self._track_one(
            {"email": email, "type": type, "fields": fields, "details": details}
        )

    async def add_subscriber(
        self, email: str, fields: Optional[dict[str, Any]] = None
    ) -> bool:
        return await self.track(email, "$subscribe", fields=fields)

    async def remove_subscriber(self, email: str) -> bool:
        return await self.track(email, "$unsubscribe")

    async def tag_subscriber(self, email: str, tag_name: str) -> bool:
        return await self.track(email, "$tag", details={"tag": tag_name})

    async def update_fields(self, email: str, fields: dict[str, Any]) -> bool:
        return await self.track(email, "$update_details", fields=fields)

    async def track_purchase(self, email: str, purchase_details: dict[str, Any]) -> bool:
        return await self.track(email, "$purchase", details=purchase_details)

    # -------------------------------------------------------------------------
    # Tags & fields
    # -------------------------------------------------------------------------
    async def get_tags(self) -> Any:
        return self._data(await self._get("/fetch/tags"))

    async def create_tag(self, name: str) -> Any:
        return self._data(await self._post("/fetch/tags", {"tag": {"name": name}}))

    async def get_fields(self) -> Any:
        return self._data(await self._get("/fetch/fields"))

    async def create_field(self, key: str) -> Any:
        return self._data(await self._post("/fetch/fields", {"field": {"key": key}}))

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    async def get_site_stats(self) -> Any:
        return await self._get("/stats/site")

    async def get_segment_stats(self, segment_id: str) -> Any:
        return await self._get("/stats/segment", segment_id=segment_id)

    async def get_report_stats(self, report_id: str) -> Any:
        return await self._get("/stats/report", report_id=report_id)

    # -------------------------------------------------------------------------
    # Emails, broadcasts, sequences, workflows, templates
    # -------------------------------------------------------------------------
    async def send_transactional_emails(self, emails: list[dict[str, Any]]) -> int:
        body = await self._post("/batch/emails", {"emails": [_compact(e) for e in emails]})
        return self._results(body)

    async def get_broadcasts(self) -> Any:
        return self._data(await self._get("/fetch/broadcasts"))

    async def create_broadcasts(self, broadcasts: list[dict[str, Any]]) -> Any:
        body = await self._post(
            "/batch/broadcasts", {"broadcasts": [_compact(b) for b in broadcasts]}
        )
        return self._data(body)

    async def get_sequences(self) -> Any:
        return self._data(await self._get("/fetch/sequences"))

    async def get_workflows(self) -> Any:
        return self._data(await self._get("/fetch/workflows"))

    async def get_email_template(self, template_id: int) -> Any:
        return self._data(await self._get(f"/fetch/emails/templates/{template_id}"))

    async def update_email_template(
        self,
        template_id: int,
        subject: Optional[str] = None,
        html: Optional[str] = None,
    ) -> Any:
        body = await self._request(
            "PATCH",
            f"/fetch/emails/templates/{template_id}",
            json={"email_template": _compact({"subject": subject, "html": html})},
        )
        return self._data(body)

    # -------------------------------------------------------------------------
    # Experimental
    # -------------------------------------------------------------------------
    async def validate_email(
        self,
        email: str,
        name: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        body = await self._post(
            "/experimental/validation",
            _compact({"email": email, "name": name, "ip": ip, "user_agent": user_agent}),
        )
        return bool(isinstance(body, dict) and body.get("valid"))

    async def guess_gender(self, name: str) -> Any:
        return await self._post("/experimental/gender", {"name": name})

    async def geolocate_ip(self, ip: str) -> Any:
        return await self._get("/experimental/geolocation", ip=ip)

    async def get_blacklist_status(
        self, domain: Optional[str] = None, ip: Optional[str] = None
    ) -> Any:
        return await self._get("/experimental/blacklist.json", domain=domain, ip=ip)

    async def moderate_content(self, content: str) -> Any:
        return await self._post("/experimental/moderation", {"content": content})

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------
    async def get_form_responses(self, form_id: str) -> Any:
        return self._data(await self._get("/fetch/responses", id=form_id))
