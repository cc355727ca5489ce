# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL Bento tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers every Bento tool with a FastMCP server.  Each tool function is
#   a typed, one-line forwarder to the ToolDispatcher in core/dispatcher.py.
#
# HOW IT WORKS (the flow):
#   1. The assistant calls a tool by name via MCP (e.g. "bento_get_subscriber")
#   2. FastMCP routes the call to the function below
#   3. The function hands its arguments to the dispatcher
#   4. The dispatcher validates, calls Bento once, and returns text
#
# WHERE THINGS LIVE:
#   - Tool names and descriptions: core/catalog.py (looked up by function name)
#   - Field constraints and field descriptions: core/schemas.py
#   - This file: the typed signatures FastMCP turns into the input schema
#
# RUNNING THIS SERVER:
#   python main.py            (stdio transport)
# =============================================================================

from typing import Annotated, Any, Callable, Optional, Union

from fastmcp import FastMCP
from pydantic import BaseModel, Field

from core import schemas
from core.catalog import TOOLS
from core.dispatcher import ToolDispatcher


def _arg(model: type[BaseModel], name: str) -> Any:
    """Reuse a parameter model's field description and constraints in a tool signature.

    Only the schema is republished; the dispatcher still does the validating,
    so a bad email or content type comes back as text.
    """
    prop = model.model_json_schema()["properties"][name]
    return Field(
        description=model.model_fields[name].description,
        json_schema_extra=schemas.schema_constraints(prop) or None,
    )


def build_server(dispatcher: ToolDispatcher, name: str = "bento") -> FastMCP:
    """Create the FastMCP server with every Bento tool bound to ``dispatcher``."""
    mcp = FastMCP(name)

    def bento_tool(fn: Callable) -> Callable:
        spec = TOOLS[fn.__name__]
        mcp.tool(name=spec.name, description=spec.description)(fn)
        return fn

    S = schemas

    # =========================================================================
    # Subscribers
    # =========================================================================
    @bento_tool
    async def bento_get_subscriber(
        email: Annotated[Optional[str], _arg(S.GetSubscriberParams, "email")] = None,
        uuid: Annotated[Optional[str], _arg(S.GetSubscriberParams, "uuid")] = None,
    ) -> str:
        return await dispatcher.invoke("bento_get_subscriber", {"email": email, "uuid": uuid})

    @bento_tool
    async def bento_create_subscriber(
        email: Annotated[str, _arg(S.EmailParams, "email")],
    ) -> str:
        return await dispatcher.invoke("bento_create_subscriber", {"email": email})

    @bento_tool
    async def bento_upsert_subscriber(
        email: Annotated[str, _arg(S.UpsertSubscriberParams, "email")],
        fields: Annotated[Optional[dict[str, Any]], _arg(S.UpsertSubscriberParams, "fields")] = None,
        tags: Annotated[Optional[str], _arg(S.UpsertSubscriberParams, "tags")] = None,
        remove_tags: Annotated[Optional[str], _arg(S.UpsertSubscriberParams, "remove_tags")] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_upsert_subscriber",
            {"email": email, "fields": fields, "tags": tags, "remove_tags": remove_tags},
        )

    @bento_tool
    async def bento_add_subscriber(
        email: Annotated[str, _arg(S.AddSubscriberParams, "email")],
        fields: Annotated[Optional[dict[str, Any]], _arg(S.AddSubscriberParams, "fields")] = None,
    ) -> str:
        return await dispatcher.invoke("bento_add_subscriber", {"email": email, "fields": fields})

    @bento_tool
    async def bento_remove_subscriber(
        email: Annotated[str, _arg(S.EmailParams, "email")],
    ) -> str:
        return await dispatcher.invoke("bento_remove_subscriber", {"email": email})

    # =========================================================================
    # Tags
    # =========================================================================
    @bento_tool
    async def bento_tag_subscriber(
        email: Annotated[str, _arg(S.SubscriberTagParams, "email")],
        tag_name: Annotated[str, _arg(S.SubscriberTagParams, "tag_name")],
    ) -> str:
        return await dispatcher.invoke(
            "bento_tag_subscriber", {"email": email, "tag_name": tag_name}
        )

    @bento_tool
    async def bento_remove_tag(
        email: Annotated[str, _arg(S.SubscriberTagParams, "email")],
        tag_name: Annotated[str, _arg(S.SubscriberTagParams, "tag_name")],
    ) -> str:
        return await dispatcher.invoke("bento_remove_tag", {"email": email, "tag_name": tag_name})

    @bento_tool
    async def bento_list_tags() -> str:
        return await dispatcher.invoke("bento_list_tags")

    @bento_tool
    async def bento_create_tag(
        name: Annotated[str, _arg(S.CreateTagParams, "name")],
    ) -> str:
        return await dispatcher.invoke("bento_create_tag", {"name": name})

    # =========================================================================
    # Events
    # =========================================================================
    @bento_tool
    async def bento_track_event(
        email: Annotated[str, _arg(S.TrackEventParams, "email")],
        type: Annotated[str, _arg(S.TrackEventParams, "type")],
        fields: Annotated[Optional[dict[str, Any]], _arg(S.TrackEventParams, "fields")] = None,
        details: Annotated[Optional[dict[str, Any]], _arg(S.TrackEventParams, "details")] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_track_event",
            {"email": email, "type": type, "fields": fields, "details": details},
        )

    @bento_tool
    async def bento_track_purchase(
        email: Annotated[str, _arg(S.TrackPurchaseParams, "email")],
        order_id: Annotated[str, _arg(S.TrackPurchaseParams, "order_id")],
        amount: Annotated[Union[int, float], _arg(S.TrackPurchaseParams, "amount")],
        currency: Annotated[str, _arg(S.TrackPurchaseParams, "currency")] = "USD",
        cart: Annotated[Optional[dict[str, Any]], _arg(S.TrackPurchaseParams, "cart")] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_track_purchase",
            {
                "email": email,
                "order_id": order_id,
                "amount": amount,
                "currency": currency,
                "cart": cart,
            },
        )

    # =========================================================================
    # Fields
    # =========================================================================
    @bento_tool
    async def bento_update_fields(
        email: Annotated[str, _arg(S.UpdateFieldsParams, "email")],
        fields: Annotated[dict[str, Any], _arg(S.UpdateFieldsParams, "fields")],
    ) -> str:
        return await dispatcher.invoke("bento_update_fields", {"email": email, "fields": fields})

    @bento_tool
    async def bento_list_fields() -> str:
        return await dispatcher.invoke("bento_list_fields")

    @bento_tool
    async def bento_create_field(
        key: Annotated[str, _arg(S.CreateFieldParams, "key")],
    ) -> str:
        return await dispatcher.invoke("bento_create_field", {"key": key})

    # =========================================================================
    # Stats
    # =========================================================================
    @bento_tool
    async def bento_get_site_stats() -> str:
        return await dispatcher.invoke("bento_get_site_stats")

    @bento_tool
    async def bento_get_segment_stats(
        segment_id: Annotated[str, _arg(S.SegmentStatsParams, "segment_id")],
    ) -> str:
        return await dispatcher.invoke("bento_get_segment_stats", {"segment_id": segment_id})

    @bento_tool
    async def bento_get_report_stats(
        report_id: Annotated[str, _arg(S.ReportStatsParams, "report_id")],
    ) -> str:
        return await dispatcher.invoke("bento_get_report_stats", {"report_id": report_id})

    # =========================================================================
    # Emails & broadcasts
    # =========================================================================
    @bento_tool
    async def bento_send_email(
        to: Annotated[str, _arg(S.SendEmailParams, "to")],
        from_email: Annotated[str, _arg(S.SendEmailParams, "from_email")],
        subject: Annotated[str, _arg(S.SendEmailParams, "subject")],
        html_body: Annotated[str, _arg(S.SendEmailParams, "html_body")],
        transactional: Annotated[bool, _arg(S.SendEmailParams, "transactional")] = True,
        personalizations: Annotated[
            Optional[dict[str, str]], _arg(S.SendEmailParams, "personalizations")
        ] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_send_email",
            {
                "to": to,
                "from_email": from_email,
                "subject": subject,
                "html_body": html_body,
                "transactional": transactional,
                "personalizations": personalizations,
            },
        )

    @bento_tool
    async def bento_list_broadcasts() -> str:
        return await dispatcher.invoke("bento_list_broadcasts")

    @bento_tool
    async def bento_create_broadcast(
        name: Annotated[str, _arg(S.CreateBroadcastParams, "name")],
        subject: Annotated[str, _arg(S.CreateBroadcastParams, "subject")],
        content: Annotated[str, _arg(S.CreateBroadcastParams, "content")],
        from_name: Annotated[str, _arg(S.CreateBroadcastParams, "from_name")],
        from_email: Annotated[str, _arg(S.CreateBroadcastParams, "from_email")],
        type: Annotated[str, _arg(S.CreateBroadcastParams, "type")] = "html",
        inclusive_tags: Annotated[Optional[str], _arg(S.CreateBroadcastParams, "inclusive_tags")] = None,
        exclusive_tags: Annotated[Optional[str], _arg(S.CreateBroadcastParams, "exclusive_tags")] = None,
        segment_id: Annotated[Optional[str], _arg(S.CreateBroadcastParams, "segment_id")] = None,
        batch_size_per_hour: Annotated[
            int, _arg(S.CreateBroadcastParams, "batch_size_per_hour")
        ] = S.DEFAULT_BROADCAST_BATCH_SIZE_PER_HOUR,
    ) -> str:
        return await dispatcher.invoke(
            "bento_create_broadcast",
            {
                "name": name,
                "subject": subject,
                "content": content,
                "type": type,
                "from_name": from_name,
                "from_email": from_email,
                "inclusive_tags": inclusive_tags,
                "exclusive_tags": exclusive_tags,
                "segment_id": segment_id,
                "batch_size_per_hour": batch_size_per_hour,
            },
        )

    # =========================================================================
    # Sequences, workflows & templates
    # =========================================================================
    @bento_tool
    async def bento_list_sequences() -> str:
        return await dispatcher.invoke("bento_list_sequences")

    @bento_tool
    async def bento_list_workflows() -> str:
        return await dispatcher.invoke("bento_list_workflows")

    @bento_tool
    async def bento_get_email_template(
        id: Annotated[int, _arg(S.TemplateIdParams, "id")],
    ) -> str:
        return await dispatcher.invoke("bento_get_email_template", {"id": id})

    @bento_tool
    async def bento_update_email_template(
        id: Annotated[int, _arg(S.UpdateTemplateParams, "id")],
        subject: Annotated[Optional[str], _arg(S.UpdateTemplateParams, "subject")] = None,
        html: Annotated[Optional[str], _arg(S.UpdateTemplateParams, "html")] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_update_email_template", {"id": id, "subject": subject, "html": html}
        )

    # =========================================================================
    # Batch
    # =========================================================================
    @bento_tool
    async def bento_batch_import_subscribers(
        subscribers: Annotated[list[dict[str, Any]], _arg(S.BatchImportParams, "subscribers")],
    ) -> str:
        return await dispatcher.invoke(
            "bento_batch_import_subscribers", {"subscribers": subscribers}
        )

    # =========================================================================
    # Experimental
    # =========================================================================
    @bento_tool
    async def bento_validate_email(
        email: Annotated[str, _arg(S.ValidateEmailParams, "email")],
        name: Annotated[Optional[str], _arg(S.ValidateEmailParams, "name")] = None,
        ip: Annotated[Optional[str], _arg(S.ValidateEmailParams, "ip")] = None,
        user_agent: Annotated[Optional[str], _arg(S.ValidateEmailParams, "user_agent")] = None,
    ) -> str:
        return await dispatcher.invoke(
            "bento_validate_email",
            {"email": email, "name": name, "ip": ip, "user_agent": user_agent},
        )

    @bento_tool
    async def bento_guess_gender(
        name: Annotated[str, _arg(S.GuessGenderParams, "name")],
    ) -> str:
        return await dispatcher.invoke("bento_guess_gender", {"name": name})

    @bento_tool
    async def bento_geolocate_ip(
        ip: Annotated[str, _arg(S.GeolocateParams, "ip")],
    ) -> str:
        return await dispatcher.invoke("bento_geolocate_ip", {"ip": ip})

    @bento_tool
    async def bento_check_blacklist(
        domain: Annotated[Optional[str], _arg(S.BlacklistParams, "domain")] = None,
        ip: Annotated[Optional[str], _arg(S.BlacklistParams, "ip")] = None,
    ) -> str:
        return await dispatcher.invoke("bento_check_blacklist", {"domain": domain, "ip": ip})

    @bento_tool
    async def bento_moderate_content(
        content: Annotated[str, _arg(S.ModerateContentParams, "content")],
    ) -> str:
        return await dispatcher.invoke("bento_moderate_content", {"content": content})

    # =========================================================================
    # Forms
    # =========================================================================
    @bento_tool
    async def bento_get_form_responses(
        form_id: Annotated[str, _arg(S.FormResponsesParams, "form_id")],
    ) -> str:
        return await dispatcher.invoke("bento_get_form_responses", {"form_id": form_id})

    return mcp
