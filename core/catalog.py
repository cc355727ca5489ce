# =============================================================================
# core/catalog.py  —  The Tool Catalogue
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares every Bento tool as a ToolSpec: its name, the description the
#   assistant reads, the parameter model, an optional guard, the single
#   BentoClient call it makes, and (rarely) a custom result formatter.
#
#   Nothing here touches the network or the environment.  The dispatcher
#   (core/dispatcher.py) runs a ToolSpec; this file only says WHAT to run.
#
# PER-TOOL VARIATION LIVES HERE AND ONLY HERE:
#   - reshaping arguments into the Bento payload (the _xxx_payload helpers)
#   - business-rule guards that reject a call before credentials are read
#   - literal success/failure messages for tools whose raw result is a count
#     or a flag
# =============================================================================

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from core import schemas
from core.client import BentoClient

MAX_BATCH_IMPORT = 1000

Operation = Callable[[BentoClient, Any], Awaitable[Any]]
Guard = Callable[[Any], Optional[str]]
Formatter = Callable[[Any], str]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params: type[schemas.ToolParams]
    operation: Operation
    guard: Optional[Guard] = None
    formatter: Optional[Formatter] = None


# =============================================================================
# Guards
# =============================================================================
# A guard returns the literal text to send back, or None to let the call
# through.


def _require_email_or_uuid(p: schemas.GetSubscriberParams) -> Optional[str]:
    if not p.email and not p.uuid:
        return "Either email or uuid is required"
    return None


def _require_domain_or_ip(p: schemas.BlacklistParams) -> Optional[str]:
    if not p.domain and not p.ip:
        return "Either domain or ip is required"
    return None


def _require_subject_or_html(p: schemas.UpdateTemplateParams) -> Optional[str]:
    if not p.subject and not p.html:
        return "Either subject or html (or both) is required to update"
    return None


def _cap_batch_size(p: schemas.BatchImportParams) -> Optional[str]:
    if len(p.subscribers) > MAX_BATCH_IMPORT:
        return f"Error: Maximum {MAX_BATCH_IMPORT} subscribers per batch"
    return None


# =============================================================================
# Reshaping
# =============================================================================


def clean_csv(value: Optional[str]) -> Optional[str]:
    """Normalize a comma-separated tag list: trim entries, drop empties."""
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return ",".join(items) or None


def purchase_details(p: schemas.TrackPurchaseParams) -> dict[str, Any]:
    details: dict[str, Any] = {
        "unique": {"key": p.order_id},
        "value": {"currency": p.currency, "amount": p.amount},
    }
    if p.cart is not None:
        details["cart"] = p.cart.model_dump(exclude_none=True)
    return details


def broadcast_payload(p: schemas.CreateBroadcastParams) -> dict[str, Any]:
    return {
        "name": p.name,
        "subject": p.subject,
        "content": p.content,
        "type": p.type,
        "from": {"name": p.from_name, "email": p.from_email},
        "inclusive_tags": clean_csv(p.inclusive_tags),
        "exclusive_tags": clean_csv(p.exclusive_tags),
        "segment_id": p.segment_id,
        "batch_size_per_hour": p.batch_size_per_hour,
    }


def email_payload(p: schemas.SendEmailParams) -> dict[str, Any]:
    return {
        "to": p.to,
        "from": p.from_email,
        "subject": p.subject,
        "html_body": p.html_body,
        "transactional": p.transactional,
        "personalizations": p.personalizations,
    }


def import_payload(p: schemas.BatchImportParams) -> list[dict[str, Any]]:
    return [s.model_dump(exclude_none=True) for s in p.subscribers]


# =============================================================================
# Formatters for tools whose raw result is a count or a flag
# =============================================================================


def _format_sent(count: int) -> str:
    return "Email sent successfully" if count > 0 else "Failed to send email"


def _format_imported(count: int) -> str:
    return f"Successfully imported {count} subscribers"


def _format_validation(is_valid: bool) -> str:
    return "Email is valid" if is_valid else "Email appears to be invalid or risky"


# =============================================================================
# Operations
# =============================================================================


async def _get_subscriber(c: BentoClient, p: schemas.GetSubscriberParams) -> Any:
    if p.email:
        return await c.get_subscriber(email=p.email)
    return await c.get_subscriber(uuid=p.uuid)


async def _upsert_subscriber(c: BentoClient, p: schemas.UpsertSubscriberParams) -> Any:
    return await c.upsert_subscriber(
        p.email,
        fields=p.fields,
        tags=clean_csv(p.tags),
        remove_tags=clean_csv(p.remove_tags),
    )


async def _check_blacklist(c: BentoClient, p: schemas.BlacklistParams) -> Any:
    if p.domain:
        return await c.get_blacklist_status(domain=p.domain)
    return await c.get_blacklist_status(ip=p.ip)


async def _update_template(c: BentoClient, p: schemas.UpdateTemplateParams) -> Any:
    return await c.update_email_template(p.id, subject=p.subject, html=p.html)


_TOOLS = [
    # --- Subscribers ---
    ToolSpec(
        name="bento_get_subscriber",
        description=(
            "Look up a Bento subscriber by email or UUID. Returns subscriber details "
            "including tags, fields, and subscription status."
        ),
        params=schemas.GetSubscriberParams,
        guard=_require_email_or_uuid,
        operation=_get_subscriber,
    ),
    ToolSpec(
        name="bento_create_subscriber",
        description=(
            "Create a new subscriber in Bento. If the subscriber already exists, "
            "returns the existing subscriber."
        ),
        params=schemas.EmailParams,
        operation=lambda c, p: c.create_subscriber(p.email),
    ),
    ToolSpec(
        name="bento_upsert_subscriber",
        description=(
            "Create or update a subscriber with custom fields and tags. This is the "
            "most flexible way to manage subscribers."
        ),
        params=schemas.UpsertSubscriberParams,
        operation=_upsert_subscriber,
    ),
    ToolSpec(
        name="bento_add_subscriber",
        description=(
            "Subscribe a user to your Bento account. This triggers automations and is "
            "processed via the batch API (1-3 min delay)."
        ),
        params=schemas.AddSubscriberParams,
        operation=lambda c, p: c.add_subscriber(p.email, fields=p.fields),
    ),
    ToolSpec(
        name="bento_remove_subscriber",
        description="Unsubscribe a user from your Bento account. This triggers automations.",
        params=schemas.EmailParams,
        operation=lambda c, p: c.remove_subscriber(p.email),
    ),
    # --- Tags ---
    ToolSpec(
        name="bento_tag_subscriber",
        description=(
            "Add a tag to a subscriber. Creates the tag and/or subscriber if they "
            "don't exist. Triggers automations (1-3 min delay)."
        ),
        params=schemas.SubscriberTagParams,
        operation=lambda c, p: c.tag_subscriber(p.email, p.tag_name),
    ),
    ToolSpec(
        name="bento_remove_tag",
        description="Remove a tag from a subscriber.",
        params=schemas.SubscriberTagParams,
        operation=lambda c, p: c.remove_tag(p.email, p.tag_name),
    ),
    ToolSpec(
        name="bento_list_tags",
        description="List all tags in your Bento account.",
        params=schemas.NoParams,
        operation=lambda c, p: c.get_tags(),
    ),
    ToolSpec(
        name="bento_create_tag",
        description="Create a new tag in your Bento account.",
        params=schemas.CreateTagParams,
        operation=lambda c, p: c.create_tag(p.name),
    ),
    # --- Events ---
    ToolSpec(
        name="bento_track_event",
        description=(
            "Track a custom event for a subscriber. Events can trigger automations. "
            "Common event types: $pageView, $signup, $login, or any custom event name."
        ),
        params=schemas.TrackEventParams,
        operation=lambda c, p: c.track(p.email, p.type, fields=p.fields, details=p.details),
    ),
    ToolSpec(
        name="bento_track_purchase",
        description=(
            "Track a purchase event for a subscriber. Used for calculating LTV "
            "(Lifetime Value). Amount is in cents (e.g., 9999 = $99.99)."
        ),
        params=schemas.TrackPurchaseParams,
        operation=lambda c, p: c.track_purchase(p.email, purchase_details(p)),
    ),
    # --- Fields ---
    ToolSpec(
        name="bento_update_fields",
        description="Update custom fields on a subscriber. Triggers automations.",
        params=schemas.UpdateFieldsParams,
        operation=lambda c, p: c.update_fields(p.email, p.fields),
    ),
    ToolSpec(
        name="bento_list_fields",
        description="List all custom fields defined in your Bento account.",
        params=schemas.NoParams,
        operation=lambda c, p: c.get_fields(),
    ),
    ToolSpec(
        name="bento_create_field",
        description=(
            "Create a new custom field in your Bento account. The key is converted to a "
            "display name (e.g., 'firstName' becomes 'First Name')."
        ),
        params=schemas.CreateFieldParams,
        operation=lambda c, p: c.create_field(p.key),
    ),
    # --- Stats ---
    ToolSpec(
        name="bento_get_site_stats",
        description=(
            "Get overall statistics for your Bento site including subscriber counts, "
            "broadcast counts, and engagement rates."
        ),
        params=schemas.NoParams,
        operation=lambda c, p: c.get_site_stats(),
    ),
    ToolSpec(
        name="bento_get_segment_stats",
        description=(
            "Get statistics for a specific segment including subscriber count and "
            "engagement metrics."
        ),
        params=schemas.SegmentStatsParams,
        operation=lambda c, p: c.get_segment_stats(p.segment_id),
    ),
    ToolSpec(
        name="bento_get_report_stats",
        description=(
            "Get statistics for a specific email report/broadcast including opens, "
            "clicks, and unsubscribes."
        ),
        params=schemas.ReportStatsParams,
        operation=lambda c, p: c.get_report_stats(p.report_id),
    ),
    # --- Emails ---
    ToolSpec(
        name="bento_send_email",
        description=(
            "Send a transactional email to a subscriber. The sender address must be "
            "an authorized Author in your Bento account."
        ),
        params=schemas.SendEmailParams,
        operation=lambda c, p: c.send_transactional_emails([email_payload(p)]),
        formatter=_format_sent,
    ),
    # --- Broadcasts ---
    ToolSpec(
        name="bento_list_broadcasts",
        description="List all email broadcasts/campaigns in your Bento account.",
        params=schemas.NoParams,
        operation=lambda c, p: c.get_broadcasts(),
    ),
    ToolSpec(
        name="bento_create_broadcast",
        description=(
            "Create a new email broadcast/campaign. The broadcast is created as a draft."
        ),
        params=schemas.CreateBroadcastParams,
        operation=lambda c, p: c.create_broadcasts([broadcast_payload(p)]),
    ),
    # --- Sequences, workflows & templates ---
    ToolSpec(
        name="bento_list_sequences",
        description=(
            "List all email sequences in your Bento account. Returns each sequence with "
            "its name, ID, and email templates (id, subject, stats). Use this to get "
            "template IDs for reading/editing content."
        ),
        params=schemas.NoParams,
        operation=lambda c, p: c.get_sequences(),
    ),
    ToolSpec(
        name="bento_list_workflows",
        description=(
            "List all workflows (automation flows) in your Bento account. Returns each "
            "workflow with its name, ID, and email templates (id, subject, stats)."
        ),
        params=schemas.NoParams,
        operation=lambda c, p: c.get_workflows(),
    ),
    ToolSpec(
        name="bento_get_email_template",
        description=(
            "Get the full content of an email template by ID: name, subject, HTML "
            "content, and stats."
        ),
        params=schemas.TemplateIdParams,
        operation=lambda c, p: c.get_email_template(p.id),
    ),
    ToolSpec(
        name="bento_update_email_template",
        description=(
            "Update an email template's subject line and/or HTML content. Changes take "
            "effect immediately for future sends."
        ),
        params=schemas.UpdateTemplateParams,
        guard=_require_subject_or_html,
        operation=_update_template,
    ),
    # --- Batch ---
    ToolSpec(
        name="bento_batch_import_subscribers",
        description=(
            f"Import multiple subscribers at once (up to {MAX_BATCH_IMPORT}). Does NOT "
            "trigger automations; use for bulk imports only."
        ),
        params=schemas.BatchImportParams,
        guard=_cap_batch_size,
        operation=lambda c, p: c.import_subscribers(import_payload(p)),
        formatter=_format_imported,
    ),
    # --- Experimental ---
    ToolSpec(
        name="bento_validate_email",
        description=(
            "Validate an email address using Bento's email validation service. Checks "
            "syntax, deliverability, and spam traps."
        ),
        params=schemas.ValidateEmailParams,
        operation=lambda c, p: c.validate_email(
            p.email, name=p.name, ip=p.ip, user_agent=p.user_agent
        ),
        formatter=_format_validation,
    ),
    ToolSpec(
        name="bento_guess_gender",
        description="Guess the gender based on a first name. Returns gender and confidence score.",
        params=schemas.GuessGenderParams,
        operation=lambda c, p: c.guess_gender(p.name),
    ),
    ToolSpec(
        name="bento_geolocate_ip",
        description="Get geographic location data for an IP address.",
        params=schemas.GeolocateParams,
        operation=lambda c, p: c.geolocate_ip(p.ip),
    ),
    ToolSpec(
        name="bento_check_blacklist",
        description="Check if a domain or IP address is on any email blacklists.",
        params=schemas.BlacklistParams,
        guard=_require_domain_or_ip,
        operation=_check_blacklist,
    ),
    ToolSpec(
        name="bento_moderate_content",
        description="Check content for potential issues using AI content moderation.",
        params=schemas.ModerateContentParams,
        operation=lambda c, p: c.moderate_content(p.content),
    ),
    # --- Forms ---
    ToolSpec(
        name="bento_get_form_responses",
        description="Get all responses for a specific Bento form.",
        params=schemas.FormResponsesParams,
        operation=lambda c, p: c.get_form_responses(p.form_id),
    ),
]

TOOLS: dict[str, ToolSpec] = {spec.name: spec for spec in _TOOLS}
