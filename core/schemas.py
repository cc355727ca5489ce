# =============================================================================
# core/schemas.py  —  Tool Parameter Models
# =============================================================================
#
# One pydantic model per tool.  The dispatcher validates the raw arguments
# against these BEFORE anything else happens, so a bad email or an unknown
# content type comes back as text and never reaches the network.
#
# Models hold shape and field-level constraints only.  Cross-field rules
# ("email or uuid", "subject or html", "at most 1000") are guards in
# core/catalog.py.
# =============================================================================

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Number = Union[int, float]
FieldMap = dict[str, Any]

DEFAULT_BROADCAST_BATCH_SIZE_PER_HOUR = 1000

# JSON-schema keywords a tool signature republishes from its model.
PUBLISHED_CONSTRAINTS = ("format", "enum", "minimum", "maximum")


def schema_constraints(prop: dict[str, Any]) -> dict[str, Any]:
    """Pull the published constraints out of one JSON-schema property.

    Optional fields nest their constraints inside an ``anyOf`` branch.
    """
    found = {k: prop[k] for k in PUBLISHED_CONSTRAINTS if k in prop}
    for branch in prop.get("anyOf", []):
        found.update({k: branch[k] for k in PUBLISHED_CONSTRAINTS if k in branch})
    return found


class ToolParams(BaseModel):
    model_config = ConfigDict(extra="forbid")


class NoParams(ToolParams):
    pass


# --- Subscribers ---------------------------------------------------------------


class GetSubscriberParams(ToolParams):
    email: Optional[EmailStr] = Field(None, description="Subscriber email address")
    uuid: Optional[str] = Field(None, description="Subscriber UUID")


class EmailParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")


class UpsertSubscriberParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    fields: Optional[FieldMap] = Field(
        None,
        description="Custom fields to set on the subscriber (e.g. {'first_name': 'John'})",
    )
    tags: Optional[str] = Field(
        None, description="Comma-separated list of tags to add (e.g. 'lead,newsletter')"
    )
    remove_tags: Optional[str] = Field(
        None, description="Comma-separated list of tags to remove"
    )


class AddSubscriberParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    fields: Optional[FieldMap] = Field(
        None, description="Custom fields to set on the subscriber"
    )


# --- Tags ----------------------------------------------------------------------


class SubscriberTagParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    tag_name: str = Field(description="Name of the tag")


class CreateTagParams(ToolParams):
    name: str = Field(description="Name of the tag to create")


# --- Events --------------------------------------------------------------------


class TrackEventParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    type: str = Field(
        description="Event type/name (e.g. '$pageView', 'signup_completed')"
    )
    fields: Optional[FieldMap] = Field(
        None, description="Custom fields to update on the subscriber"
    )
    details: Optional[FieldMap] = Field(
        None, description="Additional event details (e.g. {'url': '/pricing'})"
    )


class CartItem(BaseModel):
    product_id: Optional[str] = None
    product_sku: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Optional[Number] = None
    product_price: Optional[Number] = None


class Cart(BaseModel):
    abandoned_checkout_url: Optional[str] = None
    items: Optional[list[CartItem]] = None


class TrackPurchaseParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    order_id: str = Field(description="Unique order/transaction ID, used to prevent duplicates")
    amount: Number = Field(description="Purchase amount in cents (e.g. 9999 for $99.99)")
    currency: str = Field("USD", description="Currency code")
    cart: Optional[Cart] = Field(None, description="Optional cart details including items")


# --- Fields --------------------------------------------------------------------


class UpdateFieldsParams(ToolParams):
    email: EmailStr = Field(description="Subscriber email address")
    fields: FieldMap = Field(description="Fields to update (e.g. {'plan': 'pro'})")


class CreateFieldParams(ToolParams):
    key: str = Field(description="Field key in camelCase or snake_case (e.g. 'company_name')")


# --- Stats ---------------------------------------------------------------------


class SegmentStatsParams(ToolParams):
    segment_id: str = Field(description="The segment ID to get stats for")


class ReportStatsParams(ToolParams):
    report_id: str = Field(description="The report/broadcast ID to get stats for")


# --- Emails & broadcasts -------------------------------------------------------


class SendEmailParams(ToolParams):
    to: EmailStr = Field(description="Recipient email address")
    from_email: EmailStr = Field(
        description="Sender email address (must be an authorized Author in Bento)"
    )
    subject: str = Field(description="Subject line (may include {{ personalization }} tags)")
    html_body: str = Field(description="HTML content (may include {{ personalization }} tags)")
    transactional: bool = Field(
        True, description="If true, sends even to unsubscribed users"
    )
    personalizations: Optional[dict[str, str]] = Field(
        None, description="Values for personalization tags (e.g. {'name': 'John'})"
    )


class CreateBroadcastParams(ToolParams):
    name: str = Field(description="Internal name for the broadcast")
    subject: str = Field(description="Subject line (may include {{ personalization }} tags)")
    content: str = Field(description="Email content (HTML, plain text or markdown)")
    type: Literal["plain", "html", "markdown"] = Field("html", description="Content type")
    from_name: str = Field(description="Sender name")
    from_email: EmailStr = Field(description="Sender email (must be an authorized Author)")
    inclusive_tags: Optional[str] = Field(
        None, description="Comma-separated tags; subscribers must have at least one"
    )
    exclusive_tags: Optional[str] = Field(
        None, description="Comma-separated tags; subscribers with these are excluded"
    )
    segment_id: Optional[str] = Field(None, description="Target a specific segment")
    batch_size_per_hour: int = Field(
        DEFAULT_BROADCAST_BATCH_SIZE_PER_HOUR,
        ge=1,
        description="Sending rate limit in emails per hour",
    )


# --- Templates -----------------------------------------------------------------


class TemplateIdParams(ToolParams):
    id: int = Field(description="The numeric email template ID")


class UpdateTemplateParams(ToolParams):
    id: int = Field(description="The email template ID to update")
    subject: Optional[str] = Field(None, description="New subject line")
    html: Optional[str] = Field(
        None,
        description="New HTML body; must include {{ visitor.unsubscribe_url }}",
    )


# --- Batch ---------------------------------------------------------------------


class ImportedSubscriber(BaseModel):
    # Unknown keys are kept and sent to Bento as custom fields.
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    tags: Optional[str] = None


class BatchImportParams(ToolParams):
    subscribers: list[ImportedSubscriber] = Field(
        description="Subscribers to import (max 1000)"
    )


# --- Experimental --------------------------------------------------------------


class ValidateEmailParams(ToolParams):
    email: EmailStr = Field(description="Email address to validate")
    name: Optional[str] = Field(None, description="Name associated with the email")
    ip: Optional[str] = Field(None, description="IP address of the user")
    user_agent: Optional[str] = Field(None, description="User agent string")


class GuessGenderParams(ToolParams):
    name: str = Field(description="First name to analyze")


class GeolocateParams(ToolParams):
    ip: str = Field(description="IP address to geolocate")


class BlacklistParams(ToolParams):
    domain: Optional[str] = Field(None, description="Domain to check")
    ip: Optional[str] = Field(None, description="IP address to check")


class ModerateContentParams(ToolParams):
    content: str = Field(description="Content to moderate")


# --- Forms ---------------------------------------------------------------------


class FormResponsesParams(ToolParams):
    form_id: str = Field(description="The form ID to get responses for")
