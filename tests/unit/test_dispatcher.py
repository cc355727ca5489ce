"""Unit tests for ToolDispatcher: validation, guards, credentials, errors."""

import json

import pytest

from core.catalog import TOOLS
from core.client import BentoAPIError
from core.config import BentoSettings
from core.dispatcher import ToolDispatcher


@pytest.mark.asyncio
async def test_get_subscriber_by_email(dispatcher, mock_client, client_factory):
    """One read keyed by email; the result comes back as pretty JSON."""
    subscriber = {"id": "1", "attributes": {"email": "john@example.com", "tags": ["vip"]}}
    mock_client.get_subscriber.return_value = subscriber

    text = await dispatcher.invoke("bento_get_subscriber", {"email": "john@example.com"})

    mock_client.get_subscriber.assert_awaited_once_with(email="john@example.com")
    client_factory.assert_called_once()
    assert json.loads(text) == subscriber


@pytest.mark.asyncio
async def test_get_subscriber_by_uuid(dispatcher, mock_client):
    mock_client.get_subscriber.return_value = None

    text = await dispatcher.invoke("bento_get_subscriber", {"uuid": "abc-123"})

    mock_client.get_subscriber.assert_awaited_once_with(uuid="abc-123")
    assert text == "No data returned"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tool, message",
    [
        ("bento_get_subscriber", "Either email or uuid is required"),
        ("bento_check_blacklist", "Either domain or ip is required"),
    ],
)
async def test_either_or_guard_rejects_without_calling(dispatcher, client_factory, tool, message):
    text = await dispatcher.invoke(tool, {})

    assert text == message
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_guard_runs_before_credentials(empty_settings, client_factory):
    dispatcher = ToolDispatcher(empty_settings, client_factory=client_factory)

    text = await dispatcher.invoke("bento_check_blacklist", {"domain": None, "ip": None})

    assert text == "Either domain or ip is required"


@pytest.mark.asyncio
async def test_blacklist_prefers_domain(dispatcher, mock_client):
    mock_client.get_blacklist_status.return_value = {"listed": False}

    await dispatcher.invoke("bento_check_blacklist", {"domain": "example.com", "ip": "1.2.3.4"})

    mock_client.get_blacklist_status.assert_awaited_once_with(domain="example.com")


@pytest.mark.asyncio
async def test_batch_import_rejects_1001(dispatcher, client_factory):
    subscribers = [{"email": f"user{i}@example.com"} for i in range(1001)]

    text = await dispatcher.invoke("bento_batch_import_subscribers", {"subscribers": subscribers})

    assert text == "Error: Maximum 1000 subscribers per batch"
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_batch_import_accepts_1000(dispatcher, mock_client):
    subscribers = [{"email": f"user{i}@example.com"} for i in range(1000)]
    mock_client.import_subscribers.return_value = 1000

    text = await dispatcher.invoke("bento_batch_import_subscribers", {"subscribers": subscribers})

    assert text == "Successfully imported 1000 subscribers"
    sent = mock_client.import_subscribers.await_args.args[0]
    assert len(sent) == 1000


@pytest.mark.asyncio
async def test_track_purchase_defaults_currency_and_keeps_amount(dispatcher, mock_client):
    mock_client.track_purchase.return_value = True

    text = await dispatcher.invoke(
        "bento_track_purchase",
        {"email": "buyer@example.com", "order_id": "ord-1", "amount": 9999},
    )

    assert text == "Success"
    email, details = mock_client.track_purchase.await_args.args
    assert email == "buyer@example.com"
    assert details["value"] == {"currency": "USD", "amount": 9999}
    assert isinstance(details["value"]["amount"], int)
    assert details["unique"] == {"key": "ord-1"}
    assert "cart" not in details


@pytest.mark.asyncio
async def test_track_purchase_none_currency_falls_back_to_default(dispatcher, mock_client):
    mock_client.track_purchase.return_value = True

    await dispatcher.invoke(
        "bento_track_purchase",
        {"email": "buyer@example.com", "order_id": "ord-1", "amount": 5, "currency": None},
    )

    _, details = mock_client.track_purchase.await_args.args
    assert details["value"]["currency"] == "USD"


@pytest.mark.asyncio
async def test_update_template_requires_subject_or_html(dispatcher, client_factory):
    text = await dispatcher.invoke("bento_update_email_template", {"id": 42})

    assert text == "Either subject or html (or both) is required to update"
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_update_template_with_subject_only(dispatcher, mock_client):
    mock_client.update_email_template.return_value = {"id": 42, "subject": "Hi"}

    await dispatcher.invoke("bento_update_email_template", {"id": 42, "subject": "Hi"})

    mock_client.update_email_template.assert_awaited_once_with(42, subject="Hi", html=None)


@pytest.mark.asyncio
async def test_missing_credentials_names_all_three(empty_settings, client_factory):
    dispatcher = ToolDispatcher(empty_settings, client_factory=client_factory)

    text = await dispatcher.invoke("bento_list_tags")

    assert text == (
        "Error: Missing required environment variables: "
        "BENTO_PUBLISHABLE_KEY, BENTO_SECRET_KEY, BENTO_SITE_UUID"
    )
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_missing_single_credential(client_factory):
    settings = BentoSettings(publishable_key="pk", secret_key="sk")
    dispatcher = ToolDispatcher(settings, client_factory=client_factory)

    text = await dispatcher.invoke("bento_list_tags")

    assert text == "Error: Missing required environment variables: BENTO_SITE_UUID"


@pytest.mark.asyncio
async def test_invalid_email_is_reported_as_text(dispatcher, client_factory):
    text = await dispatcher.invoke("bento_create_subscriber", {"email": "not-an-email"})

    assert text.startswith("Error: Invalid arguments for bento_create_subscriber: email:")
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_enum_is_reported_as_text(dispatcher, client_factory):
    text = await dispatcher.invoke(
        "bento_create_broadcast",
        {
            "name": "Launch",
            "subject": "Hello",
            "content": "<p>Hi</p>",
            "type": "rtf",
            "from_name": "Team",
            "from_email": "team@example.com",
        },
    )

    assert "Invalid arguments for bento_create_broadcast" in text
    assert "type" in text
    client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_unexpected_argument_is_rejected(dispatcher):
    text = await dispatcher.invoke("bento_list_tags", {"surprise": 1})

    assert text.startswith("Error: Invalid arguments for bento_list_tags: surprise:")


@pytest.mark.asyncio
async def test_unknown_tool(dispatcher):
    assert await dispatcher.invoke("bento_nope") == "Error: Unknown tool: bento_nope"


@pytest.mark.asyncio
async def test_remote_failure_becomes_text(dispatcher, mock_client):
    mock_client.get_tags.side_effect = BentoAPIError(500, "Bento API 500: boom")

    text = await dispatcher.invoke("bento_list_tags")

    assert text == "Error: Bento API 500: boom"


@pytest.mark.asyncio
async def test_exception_without_message_uses_type_name(dispatcher, mock_client):
    mock_client.get_fields.side_effect = TimeoutError()

    assert await dispatcher.invoke("bento_list_fields") == "Error: TimeoutError"


@pytest.mark.asyncio
async def test_send_email_reports_success_from_count(dispatcher, mock_client):
    mock_client.send_transactional_emails.return_value = 1

    text = await dispatcher.invoke(
        "bento_send_email",
        {
            "to": "user@example.com",
            "from_email": "team@example.com",
            "subject": "Receipt",
            "html_body": "<p>Thanks</p>",
        },
    )

    assert text == "Email sent successfully"
    (emails,) = mock_client.send_transactional_emails.await_args.args
    assert emails == [
        {
            "to": "user@example.com",
            "from": "team@example.com",
            "subject": "Receipt",
            "html_body": "<p>Thanks</p>",
            "transactional": True,
            "personalizations": None,
        }
    ]


@pytest.mark.asyncio
async def test_send_email_reports_failure_on_zero(dispatcher, mock_client):
    mock_client.send_transactional_emails.return_value = 0

    text = await dispatcher.invoke(
        "bento_send_email",
        {
            "to": "user@example.com",
            "from_email": "team@example.com",
            "subject": "Receipt",
            "html_body": "<p>Thanks</p>",
        },
    )

    assert text == "Failed to send email"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "valid, message",
    [(True, "Email is valid"), (False, "Email appears to be invalid or risky")],
)
async def test_validate_email_messages(dispatcher, mock_client, valid, message):
    mock_client.validate_email.return_value = valid

    assert await dispatcher.invoke("bento_validate_email", {"email": "a@example.com"}) == message


@pytest.mark.asyncio
async def test_client_built_per_call_with_settings(dispatcher, client_factory, mock_client, test_settings):
    mock_client.get_tags.return_value = [{"name": "vip"}]

    await dispatcher.invoke("bento_list_tags")
    await dispatcher.invoke("bento_list_tags")

    assert client_factory.call_count == 2
    credentials, base_url = client_factory.call_args.args
    assert credentials == test_settings.credentials()
    assert base_url == "https://bento.test/api/v1"


def test_catalog_has_every_tool():
    assert len(TOOLS) == 31
    assert all(name.startswith("bento_") for name in TOOLS)
