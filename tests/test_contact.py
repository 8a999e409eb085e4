"""
Tests for the public contact form.
"""

import pytest

from sprout.modules.contact.domain.models.contact import ContactRequest
from sprout.modules.contact.domain.services.contact_service import ContactService
from sprout.shared.core.exceptions import ExternalAPIError
from sprout.shared.core.rate_limiter import limiter

FORM = {
    "name": "Ada Fern",
    "email": "ada@example.com",
    "message": "Do you ship variegated Monsteras to Canada?",
}


class TestBuildMessage:
    def test_html_part_is_escaped(self) -> None:
        contact = ContactRequest(
            name="<b>Ada</b>",
            email="ada@example.com",
            message="First line\n<script>alert(1)</script>",
        )

        message = ContactService.build_message(contact, "team@sprout.test")

        assert "<script>" not in message["HTMLPart"]
        assert "&lt;script&gt;" in message["HTMLPart"]
        assert "First line<br>" in message["HTMLPart"]
        assert "<script>alert(1)</script>" in message["TextPart"]

    def test_reply_goes_to_sender(self) -> None:
        message = ContactService.build_message(ContactRequest(**FORM), "team@sprout.test")

        assert message["To"] == [{"Email": "team@sprout.test", "Name": "Sprout Admin"}]
        assert message["ReplyTo"] == {"Email": "ada@example.com", "Name": "Ada Fern"}
        assert message["Subject"] == "New Contact Form Message from Ada Fern"


class TestContactApi:
    async def test_message_is_sent(self, client, mailjet_client) -> None:
        response = await client.post("/api/v1/contact", json=FORM)

        assert response.status_code == 200
        assert response.json() == {"message": "Message sent successfully!"}
        assert mailjet_client.sent[0]["From"]["Email"] == "team@sprout.test"

    @pytest.mark.parametrize(
        "field, value",
        [("name", "A"), ("email", "not-an-email"), ("message", "too short")],
    )
    async def test_invalid_form_is_422(self, client, mailjet_client, field, value) -> None:
        response = await client.post("/api/v1/contact", json={**FORM, field: value})

        assert response.status_code == 422
        assert mailjet_client.sent == []

    async def test_unconfigured_mailjet_is_500(self, client, override_settings) -> None:
        override_settings(MAILJET_API_KEY=None)

        response = await client.post("/api/v1/contact", json=FORM)

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SERVICE_NOT_CONFIGURED"

    async def test_provider_failure_is_502(self, client, mailjet_client) -> None:
        mailjet_client.error = ExternalAPIError("Mailjet is down", service="mailjet", status_code=503)

        response = await client.post("/api/v1/contact", json=FORM)

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Failed to send message."

    async def test_rejected_message_is_502(self, client, mailjet_client) -> None:
        mailjet_client.response = {"Messages": [{"Status": "error"}]}

        response = await client.post("/api/v1/contact", json=FORM)

        assert response.status_code == 502

    async def test_rate_limited(self, client) -> None:
        limiter.enabled = True
        try:
            responses = [await client.post("/api/v1/contact", json=FORM) for _ in range(4)]
        finally:
            limiter.reset()
            limiter.enabled = False

        assert [r.status_code for r in responses] == [200, 200, 200, 429]
        error = responses[-1].json()["error"]
        assert error["code"] == "RATE_LIMIT_EXCEEDED"
        assert error["message"].startswith("Rate limit exceeded")
        assert error["request_id"] == responses[-1].headers["X-Request-ID"]
        assert "timestamp" in error
