# 📄 File: sprout/modules/contact/domain/services/contact_service.py
# 🧭 Purpose (Layman Explanation):
# Turns a visitor's contact form into an email for the Sprout team, with "reply"
# going straight back to the visitor.
# 🧪 Purpose (Technical Summary):
# Builds the Mailjet v3.1 message (text and HTML-escaped parts) and maps provider
# failures to EmailDeliveryError.
# 🔗 Dependencies:
# MailjetClient, settings
# 🔄 Connected Modules / Calls From:
# contact API

import html
from typing import Any, Dict

from fastapi import Depends

from sprout.modules.contact.domain.models.contact import ContactRequest
from sprout.modules.contact.infrastructure.external.mailjet_client import (
    MailjetClient,
    get_mailjet_client,
)
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    EmailDeliveryError,
    ExternalAPIError,
    ServiceNotConfiguredError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Message sent successfully!"


class ContactService:

    def __init__(
        self,
        mailjet_client: MailjetClient = Depends(get_mailjet_client),
        settings: Settings = Depends(get_settings),
    ):
        self.mailjet_client = mailjet_client
        self.settings = settings

    async def send_contact_email(self, contact: ContactRequest) -> str:
        """
        Send the contact form to the team inbox.

        Raises:
            ServiceNotConfiguredError: Mailjet credentials or receiver missing (500)
            EmailDeliveryError: Mailjet failed or rejected the message (502)
        """
        if not self.settings.mailjet_enabled:
            logger.error("Mailjet environment variables are missing")
            raise ServiceNotConfiguredError(
                "Email service is not configured on the server.", service="mailjet", status_code=500
            )

        message = self.build_message(contact, self.settings.CONTACT_FORM_RECEIVER_EMAIL)
        try:
            response = await self.mailjet_client.send_messages([message])
        except ExternalAPIError as e:
            raise EmailDeliveryError(details={"upstream_status": e.upstream_status}) from e

        statuses = [m.get("Status") for m in response.get("Messages", [])]
        if not statuses or any(s != "success" for s in statuses):
            logger.error("Mailjet rejected contact message", statuses=statuses)
            raise EmailDeliveryError(details={"statuses": statuses})

        logger.info("Contact form message sent", sender_domain=contact.email.split("@")[-1])
        return SUCCESS_MESSAGE

    @staticmethod
    def build_message(contact: ContactRequest, receiver_email: str) -> Dict[str, Any]:
        name = html.escape(contact.name)
        email = html.escape(contact.email)
        body = html.escape(contact.message).replace("\n", "<br>")

        return {
            "From": {"Email": receiver_email, "Name": "Sprout Contact Form"},
            "To": [{"Email": receiver_email, "Name": "Sprout Admin"}],
            "ReplyTo": {"Email": contact.email, "Name": contact.name},
            "Subject": f"New Contact Form Message from {contact.name}",
            "TextPart": (
                "You have a new message from your website contact form.\n\n"
                f"Name: {contact.name}\n"
                f"Email: {contact.email}\n\n"
                f"Message:\n{contact.message}\n"
            ),
            "HTMLPart": (
                "<h3>You have a new message from your website contact form.</h3>"
                f"<p><b>Name:</b> {name}</p>"
                f"<p><b>Email:</b> <a href=\"mailto:{email}\">{email}</a></p>"
                "<p><b>Message:</b></p>"
                f"<p>{body}</p>"
            ),
        }
