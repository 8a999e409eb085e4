# 📄 File: sprout/modules/contact/infrastructure/external/mailjet_client.py
#
# 🧭 Purpose (Layman Explanation):
# The mail carrier for the contact form: hands finished emails to Mailjet for delivery.
#
# 🧪 Purpose (Technical Summary):
# Mailjet Send API v3.1 client on top of the shared aiohttp APIClient, using HTTP basic
# auth with the API key pair. Mailjet reports per-message status inside a 200 response,
# so the caller inspects the returned "Messages" list.
#
# 🔗 Dependencies:
# - aiohttp.BasicAuth
# - sprout.shared.infrastructure.external_apis.api_client
#
# 🔄 Connected Modules / Calls From:
# - ContactService
# - Tests override get_mailjet_client with a fake

from typing import Any, AsyncGenerator, Dict, List

from aiohttp import BasicAuth
from fastapi import Depends

from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.infrastructure.external_apis.api_client import APIClient


class MailjetClient(APIClient):
    """Mailjet transactional email client."""

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str = "https://api.mailjet.com",
        timeout: int = 15,
    ):
        super().__init__(
            base_url=base_url,
            api_name="mailjet",
            auth=BasicAuth(api_key, secret_key),
            timeout=timeout,
        )

    async def send_messages(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self.post("/v3.1/send", {"Messages": messages})


async def get_mailjet_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[MailjetClient, None]:
    client = MailjetClient(
        api_key=settings.MAILJET_API_KEY or "",
        secret_key=settings.MAILJET_SECRET_KEY or "",
        base_url=settings.MAILJET_API_URL,
    )
    try:
        yield client
    finally:
        await client.close()
