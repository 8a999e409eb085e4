# 📄 File: sprout/modules/shipping/infrastructure/external/shippo_client.py
#
# 🧭 Purpose (Layman Explanation):
# Talks to Shippo, the shipping company service: asks for postage prices for a parcel
# and buys the printable label.
#
# 🧪 Purpose (Technical Summary):
# Shippo REST client on top of the shared aiohttp APIClient, authenticated with the
# "ShippoToken" header. Shipments and transactions are created synchronously
# (async=false) so rates and label results come back in the same response.
#
# 🔗 Dependencies:
# - sprout.shared.infrastructure.external_apis.api_client (aiohttp + tenacity)
#
# 🔄 Connected Modules / Calls From:
# - ShippingService
# - Tests override get_shippo_client with a fake

from typing import Any, AsyncGenerator, Dict

from fastapi import Depends

from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.infrastructure.external_apis.api_client import APIClient


class ShippoClient(APIClient):
    """Shippo API client."""

    def __init__(self, api_key: str, base_url: str = "https://api.goshippo.com", timeout: int = 30):
        super().__init__(
            base_url=base_url,
            api_name="shippo",
            auth_headers={"Authorization": f"ShippoToken {api_key}"},
            timeout=timeout,
        )

    async def create_shipment(
        self,
        address_from: Dict[str, Any],
        address_to: Dict[str, Any],
        parcel: Dict[str, Any],
    ) -> Dict[str, Any]:
        return await self.post(
            "/shipments/",
            {
                "address_from": address_from,
                "address_to": address_to,
                "parcels": [parcel],
                "async": False,
            },
        )

    async def create_transaction(self, rate_id: str, label_file_type: str = "PDF") -> Dict[str, Any]:
        return await self.post(
            "/transactions/",
            {"rate": rate_id, "label_file_type": label_file_type, "async": False},
        )


async def get_shippo_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[ShippoClient, None]:
    """Per-request Shippo client; the HTTP session is closed when the request ends."""
    client = ShippoClient(
        api_key=settings.SHIPPO_API_KEY or "",
        base_url=settings.SHIPPO_API_URL,
    )
    try:
        yield client
    finally:
        await client.close()
