# 📄 File: sprout/modules/shipping/domain/services/shipping_service.py
# 🧭 Purpose (Layman Explanation):
# Answers "what paperwork do I need to ship this plant there?" and buys postage labels
# for sellers, marking the order as shipped once the label is ready.
# 🧪 Purpose (Technical Summary):
# Compliance lookup with country-code normalisation, Shippo rate selection (preferred
# carrier/service, else cheapest) and label purchase wired into OrderService.
# 🔗 Dependencies:
# ShippoClient, OrderService, settings
# 🔄 Connected Modules / Calls From:
# shipping API

from typing import Any, Dict, List, Optional

from fastapi import Depends

from sprout.modules.commerce.domain.models.order import OrderStatus
from sprout.modules.commerce.domain.services.order_service import OrderService
from sprout.modules.shipping.domain.models.compliance import (
    COUNTRY_CODES,
    COUNTRY_LIST,
    ComplianceRule,
    Country,
    get_compliance_requirements,
)
from sprout.modules.shipping.domain.models.label import (
    Parcel,
    ShippingAddress,
    ShippingLabel,
    ShippingRate,
)
from sprout.modules.shipping.infrastructure.external.shippo_client import (
    ShippoClient,
    get_shippo_client,
)
from sprout.shared.config.settings import Settings, get_settings
from sprout.shared.core.exceptions import (
    BadRequestError,
    BusinessRuleViolationError,
    ExternalAPIError,
    NotFoundError,
    ServiceNotConfiguredError,
    ShippingProhibitedError,
    ShippingProviderError,
    ValidationError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class ShippingService:

    def __init__(
        self,
        order_service: OrderService = Depends(),
        shippo_client: ShippoClient = Depends(get_shippo_client),
        settings: Settings = Depends(get_settings),
    ):
        self.order_service = order_service
        self.shippo_client = shippo_client
        self.settings = settings

    # =========================================================================
    # COMPLIANCE
    # =========================================================================

    @staticmethod
    def get_countries() -> List[Country]:
        return list(COUNTRY_LIST)

    def get_compliance_requirements(self, from_country: str, to_country: str, species: str) -> ComplianceRule:
        """
        Look up the paperwork for a route and species.

        Raises:
            ValidationError: unknown country code
            NotFoundError: no rule covers the route and species
            ShippingProhibitedError: the matching rule forbids the shipment
        """
        origin = self._normalise_country(from_country, "from_country")
        destination = self._normalise_country(to_country, "to_country")

        rule = get_compliance_requirements(origin, destination, species.strip())
        if rule is None:
            raise NotFoundError(
                "No specific compliance rules found",
                resource_type="compliance_rule",
                resource_id=f"{origin}->{destination}:{species}",
            )
        if rule.prohibitions and rule.prohibitions.is_prohibited:
            raise ShippingProhibitedError(rule.prohibitions.reason, species=species)
        return rule

    @staticmethod
    def _normalise_country(code: str, field: str) -> str:
        normalised = (code or "").strip().upper()
        if normalised not in COUNTRY_CODES:
            raise ValidationError(
                f"Unknown country code: {code}",
                field=field,
                value=code,
                constraint=f"one of {sorted(COUNTRY_CODES)}",
            )
        return normalised

    # =========================================================================
    # LABELS
    # =========================================================================

    def select_rate(self, rates: List[Dict[str, Any]]) -> Optional[ShippingRate]:
        """Pick the preferred carrier service if quoted, otherwise the cheapest rate."""
        parsed = [r for r in (ShippingRate.from_shippo(raw) for raw in rates) if r is not None]
        if not parsed:
            return None

        for rate in parsed:
            if (
                rate.provider == self.settings.SHIPPO_PREFERRED_PROVIDER
                and rate.servicelevel_token == self.settings.SHIPPO_PREFERRED_SERVICE
            ):
                return rate
        return min(parsed, key=lambda r: r.amount)

    async def create_shipping_label(
        self,
        seller_id: str,
        order_id: str,
        from_address: ShippingAddress,
        to_address: ShippingAddress,
        parcel: Parcel,
    ) -> ShippingLabel:
        """
        Buy a postage label for an order and mark the order shipped.

        Raises:
            ServiceNotConfiguredError: Shippo has no API key (500)
            NotFoundError, AuthorizationError: the order is not the seller's to ship
            BusinessRuleViolationError: the order is cancelled or already shipped
            BadRequestError: no usable rate, or the label purchase was refused
            ShippingProviderError: Shippo could not be reached
        """
        if not self.settings.shippo_enabled:
            raise ServiceNotConfiguredError(
                "Shippo API key is not configured on the server.", service="shippo", status_code=500
            )

        order = await self.order_service.get_order_for_seller(order_id, seller_id)
        if order.status == OrderStatus.CANCELLED:
            raise BusinessRuleViolationError("Cancelled orders cannot be shipped", rule="order_not_cancelled")
        self.order_service.ensure_not_shipped(order)

        try:
            shipment = await self.shippo_client.create_shipment(
                address_from=from_address.to_shippo(),
                address_to=to_address.to_shippo(),
                parcel=parcel.to_shippo(),
            )
        except ExternalAPIError as e:
            raise ShippingProviderError(
                "Could not create the shipment with the shipping provider.",
                details={"upstream_status": e.upstream_status},
            ) from e

        rates = shipment.get("rates") or []
        if not rates:
            raise BadRequestError("Could not retrieve shipping rates for this shipment.")

        rate = self.select_rate(rates)
        if rate is None:
            raise BadRequestError("Could not find a suitable shipping rate.")

        try:
            transaction = await self.shippo_client.create_transaction(rate.object_id, label_file_type="PDF")
        except ExternalAPIError as e:
            raise ShippingProviderError(
                "Could not purchase the label from the shipping provider.",
                details={"upstream_status": e.upstream_status},
            ) from e

        if transaction.get("status") != "SUCCESS":
            logger.warning(
                f"Label purchase failed for order {order_id}",
                order_id=order_id,
                transaction_status=transaction.get("status"),
            )
            raise BadRequestError(
                "Failed to create shipping label.",
                details={"messages": transaction.get("messages") or []},
            )

        label = ShippingLabel(
            label_url=transaction.get("label_url") or "",
            tracking_number=transaction.get("tracking_number") or "",
        )
        await self.order_service.mark_order_shipped(
            order_id, seller_id, tracking_number=label.tracking_number, label_url=label.label_url
        )

        logger.log_business_event(
            "label_purchased",
            f"Label bought via {rate.provider} for order {order_id}",
            entity_id=order_id,
            entity_type="order",
            extra={"amount": str(rate.amount), "currency": rate.currency},
        )
        return label
