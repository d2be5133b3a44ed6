"""Business event emission entry points.

One ``emit_<variant>`` method per business event variant. Each builds the
typed event, logs it and publishes it on the event bus, where the
BusinessEventProcessor picks it up. Every call returns a correlation id of
the form ``<event_type>.<epoch-ms>``.

Usage:
    >>> emitter = get_business_event_emitter()
    >>> correlation_id = await emitter.emit_order_placed(
    ...     user_id="user-123",
    ...     order_id="456",
    ...     amount=Decimal("100.00"),
    ...     currency="USD",
    ...     metadata={"email": "jane@example.com"},
    ... )
    >>> correlation_id
    'order.placed.1718000000000'
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from src.core.identifiers import epoch_ms
from src.domain.events.business_events import (
    AccountLocked,
    AccountUnlocked,
    BusinessEventUnion,
    LoginAttempted,
    LoginLocation,
    OrderDelivered,
    OrderItem,
    OrderPlaced,
    OrderShipped,
    PasswordResetCompleted,
    PasswordResetRequested,
    PaymentProcessed,
    ShippingAddress,
    SubscriptionCancelled,
    SubscriptionCreated,
    SubscriptionRenewed,
    UserRegistered,
    UserVerified,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol


class BusinessEventEmitter:
    """Typed producer API for business events.

    Attributes:
        _event_bus: Bus the events are published on.
        _logger: Structured logger.
    """

    def __init__(self, event_bus: EventBusProtocol, logger: LoggerProtocol) -> None:
        self._event_bus = event_bus
        self._logger = logger

    async def emit(self, event: BusinessEventUnion) -> str:
        """Publish an already-built business event.

        Account locks and failed logins are logged at warning level.

        Returns:
            Correlation id ``<event_type>.<epoch-ms>``.
        """
        correlation_id = f"{event.event_type}.{epoch_ms()}"
        context = {
            "event_type": event.event_type,
            "event_id": event.event_id,
            "user_id": event.user_id,
            "correlation_id": correlation_id,
        }

        match event:
            case AccountLocked():
                self._logger.warning(
                    "business_event_emitted", reason=event.reason, **context
                )
            case LoginAttempted(success=False):
                self._logger.warning(
                    "business_event_emitted", ip_address=event.ip_address, **context
                )
            case _:
                self._logger.info("business_event_emitted", **context)

        await self._event_bus.publish(event)
        return correlation_id

    # =========================================================================
    # Users
    # =========================================================================

    async def emit_user_registered(
        self,
        *,
        user_id: str,
        email: str,
        name: str,
        phone: str | None = None,
        source: str = "api",
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            UserRegistered(
                user_id=user_id,
                email=email,
                name=name,
                phone=phone,
                source=source,
                metadata=metadata or {},
            )
        )

    async def emit_user_verified(
        self,
        *,
        user_id: str,
        verification_type: Literal["email", "phone"],
        verified_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            UserVerified(
                user_id=user_id,
                verification_type=verification_type,
                verified_at=verified_at,
                metadata=metadata or {},
            )
        )

    # =========================================================================
    # Orders and payments
    # =========================================================================

    async def emit_order_placed(
        self,
        *,
        user_id: str,
        order_id: str,
        amount: Decimal,
        currency: str,
        items: Sequence[OrderItem] = (),
        shipping_address: ShippingAddress | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            OrderPlaced(
                user_id=user_id,
                order_id=order_id,
                amount=amount,
                currency=currency,
                items=tuple(items),
                shipping_address=shipping_address,
                metadata=metadata or {},
            )
        )

    async def emit_order_shipped(
        self,
        *,
        user_id: str,
        order_id: str,
        tracking_number: str,
        carrier: str,
        estimated_delivery: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            OrderShipped(
                user_id=user_id,
                order_id=order_id,
                tracking_number=tracking_number,
                carrier=carrier,
                estimated_delivery=estimated_delivery,
                metadata=metadata or {},
            )
        )

    async def emit_order_delivered(
        self,
        *,
        user_id: str,
        order_id: str,
        delivered_at: datetime,
        signature: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            OrderDelivered(
                user_id=user_id,
                order_id=order_id,
                delivered_at=delivered_at,
                signature=signature,
                metadata=metadata or {},
            )
        )

    async def emit_payment_processed(
        self,
        *,
        user_id: str,
        order_id: str,
        amount: Decimal,
        currency: str,
        payment_method: str,
        status: Literal["success", "failed", "pending"],
        transaction_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            PaymentProcessed(
                user_id=user_id,
                order_id=order_id,
                amount=amount,
                currency=currency,
                payment_method=payment_method,
                status=status,
                transaction_id=transaction_id,
                metadata=metadata or {},
            )
        )

    # =========================================================================
    # Security
    # =========================================================================

    async def emit_password_reset_requested(
        self,
        *,
        user_id: str,
        email: str,
        reset_token: str,
        expires_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            PasswordResetRequested(
                user_id=user_id,
                email=email,
                reset_token=reset_token,
                expires_at=expires_at,
                metadata=metadata or {},
            )
        )

    async def emit_password_reset_completed(
        self,
        *,
        user_id: str,
        email: str,
        reset_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            PasswordResetCompleted(
                user_id=user_id,
                email=email,
                reset_at=reset_at,
                metadata=metadata or {},
            )
        )

    async def emit_account_locked(
        self,
        *,
        user_id: str,
        reason: str,
        locked_at: datetime,
        unlock_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            AccountLocked(
                user_id=user_id,
                reason=reason,
                locked_at=locked_at,
                unlock_at=unlock_at,
                metadata=metadata or {},
            )
        )

    async def emit_account_unlocked(
        self,
        *,
        user_id: str,
        unlocked_at: datetime,
        unlocked_by: str,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            AccountUnlocked(
                user_id=user_id,
                unlocked_at=unlocked_at,
                unlocked_by=unlocked_by,
                metadata=metadata or {},
            )
        )

    async def emit_login_attempt(
        self,
        *,
        user_id: str,
        email: str,
        success: bool,
        ip_address: str,
        user_agent: str,
        location: LoginLocation | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            LoginAttempted(
                user_id=user_id,
                email=email,
                success=success,
                ip_address=ip_address,
                user_agent=user_agent,
                location=location,
                metadata=metadata or {},
            )
        )

    # =========================================================================
    # Subscriptions
    # =========================================================================

    async def emit_subscription_created(
        self,
        *,
        user_id: str,
        subscription_id: str,
        plan_id: str,
        plan_name: str,
        amount: Decimal,
        currency: str,
        interval: Literal["monthly", "yearly"],
        start_date: datetime,
        end_date: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            SubscriptionCreated(
                user_id=user_id,
                subscription_id=subscription_id,
                plan_id=plan_id,
                plan_name=plan_name,
                amount=amount,
                currency=currency,
                interval=interval,
                start_date=start_date,
                end_date=end_date,
                metadata=metadata or {},
            )
        )

    async def emit_subscription_cancelled(
        self,
        *,
        user_id: str,
        subscription_id: str,
        cancelled_at: datetime,
        effective_date: datetime,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            SubscriptionCancelled(
                user_id=user_id,
                subscription_id=subscription_id,
                cancelled_at=cancelled_at,
                effective_date=effective_date,
                reason=reason,
                metadata=metadata or {},
            )
        )

    async def emit_subscription_renewed(
        self,
        *,
        user_id: str,
        subscription_id: str,
        renewed_at: datetime,
        next_billing_date: datetime,
        amount: Decimal,
        currency: str,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        return await self.emit(
            SubscriptionRenewed(
                user_id=user_id,
                subscription_id=subscription_id,
                renewed_at=renewed_at,
                next_billing_date=next_billing_date,
                amount=amount,
                currency=currency,
                metadata=metadata or {},
            )
        )
