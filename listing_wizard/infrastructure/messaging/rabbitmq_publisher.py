"""
Publishes listing domain events to RabbitMQ.

pika is blocking, so each publish runs in the default executor on a short-lived
connection. Publish failures are logged and swallowed: the listing write has
already committed by the time events go out.
"""
import asyncio
import json
from functools import partial

import pika
import structlog

from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.config import settings
from listing_wizard.domain.events.domain_events import (
    DomainEvent,
    ListingDeletedEvent,
    ListingDraftCreatedEvent,
    ListingPublishedEvent,
    ListingStatusChangedEvent,
)

logger = structlog.get_logger(__name__)

EXCHANGE_NAME = "listings.events"


def routing_key_for(event: DomainEvent) -> str:
    if isinstance(event, ListingDraftCreatedEvent):
        return "listing.draft_created"
    if isinstance(event, ListingPublishedEvent):
        return "listing.published"
    if isinstance(event, ListingStatusChangedEvent):
        return f"listing.status.{event.to_status.value}"
    if isinstance(event, ListingDeletedEvent):
        return "listing.deleted"
    return "listing.unknown"


def serialise_event(event: DomainEvent) -> str:
    payload: dict = {
        "event_type": routing_key_for(event),
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
    }

    if isinstance(event, ListingDraftCreatedEvent):
        payload.update(
            {
                "listing_id": str(event.listing_id),
                "owner_id": str(event.owner_id),
                "product_identifier": event.product_identifier,
                "category": event.category,
                "subcategory": event.subcategory,
            }
        )
    elif isinstance(event, ListingPublishedEvent):
        payload.update(
            {
                "listing_id": str(event.listing_id),
                "owner_id": str(event.owner_id),
                "product_identifier": event.product_identifier,
                "seller_sku": event.seller_sku,
            }
        )
    elif isinstance(event, ListingStatusChangedEvent):
        payload.update(
            {
                "listing_id": str(event.listing_id),
                "from_status": event.from_status.value if event.from_status else None,
                "to_status": event.to_status.value,
            }
        )
    elif isinstance(event, ListingDeletedEvent):
        payload.update(
            {
                "listing_id": str(event.listing_id),
                "owner_id": str(event.owner_id),
                "product_identifier": event.product_identifier,
                "orphaned_media": event.orphaned_media,
            }
        )

    return json.dumps(payload, default=str)


def _blocking_publish(rabbitmq_url: str, routing_key: str, body: str) -> None:
    connection = pika.BlockingConnection(pika.URLParameters(rabbitmq_url))
    try:
        channel = connection.channel()
        channel.exchange_declare(exchange=EXCHANGE_NAME, exchange_type="topic", durable=True)
        channel.basic_publish(
            exchange=EXCHANGE_NAME,
            routing_key=routing_key,
            body=body.encode(),
            properties=pika.BasicProperties(
                delivery_mode=pika.DeliveryMode.Persistent,
                content_type="application/json",
            ),
        )
    finally:
        connection.close()


class RabbitMQPublisher(EventPublisher):
    """Topic-exchange publisher for listing lifecycle events."""

    def __init__(self, rabbitmq_url: str = settings.rabbitmq_url) -> None:
        self._url = rabbitmq_url

    async def publish(self, event: DomainEvent) -> None:
        routing_key = routing_key_for(event)
        body = serialise_event(event)
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                partial(_blocking_publish, self._url, routing_key, body),
            )
            logger.debug("event_published", routing_key=routing_key, event_id=str(event.event_id))
        except Exception as exc:
            logger.error("failed_to_publish_event", routing_key=routing_key, error=str(exc))
