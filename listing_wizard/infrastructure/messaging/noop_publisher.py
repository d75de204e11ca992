"""
Publisher used when EVENTS_ENABLED is off, e.g. a seller portal running without a broker.
"""
import structlog

from listing_wizard.application.interfaces.event_publisher import EventPublisher
from listing_wizard.domain.events.domain_events import DomainEvent
from listing_wizard.infrastructure.messaging.rabbitmq_publisher import routing_key_for

logger = structlog.get_logger(__name__)


class NoOpEventPublisher(EventPublisher):
    async def publish(self, event: DomainEvent) -> None:
        logger.debug(
            "event_dropped",
            routing_key=routing_key_for(event),
            event_id=str(event.event_id),
        )
