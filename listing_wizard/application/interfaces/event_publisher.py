from abc import ABC, abstractmethod
from collections.abc import Iterable

from listing_wizard.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """
    Port for announcing listing lifecycle events to downstream consumers.

    Events are sent after the listing write they describe. Implementations log
    delivery failures instead of raising, since that write cannot be undone.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> None:
        """Publish in the order the aggregate recorded them."""
        for event in events:
            await self.publish(event)
