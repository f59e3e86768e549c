"""Wallet events and the handlers that publish them to the message log."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from digitalwallet.events import Event, EventHandler
from digitalwallet.messaging import Producer

logger = logging.getLogger(__name__)

TRANSACTIONS_TOPIC = "transactions"
BALANCES_TOPIC = "balances"


@dataclass
class TransactionCreated(Event):
    """Announces a transfer that was made."""

    name: str = "TransactionCreated"


@dataclass
class BalanceUpdated(Event):
    """Announces the balances of both accounts after a transfer."""

    name: str = "BalanceUpdated"


def _publish(producer: Producer, event: Event, topic: str, label: str) -> None:
    producer.publish(event, None, topic)
    logger.info("%s: %s", label, event.payload)


class TransactionCreatedHandler(EventHandler):
    """Publishes transaction events to the transactions topic."""

    def __init__(self, producer: Producer) -> None:
        self.producer = producer

    def handle(self, event: Event) -> None:
        """Publish ``event`` as JSON without a key."""
        _publish(self.producer, event, TRANSACTIONS_TOPIC, "TransactionCreatedKafkaHandler")


class BalanceUpdatedHandler(EventHandler):
    """Publishes balance events to the balances topic."""

    def __init__(self, producer: Producer) -> None:
        self.producer = producer

    def handle(self, event: Event) -> None:
        """Publish ``event`` as JSON without a key."""
        _publish(self.producer, event, BALANCES_TOPIC, "UpdateBalanceKafkaHandler")