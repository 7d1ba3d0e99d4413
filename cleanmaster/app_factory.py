"""Build the long-lived Store and the services that share it."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cleanmaster.core.config import Settings, get_settings
from cleanmaster.core.logging_config import setup_logging
from cleanmaster.repositories.storage import JSONFileStorage, KeyValueStorage, SQLStorage
from cleanmaster.repositories.store import Store
from cleanmaster.services.customer_service import CustomerService
from cleanmaster.services.order_service import OrderService
from cleanmaster.services.payment_service import PaymentService

logger = logging.getLogger(__name__)


@dataclass
class RecordServices:
    store: Store
    customers: CustomerService
    orders: OrderService
    payments: PaymentService


def build_storage(settings: Settings) -> KeyValueStorage:
    """SQL snapshots when DATABASE_URL is set, the JSON data file otherwise."""
    if settings.database_url:
        logger.info("Using SQL snapshot storage")
        return SQLStorage(settings.database_url)
    logger.info("Using JSON data file %s", settings.data_file)
    return JSONFileStorage(settings.data_file)


def create_store(settings: Optional[Settings] = None, storage: Optional[KeyValueStorage] = None) -> Store:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file or None)
    return Store(storage if storage is not None else build_storage(settings))


def create_services(settings: Optional[Settings] = None, storage: Optional[KeyValueStorage] = None) -> RecordServices:
    """Factory used by the presentation layer at startup."""
    settings = settings or get_settings()
    store = create_store(settings, storage)
    return RecordServices(
        store=store,
        customers=CustomerService(store, settings),
        orders=OrderService(store, settings),
        payments=PaymentService(store),
    )
