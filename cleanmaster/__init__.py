"""Record keeping for a dry-cleaning business: customers, orders and payments."""

from cleanmaster.app_factory import RecordServices, create_services, create_store

__all__ = ["RecordServices", "create_services", "create_store"]
