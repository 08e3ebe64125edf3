"""Ordering bounded context — cart, checkout quote and order placement.

Drives the shopper's cart into a priced multi-vendor quote and then into an
order, with payment requested under a key derived from the placement key.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
