"""Storefront bounded context — catalogue, stock ledger and order lifecycle.

Products and variants are plain aggregates, orders are event-sourced, and
per-variant stock counts live in a SQL-backed ledger outside the domain
repositories so that reservations can be made with one conditional update.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
