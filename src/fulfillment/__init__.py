"""
Design Order Fulfillment Module
===============================

Bounded context for the design-order lifecycle and SLA deadline engine.

Responsibilities:
- Interpret the fixed order lifecycle (pending -> ... -> approved)
- Derive the display-only "completed" state
- Calculate target deadlines from package estimates and revision cycles
- Classify open orders as normal, urgent or overdue
- Order the operator work queue by priority

Nothing here writes to storage: every value is recomputed from a snapshot
of orders, packages and SLA configuration.
"""

__version__ = "1.0.0"
