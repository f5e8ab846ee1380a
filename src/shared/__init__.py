"""
Shared Kernel Module
====================

Shared infrastructure used across bounded contexts (currently only
design-order fulfillment).

Architecture Pattern: Modular Monolith
- Each module (fulfillment) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add fulfillment business rules to the shared kernel.
"""

__version__ = "1.0.0"
