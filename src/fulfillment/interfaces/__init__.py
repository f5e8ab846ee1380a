"""
Fulfillment Interfaces Layer
============================

Interface adapters (controllers) for the fulfillment module.

Contains:
- Controllers: FastAPI route handlers

This is the outermost layer - handles HTTP requests/responses and
delegates to application services.
"""

from fulfillment.interfaces.controllers import fulfillment_router

__all__ = ["fulfillment_router"]
