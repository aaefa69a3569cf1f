"""This module contains the routers for the FastAPI application."""

from server.routers.documents import router as documents_router

__all__ = ["documents_router"]
