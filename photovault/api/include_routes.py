"""
Helper to load all the api routes.
"""

from fastapi import FastAPI

from photovault.api.routes import (
    check_router,
    albums_router,
    photos_router,
    bin_router,
    favorites_router,
    gallery_router,
    live_router
)


def include_routes(app: FastAPI, prefix: str):
    """Include all API routes in the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    app.include_router(check_router, prefix=prefix)
    app.include_router(albums_router, prefix=prefix)
    app.include_router(photos_router, prefix=prefix)
    app.include_router(bin_router, prefix=prefix)
    app.include_router(favorites_router, prefix=prefix)
    app.include_router(gallery_router, prefix=prefix)
    app.include_router(live_router, prefix=prefix)
