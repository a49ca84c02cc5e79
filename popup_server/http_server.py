"""HTTP server for the product popup with hot reloading support."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import PopupSettings
from .errors import PopupNotOpen, ProductLoadFailed
from .notifications import EventLog
from .orchestrator import CheckoutOrchestrator
from .storefront_client import StorefrontClient

logger = logging.getLogger("popup-http-server")

# Global state
settings: PopupSettings
storefront_client: StorefrontClient
events = EventLog()
popup: Optional[CheckoutOrchestrator] = None


def build_client(settings: PopupSettings) -> StorefrontClient:
    return StorefrontClient.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global settings, storefront_client, popup

    # Startup
    settings = PopupSettings.from_env()
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("Starting Popup HTTP Server...")
    storefront_client = build_client(settings)
    popup = None
    logger.info(f"Using storefront {settings.store_url}")

    yield

    # Shutdown
    logger.info("Shutting down Popup HTTP Server...")
    await storefront_client.close()


app = FastAPI(
    title="Product Popup Server",
    description="HTTP API for selecting a product variant and adding it to the cart",
    version="0.1.0",
    lifespan=lifespan,
)


# Request/Response Models
class OpenRequest(BaseModel):
    handle: str


class ColorRequest(BaseModel):
    color: Optional[str] = None


class SizeRequest(BaseModel):
    size: Optional[str] = None


def current_popup() -> CheckoutOrchestrator:
    if popup is None or not popup.is_open:
        raise HTTPException(status_code=409, detail=PopupNotOpen.user_message)
    return popup


def notifications() -> list[dict]:
    return [n.model_dump(mode="json") for n in events.drain()]


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Product Popup Server",
        "version": "0.1.0",
        "description": "HTTP API for selecting a product variant and adding it to the cart",
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "popup": {
                "open": "POST /popup/open",
                "view": "GET /popup",
                "color": "POST /popup/color",
                "size": "POST /popup/size",
                "submit": "POST /popup/submit",
                "close": "POST /popup/close",
            },
            "cart": {"get": "GET /cart"},
        },
        "open": popup is not None and popup.is_open,
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "store_url": settings.store_url}


# Popup endpoints
@app.post("/popup/open")
async def open_popup(request: OpenRequest):
    """Open the popup for a product."""
    global popup
    candidate = CheckoutOrchestrator(
        products=storefront_client,
        cart=storefront_client,
        notify=events.notify,
        on_cart_count=events.update_cart_count,
        bundle_rule=settings.bundle_rule(),
    )
    try:
        view = await candidate.open(request.handle)
    except ProductLoadFailed as e:
        popup = None
        events.drain()
        raise HTTPException(status_code=404, detail=e.user_message)

    popup = candidate
    return {"popup": view.model_dump(), "notifications": notifications()}


@app.get("/popup")
async def view_popup():
    """Get the open popup and the current selection."""
    return {"popup": current_popup().view().model_dump(), "notifications": notifications()}


@app.post("/popup/color")
async def select_color(request: ColorRequest):
    """Select a color."""
    current = current_popup()
    current.select_color(request.color)
    return {"popup": current.view().model_dump()}


@app.post("/popup/size")
async def select_size(request: SizeRequest):
    """Select a size."""
    current = current_popup()
    current.select_size(request.size)
    return {"popup": current.view().model_dump()}


@app.post("/popup/submit")
async def submit():
    """Add the current selection to the cart."""
    current = current_popup()
    try:
        outcome = await current.submit()
    except Exception as e:
        logger.error(f"Submit error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": outcome.succeeded,
        "outcome": outcome.model_dump(mode="json"),
        "notifications": notifications(),
    }


@app.post("/popup/close")
async def close_popup():
    """Close the popup."""
    global popup
    if popup is not None:
        popup.close()
    popup = None
    return {"success": True}


# Cart endpoints
@app.get("/cart")
async def get_cart():
    """Get the current cart item count."""
    try:
        cart = await storefront_client.fetch_cart()
        events.update_cart_count(cart.item_count)
        return cart.model_dump()
    except Exception as e:
        logger.error(f"Get cart error: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=str(e))


def run_http_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """
    Run the HTTP server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable hot reloading (default: False)
    """
    import uvicorn

    logger.info(f"Starting server on {host}:{port} (reload={'enabled' if reload else 'disabled'})")

    if reload:
        uvicorn.run(
            "popup_server.http_server:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["popup_server"],
            log_level="info"
        )
    else:
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_http_server(reload=True)
