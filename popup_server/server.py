"""MCP Server exposing the product popup as tools."""

import asyncio
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.types import Resource, Tool, TextContent
from pydantic import AnyUrl

from .config import PopupSettings
from .errors import PopupError
from .models import SIZE_OPTIONS, PopupView, SubmitOutcome
from .notifications import EventLog
from .orchestrator import CheckoutOrchestrator
from .storefront_client import StorefrontClient

logger = logging.getLogger("popup-mcp-server")

# Initialize server
app = Server("popup-mcp-server")

# Global state
settings: PopupSettings
storefront_client: StorefrontClient
events = EventLog()
popup: Optional[CheckoutOrchestrator] = None

NOT_OPEN = "Error: No product is open. Use popup_open first."

POPUP_TOOLS = {"popup_select_color", "popup_select_size", "popup_submit", "popup_view", "popup_close"}


def new_popup() -> CheckoutOrchestrator:
    """A fresh orchestrator for one popup lifetime."""
    return CheckoutOrchestrator(
        products=storefront_client,
        cart=storefront_client,
        notify=events.notify,
        on_cart_count=events.update_cart_count,
        bundle_rule=settings.bundle_rule(),
    )


def render_view(view: PopupView) -> list[str]:
    lines = [f"{view.title} ({view.handle})", f"Price: {view.price}"]
    if view.description:
        lines.append(f"\n{view.description}\n")
    lines.append(f"Colors: {', '.join(view.colors) if view.colors else '(none)'}")
    lines.append(f"Sizes: {', '.join(view.sizes)}")
    lines.append(f"Selected: color={view.selected_color or '-'}, size={view.selected_size or '-'}")
    lines.append(f"Ready to add: {'yes' if view.can_submit else 'no'}")
    return lines


def render_outcome(outcome: SubmitOutcome) -> list[str]:
    lines = [f"Result: {outcome.status.value}"]
    if outcome.variant_id is not None:
        lines.append(f"Variant: {outcome.variant_id}")
    if outcome.bundle_triggered:
        lines.append(f"Bundle item added: {'yes' if outcome.bundle_added else 'no'}")
    if outcome.item_count is not None:
        lines.append(f"Cart items: {outcome.item_count}")
    return lines


def respond(lines: list[str]) -> list[TextContent]:
    """Prefix pending notifications to the tool output."""
    notices = [f"[{n.level.value}] {n.message}" for n in events.drain()]
    return [TextContent(type="text", text="\n".join(notices + lines))]


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    resources = [
        Resource(
            uri=AnyUrl("popup://cart"),
            name="Shopping Cart",
            mimeType="application/json",
            description="Current cart item count",
        )
    ]
    if popup is not None and popup.is_open:
        resources.append(
            Resource(
                uri=AnyUrl("popup://current"),
                name="Open Product Popup",
                mimeType="application/json",
                description="Product and selection of the open popup",
            )
        )
    return resources


@app.read_resource()
async def read_resource(uri: AnyUrl) -> str:
    """Read a resource by URI."""
    uri_str = str(uri)

    if uri_str == "popup://cart":
        cart = await storefront_client.fetch_cart()
        return cart.model_dump_json(indent=2)

    elif uri_str == "popup://current":
        if popup is None or not popup.is_open:
            return NOT_OPEN
        return popup.view().model_dump_json(indent=2)

    raise ValueError(f"Unknown resource: {uri}")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="popup_open",
            description="Open the product popup for a product handle and show its colors and sizes",
            inputSchema={
                "type": "object",
                "properties": {
                    "handle": {
                        "type": "string",
                        "description": "Product handle, e.g. 'classic-tee'",
                    },
                },
                "required": ["handle"],
            },
        ),
        Tool(
            name="popup_select_color",
            description="Select a color in the open popup",
            inputSchema={
                "type": "object",
                "properties": {
                    "color": {
                        "type": "string",
                        "description": "Color label as listed by popup_open",
                    },
                },
                "required": ["color"],
            },
        ),
        Tool(
            name="popup_select_size",
            description="Select a size in the open popup",
            inputSchema={
                "type": "object",
                "properties": {
                    "size": {
                        "type": "string",
                        "enum": SIZE_OPTIONS,
                        "description": "Size",
                    },
                },
                "required": ["size"],
            },
        ),
        Tool(
            name="popup_submit",
            description="Add the selected color/size to the cart",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="popup_view",
            description="Show the open popup and the current selection",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="popup_close",
            description="Close the popup and clear the selection",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="popup_get_cart",
            description="Get the current cart item count",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    global popup
    arguments = arguments or {}

    try:
        if name == "popup_open":
            candidate = new_popup()
            try:
                view = await candidate.open(arguments["handle"])
            except PopupError:
                popup = None
                return respond([])
            popup = candidate
            return respond(render_view(view))

        elif name == "popup_get_cart":
            cart = await storefront_client.fetch_cart()
            events.update_cart_count(cart.item_count)
            return respond([f"Cart items: {cart.item_count}"])

        if name not in POPUP_TOOLS:
            return respond([f"Unknown tool: {name}"])

        if popup is None:
            return respond([NOT_OPEN])

        if name == "popup_select_color":
            popup.select_color(arguments.get("color"))
            return respond(render_view(popup.view()))

        elif name == "popup_select_size":
            popup.select_size(arguments.get("size"))
            return respond(render_view(popup.view()))

        elif name == "popup_submit":
            outcome = await popup.submit()
            return respond(render_outcome(outcome))

        elif name == "popup_view":
            return respond(render_view(popup.view()))

        else:
            popup.close()
            popup = None
            return respond(["Popup closed"])

    except PopupError as e:
        return respond([f"Error: {e.user_message}"])
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        return respond([f"Error: {str(e)}"])


async def main() -> None:
    """Main entry point for the MCP server."""
    global settings, storefront_client

    settings = PopupSettings.from_env()
    logging.basicConfig(level=settings.log_level.upper())

    storefront_client = StorefrontClient.from_settings(settings)
    logger.info(f"Using storefront {settings.store_url}")
    logger.info(f"Bundle rule: {settings.bundle_color}/{settings.bundle_size} -> {settings.bundle_handle}")

    logger.info("Starting Popup MCP Server...")

    # Import and run the server
    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        await storefront_client.close()


if __name__ == "__main__":
    asyncio.run(main())
