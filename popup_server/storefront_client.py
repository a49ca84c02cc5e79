"""Storefront AJAX API client (products and cart)."""

import logging
from typing import Any, Optional, Union

import httpx
from .config import PopupSettings
from .session import SessionManager
from .errors import StorefrontError
from .models import CartAddResult, CartSnapshot, Product, Variant

logger = logging.getLogger(__name__)


class StorefrontClient:
    """Client for a storefront's ``/products/*.js`` and ``/cart/*.js`` endpoints."""

    def __init__(
        self,
        store_url: str,
        session_manager: SessionManager,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the storefront client.

        Args:
            store_url: Base URL of the store, e.g. https://shop.example.com
            session_manager: Where the cart cookie is kept between runs
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.store_url = store_url.rstrip("/")
        self.session_manager = session_manager
        self.client = httpx.AsyncClient(
            base_url=self.store_url,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
                "Accept": "application/json",
            },
        )
        self._update_cookies()

    @classmethod
    def from_settings(cls, settings: PopupSettings) -> "StorefrontClient":
        """Build a client from settings. Raises ValueError without a store URL."""
        if not settings.store_url:
            raise ValueError("POPUP_STORE_URL is not set")
        session_manager = SessionManager(settings.session_file, store_url=settings.store_url)
        return cls(settings.store_url, session_manager, timeout=settings.timeout)

    def _update_cookies(self) -> None:
        """Update client cookies from the session manager."""
        for name, value in self.session_manager.get_cookies().items():
            self.client.cookies.set(name, value)

    def _save_cookies(self) -> None:
        """Save current cookies to the session manager."""
        cookies = {}
        for cookie in self.client.cookies.jar:
            cookies[cookie.name] = cookie.value
        if cookies:
            self.session_manager.save_cookies(cookies)

    async def fetch_product(self, handle: str) -> Product:
        """
        Fetch a product by handle.

        Args:
            handle: Product handle

        Returns:
            Parsed product with its variants in listed order

        Raises:
            StorefrontError: On transport failure, non-200 status or bad payload
        """
        logger.info(f"Fetching product: {handle}")
        try:
            response = await self.client.get(f"/products/{handle}.js")
        except httpx.HTTPError as e:
            raise StorefrontError(f"Product request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Product {handle}: status={response.status_code}")
            raise StorefrontError("Product not found", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise StorefrontError("Malformed product payload") from e
        return self._parse_product(data, handle)

    async def add_line(self, variant_id: Union[int, str], quantity: int = 1) -> CartAddResult:
        """
        Add a variant to the cart.

        Args:
            variant_id: Variant ID to add
            quantity: Quantity to add

        Returns:
            CartAddResult; failures are reported in the result, never raised
        """
        logger.info(f"=== ADD TO CART: variant_id={variant_id}, quantity={quantity} ===")
        self._update_cookies()

        try:
            response = await self.client.post(
                "/cart/add.js",
                json={"id": variant_id, "quantity": quantity},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"ADD TO CART FAILED: {e}")
            return CartAddResult.failed("Failed to add to cart")

        logger.info(f"Add response: status={response.status_code}")
        self._save_cookies()

        if response.status_code not in (200, 201):
            reason = self._error_reason(response) or "Failed to add to cart"
            logger.error(f"ADD TO CART FAILED: {reason}")
            return CartAddResult.failed(reason)

        try:
            data = response.json()
        except ValueError:
            logger.error("ADD TO CART FAILED: response was not JSON")
            return CartAddResult.failed("Failed to add to cart")

        item_count = None
        if isinstance(data, dict):
            item_count = data.get("item_count")
            if not isinstance(item_count, int):
                item_count = None
        return CartAddResult.ok(item_count)

    async def fetch_cart(self) -> CartSnapshot:
        """
        Get a snapshot of the cart.

        Raises:
            StorefrontError: If the cart cannot be read
        """
        self._update_cookies()
        try:
            response = await self.client.get("/cart.js")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StorefrontError(f"Failed to read cart: {e}") from e

        self._save_cookies()
        if not isinstance(data, dict):
            raise StorefrontError("Malformed cart payload")
        try:
            return CartSnapshot(
                item_count=int(data.get("item_count", 0)),
                total_price=data.get("total_price"),
            )
        except (TypeError, ValueError) as e:
            raise StorefrontError("Malformed cart payload") from e

    # Helper methods for parsing responses

    def _parse_product(self, data: Any, handle: str) -> Product:
        """Parse a product from ``/products/{handle}.js``."""
        if not isinstance(data, dict):
            raise StorefrontError("Malformed product payload")

        variants = []
        for item in data.get("variants") or []:
            try:
                variants.append(
                    Variant(
                        id=item["id"],
                        color=item.get("option1"),
                        size=item.get("option2"),
                        title=item.get("title"),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to parse variant: {e}")
                continue

        image = data.get("featured_image")
        if isinstance(image, str) and image.startswith("//"):
            image = f"https:{image}"

        try:
            return Product(
                handle=data.get("handle") or handle,
                title=data.get("title", ""),
                price=int(data.get("price") or 0),
                description=data.get("description") or "",
                featured_image=image if isinstance(image, str) else None,
                variants=variants,
            )
        except (TypeError, ValueError) as e:
            raise StorefrontError(f"Malformed product payload: {e}") from e

    def _error_reason(self, response: httpx.Response) -> Optional[str]:
        """Extract the storefront's error text, e.g. from a 422 cart error."""
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            return data.get("description") or data.get("message")
        return None

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
