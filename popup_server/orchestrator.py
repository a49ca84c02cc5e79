"""Variant resolution and cart submission for one product popup."""

import logging
from enum import Enum
from typing import Optional, Union

from .bundle import BundleRule
from .errors import (
    BundleAddFailed,
    IncompleteSelection,
    NoMatchingVariant,
    PopupError,
    PopupNotOpen,
    PrimaryAddFailed,
    ProductLoadFailed,
    StorefrontError,
)
from .formatting import format_price, strip_html
from .interfaces import CartCountSink, CartGateway, NotificationSink, ProductSource
from .models import (
    CartAddResult,
    NotificationLevel,
    PopupView,
    Product,
    Selection,
    SubmitOutcome,
    SubmitStatus,
    TriggeredBundle,
    Variant,
)
from .selection import SelectionState
from .variant_index import VariantIndex

logger = logging.getLogger(__name__)

ADDED_MESSAGE = "Added to cart"


class OrchestratorState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    RESOLVED_SUCCESS = "resolved_success"
    RESOLVED_ERROR = "resolved_error"


class CheckoutOrchestrator:
    """
    Owns the state of one popup: the loaded product, the shopper's
    selection and the submission in progress.

    ``submit`` adds the selected variant to the cart and, when the bundle
    rule fires for the selection, the bundle product's first variant. A
    failed primary add fails the submission; a failed bundle add is logged
    and otherwise ignored. Only one submission runs at a time; extra calls
    while one is in flight are ignored.
    """

    def __init__(
        self,
        products: ProductSource,
        cart: CartGateway,
        notify: NotificationSink,
        on_cart_count: Optional[CartCountSink] = None,
        bundle_rule: Optional[BundleRule] = None,
    ) -> None:
        self.products = products
        self.cart = cart
        self.notify = notify
        self.on_cart_count = on_cart_count
        self.bundle_rule = bundle_rule or BundleRule()

        self.state = OrchestratorState.IDLE
        self.selection = SelectionState()
        self.product: Optional[Product] = None
        self.last_outcome: Optional[SubmitOutcome] = None
        self._index: Optional[VariantIndex] = None
        # Bumped on every open/close so late submissions can tell the popup moved on
        self._generation = 0

    @property
    def is_open(self) -> bool:
        return self.product is not None

    @property
    def busy(self) -> bool:
        return self.state in (OrchestratorState.VALIDATING, OrchestratorState.SUBMITTING)

    # Inbound capabilities

    async def open(self, handle: str) -> PopupView:
        """
        Load a product and show it with an empty selection.

        Raises:
            ProductLoadFailed: If the product cannot be fetched. The popup
                stays closed.
        """
        self._discard()
        try:
            product = await self.products.fetch_product(handle)
        except Exception as e:
            logger.error(f"Error fetching product {handle}: {e}")
            error = ProductLoadFailed(str(e))
            self._notify(error.user_message, NotificationLevel.ERROR)
            raise error from e

        self._generation += 1
        self.product = product
        self._index = VariantIndex.build(product.variants)
        logger.info(f"Opened popup for {handle} ({len(product.variants)} variants)")
        return self.view()

    def select_color(self, color: Optional[str]) -> None:
        self.selection.set_color(color)

    def select_size(self, size: Optional[str]) -> None:
        self.selection.set_size(size)

    def close(self) -> None:
        """Drop the product and the selection. In-flight submissions keep running."""
        self._discard()

    def view(self) -> PopupView:
        if self.product is None or self._index is None:
            raise PopupNotOpen()
        product = self.product
        return PopupView(
            handle=product.handle,
            title=product.title,
            price=format_price(product.price),
            description=strip_html(product.description),
            image=product.featured_image,
            colors=self._index.colors(),
            selected_color=self.selection.color,
            selected_size=self.selection.size,
            can_submit=self.selection.is_complete() and not self.busy,
            state=self.state.value,
        )

    async def submit(self) -> SubmitOutcome:
        """Validate the selection and add it (and any bundle) to the cart."""
        if self.busy:
            logger.info("Submission already in progress, ignoring")
            return SubmitOutcome(status=SubmitStatus.IGNORED, message="Submission already in progress")

        self.state = OrchestratorState.VALIDATING
        try:
            try:
                selection, variant = self._resolve()
            except PopupError as e:
                return self._fail(e)

            generation = self._generation
            self.state = OrchestratorState.SUBMITTING
            result = await self._add_line(variant.id, 1)
            if not result.success:
                self.state = OrchestratorState.RESOLVED_ERROR
                return self._fail(
                    PrimaryAddFailed(result.reason or "Failed to add to cart"),
                    variant_id=variant.id,
                )

            outcome = SubmitOutcome(
                status=SubmitStatus.SUCCESS,
                message=ADDED_MESSAGE,
                variant_id=variant.id,
            )

            bundle = self.bundle_rule.evaluate(selection)
            if bundle is not None:
                outcome.bundle_triggered = True
                try:
                    await self._add_bundle(bundle)
                    outcome.bundle_added = True
                except BundleAddFailed as e:
                    logger.warning(f"Failed to auto-add {bundle.handle}: {e.reason}")

            self.state = OrchestratorState.RESOLVED_SUCCESS
            self._notify(ADDED_MESSAGE, NotificationLevel.SUCCESS)
            item_count = await self._refresh_cart_count()
            if item_count is not None:
                outcome.item_count = item_count

            if generation == self._generation:
                self.selection.reset()
            self.last_outcome = outcome
            return outcome
        finally:
            self.state = OrchestratorState.IDLE

    # Internals

    def _resolve(self) -> tuple[Selection, Variant]:
        """Capture the selection and find its variant, before any I/O."""
        if not self.selection.is_complete():
            raise IncompleteSelection()
        if self._index is None:
            raise PopupNotOpen()
        selection = self.selection.snapshot()
        variant = self._index.lookup(selection.color, selection.size)
        if variant is None:
            raise NoMatchingVariant(f"{selection.color}/{selection.size}")
        return selection, variant

    async def _add_line(self, variant_id: Union[int, str], quantity: int) -> CartAddResult:
        try:
            return await self.cart.add_line(variant_id, quantity)
        except Exception as e:
            logger.error(f"Add to cart error: {e}", exc_info=True)
            return CartAddResult.failed(str(e) or "Failed to add to cart")

    async def _add_bundle(self, bundle: TriggeredBundle) -> None:
        logger.info(f"Bundle rule triggered: adding {bundle.handle}")
        try:
            product = await self.products.fetch_product(bundle.handle)
        except StorefrontError as e:
            raise BundleAddFailed(f"{bundle.handle} not found: {e}") from e
        except Exception as e:
            raise BundleAddFailed(f"{bundle.handle} lookup failed: {e}") from e

        variant = self.bundle_rule.pick_variant(product)
        if variant is None:
            raise BundleAddFailed(f"{bundle.handle} has no variants")

        result = await self._add_line(variant.id, bundle.quantity)
        if not result.success:
            raise BundleAddFailed(result.reason or "Failed to add to cart")

    async def _refresh_cart_count(self) -> Optional[int]:
        try:
            snapshot = await self.cart.fetch_cart()
        except Exception as e:
            logger.warning(f"Failed to update cart count: {e}")
            return None
        if self.on_cart_count is not None:
            try:
                self.on_cart_count(snapshot.item_count)
            except Exception as e:
                logger.warning(f"Cart count sink failed: {e}")
        return snapshot.item_count

    def _fail(self, error: PopupError, variant_id: Union[int, str, None] = None) -> SubmitOutcome:
        logger.info(f"Submission failed: {error.kind}: {error}")
        self._notify(error.user_message, NotificationLevel.ERROR)
        outcome = SubmitOutcome(
            status=SubmitStatus.ERROR,
            error=error.kind,
            message=error.user_message,
            variant_id=variant_id,
        )
        self.last_outcome = outcome
        return outcome

    def _notify(self, message: str, level: NotificationLevel) -> None:
        try:
            self.notify(message, level)
        except Exception as e:
            logger.warning(f"Notification sink failed: {e}")

    def _discard(self) -> None:
        self._generation += 1
        self.product = None
        self._index = None
        self.selection.reset()
