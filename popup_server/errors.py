"""Errors raised by the popup core and the storefront client."""

from typing import Optional


class StorefrontError(Exception):
    """Transport or payload failure talking to the storefront."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PopupError(Exception):
    """Base class for failures reported to the shopper."""

    kind = "popup_error"
    user_message = "A problem happened."

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail


class PopupNotOpen(PopupError):
    kind = "popup_not_open"
    user_message = "No product is open."


class ProductLoadFailed(PopupError):
    kind = "product_load_failed"
    user_message = "Failed to load product. Please try again."


class IncompleteSelection(PopupError):
    kind = "incomplete_selection"
    user_message = "Please select both color and size"


class NoMatchingVariant(PopupError):
    kind = "no_matching_variant"
    user_message = "This combination is not available"


class PrimaryAddFailed(PopupError):
    kind = "primary_add_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.user_message = f"A problem happened. Error: {reason}"


class BundleAddFailed(PopupError):
    """Secondary add failed. Recorded, never shown to the shopper."""

    kind = "bundle_add_failed"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
