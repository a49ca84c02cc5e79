"""Product popup: variant selection and cart submission for a storefront."""

from .bundle import BundleRule
from .orchestrator import CheckoutOrchestrator, OrchestratorState
from .selection import SelectionState
from .variant_index import VariantIndex

__version__ = "0.1.0"

__all__ = (
    "BundleRule",
    "CheckoutOrchestrator",
    "OrchestratorState",
    "SelectionState",
    "VariantIndex",
)
