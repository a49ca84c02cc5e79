"""Environment-driven settings."""

import os
from typing import Optional

from pydantic import BaseModel, Field

from .bundle import DEFAULT_BUNDLE_HANDLE, BundleRule


class PopupSettings(BaseModel):
    """Settings shared by the MCP and HTTP servers."""

    store_url: Optional[str] = Field(None, description="Storefront base URL")
    bundle_handle: str = Field(default=DEFAULT_BUNDLE_HANDLE)
    bundle_color: str = Field(default="black")
    bundle_size: str = Field(default="M")
    session_file: Optional[str] = Field(None, description="Cart session file")
    timeout: float = Field(default=30.0, gt=0)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "PopupSettings":
        """
        Read settings from the environment.

        Environment variable mapping:
        - POPUP_STORE_URL → store_url
        - POPUP_BUNDLE_HANDLE → bundle_handle
        - POPUP_BUNDLE_COLOR → bundle_color
        - POPUP_BUNDLE_SIZE → bundle_size
        - POPUP_SESSION_FILE → session_file
        - POPUP_TIMEOUT → timeout
        - POPUP_LOG_LEVEL → log_level
        """
        mapping = {
            "store_url": "POPUP_STORE_URL",
            "bundle_handle": "POPUP_BUNDLE_HANDLE",
            "bundle_color": "POPUP_BUNDLE_COLOR",
            "bundle_size": "POPUP_BUNDLE_SIZE",
            "session_file": "POPUP_SESSION_FILE",
            "timeout": "POPUP_TIMEOUT",
            "log_level": "POPUP_LOG_LEVEL",
        }
        values = {}
        for field, var in mapping.items():
            value = os.environ.get(var)
            if value:
                values[field] = value
        return cls(**values)

    def bundle_rule(self) -> BundleRule:
        return BundleRule(color=self.bundle_color, size=self.bundle_size, handle=self.bundle_handle)
