"""Storefront cart session persistence."""

import json
import os
from pathlib import Path
from typing import Optional
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CART_COOKIE = "cart"


class SessionData(BaseModel):
    """Cookies that tie this process to a storefront cart."""

    cookies: dict[str, str] = Field(default_factory=dict, description="Storefront cookies")
    store_url: Optional[str] = Field(None, description="Store the cookies belong to")

    @property
    def cart_token(self) -> Optional[str]:
        return self.cookies.get(CART_COOKIE)


class SessionManager:
    """Keeps the cart cookie on disk so the cart survives restarts."""

    def __init__(self, session_file: Optional[str] = None, store_url: Optional[str] = None) -> None:
        """
        Initialize the session manager.

        Args:
            session_file: Path to store session data. Defaults to ~/.popup_cart_session.json
            store_url: Storefront the session belongs to. A saved session for a
                different store is discarded.
        """
        if session_file is None:
            session_file = str(Path.home() / ".popup_cart_session.json")
        self.session_file = session_file
        self.store_url = store_url
        self.session: SessionData = self._load_session()

    def _load_session(self) -> SessionData:
        """Load session data from file if it exists."""
        if os.path.exists(self.session_file):
            try:
                with open(self.session_file, "r") as f:
                    session = SessionData(**json.load(f))
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning(f"Could not load session: {e}")
                return SessionData(store_url=self.store_url)
            if self.store_url and session.store_url and session.store_url != self.store_url:
                logger.info(f"Ignoring session saved for {session.store_url}")
                return SessionData(store_url=self.store_url)
            logger.info(f"Loaded existing session from {self.session_file}")
            return session
        return SessionData(store_url=self.store_url)

    def _save_session(self) -> None:
        """Save session data to file."""
        try:
            with open(self.session_file, "w") as f:
                json.dump(self.session.model_dump(), f, indent=2)
            os.chmod(self.session_file, 0o600)
        except OSError as e:
            logger.error(f"Could not save session: {e}")

    def save_cookies(self, cookies: dict[str, str]) -> None:
        """Persist cookies if they changed."""
        if cookies == self.session.cookies:
            return
        self.session = SessionData(cookies=dict(cookies), store_url=self.store_url)
        self._save_session()

    def get_cookies(self) -> dict[str, str]:
        return self.session.cookies

    def clear_session(self) -> None:
        """Forget the cart and delete the session file."""
        self.session = SessionData(store_url=self.store_url)
        if os.path.exists(self.session_file):
            os.remove(self.session_file)
            logger.info("Session cleared")
