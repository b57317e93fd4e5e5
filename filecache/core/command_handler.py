"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), runs them against the
cache and reports the outcome through the UserInterface. Every handler
returns a process exit status instead of raising for expected failures.
"""

import json
import logging
from typing import Any, List, Optional

# Domain Layer Imports
from filecache.domain.exceptions import InvalidArgumentError, InvalidKeyError
from filecache.domain.interfaces.cache import CacheInterface
from filecache.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

_MISSING = object()


def format_value(value: Any) -> str:
    """Renders a cached value for display: strings verbatim, everything else as repr."""
    return value if isinstance(value, str) else repr(value)


class CommandHandler:
    """Handles incoming commands and delegates to the cache."""

    def __init__(self, cache: CacheInterface, ui: UserInterface):
        """Initializes the CommandHandler with the cache and the UI to report to."""
        self.cache = cache
        self.ui = ui

    def handle_get(self, key: str, default: Optional[str] = None) -> int:
        """Handles the 'get' command."""
        logger.info(f"Handling 'get' command for key: {key}")
        try:
            value = self.cache.get(key, _MISSING)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if value is _MISSING:
            if default is not None:
                self.ui.display_output(default)
                return EXIT_OK
            self.ui.display_warning(f"Key '{key}' not found.")
            return EXIT_FAILURE

        self.ui.display_output(format_value(value))
        return EXIT_OK

    def handle_get_many(self, keys: List[str]) -> int:
        """Handles the 'get-many' command. Missing keys are shown as None."""
        logger.info(f"Handling 'get-many' command for {len(keys)} keys")
        try:
            values = self.cache.get_multiple(keys)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE
        self.ui.display_mapping(values)
        return EXIT_OK

    def handle_set(self, key: str, raw_value: str, ttl: Optional[int] = None, as_json: bool = False) -> int:
        """Handles the 'set' command, optionally decoding the value as JSON first."""
        logger.info(f"Handling 'set' command for key: {key} (ttl={ttl}, json={as_json})")
        value: Any = raw_value
        if as_json:
            try:
                value = json.loads(raw_value)
            except json.JSONDecodeError as e:
                self.ui.display_error(f"Value is not valid JSON: {e}")
                return EXIT_USAGE

        try:
            stored = self.cache.set(key, value, ttl)
        except InvalidArgumentError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if not stored:
            self.ui.display_error(f"Failed to store key '{key}'.")
            return EXIT_FAILURE
        self.ui.display_info(f"Stored '{key}'.")
        return EXIT_OK

    def handle_has(self, key: str) -> int:
        """Handles the 'has' command. Exit status 0 when present, 1 when not."""
        try:
            present = self.cache.has(key)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE
        self.ui.display_output("true" if present else "false")
        return EXIT_OK if present else EXIT_FAILURE

    def handle_delete(self, keys: List[str]) -> int:
        """Handles the 'delete' command for one or more keys."""
        logger.info(f"Handling 'delete' command for keys: {keys}")
        try:
            deleted = self.cache.delete_multiple(keys)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if not deleted:
            self.ui.display_error("Some entries could not be deleted.")
            return EXIT_FAILURE
        self.ui.display_info(f"Deleted {len(keys)} key(s).")
        return EXIT_OK

    def handle_clear(self) -> int:
        """Handles the 'clear' command."""
        logger.info("Handling 'clear' command")
        if not self.cache.clear():
            self.ui.display_error("Some cache entries could not be removed.")
            return EXIT_FAILURE
        self.ui.display_info("Cache cleared successfully.")
        return EXIT_OK

    def handle_prune(self) -> int:
        """Handles the 'prune' command (remove expired and corrupt entries)."""
        logger.info("Handling 'prune' command")
        removed = self.cache.prune()
        self.ui.display_info(f"Removed {removed} stale entr{'y' if removed == 1 else 'ies'}.")
        return EXIT_OK
