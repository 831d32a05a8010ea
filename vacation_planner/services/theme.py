"""
Theme preference store.

Holds the user's light/dark/system choice next to the OS-reported preference
and derives the effective theme from both. Subscribers are notified whenever
the effective theme or the stored choice changes. The choice is persisted to
a small JSON file between sessions.
"""

import json
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from vacation_planner.config import config
from vacation_planner.utils.helpers import ensure_dir, safe_load_json
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)


class ThemePreference(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ResolvedTheme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class ThemeState:
    preference: ThemePreference
    resolved: ResolvedTheme


Subscriber = Callable[[ThemeState], None]


def resolve_theme(preference: ThemePreference, system_dark: bool) -> ResolvedTheme:
    """Effective theme for a stored choice and the OS preference."""
    if preference is ThemePreference.SYSTEM:
        return ResolvedTheme.DARK if system_dark else ResolvedTheme.LIGHT
    return ResolvedTheme(preference.value)


class ThemeStore:
    """Observable single-value store for the theme."""

    def __init__(self, path: str | None = None, system_dark: bool = False):
        self.path = os.path.expanduser(path or config.system.theme_file)
        self._preference = ThemePreference.SYSTEM
        self._system_dark = system_dark
        self._subscribers: list[Subscriber] = []

    @property
    def preference(self) -> ThemePreference:
        return self._preference

    @property
    def system_dark(self) -> bool:
        return self._system_dark

    @property
    def resolved(self) -> ResolvedTheme:
        return resolve_theme(self._preference, self._system_dark)

    @property
    def state(self) -> ThemeState:
        return ThemeState(self._preference, self.resolved)

    def initialize(self) -> ThemeState:
        """Load the persisted choice, falling back to following the system."""
        stored = {}
        if os.path.isfile(self.path):
            with open(self.path, encoding="utf-8") as f:
                stored = safe_load_json(f.read())
        if not isinstance(stored, dict):
            stored = {}

        try:
            self._preference = ThemePreference(stored.get("theme", "system"))
        except ValueError:
            logger.warning(f"Ignoring unknown stored theme {stored.get('theme')!r}")
            self._preference = ThemePreference.SYSTEM

        logger.debug(f"Theme initialized: {self._preference.value}")
        return self.state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for theme changes.

        Returns:
            A function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_preference(self, preference: ThemePreference | str) -> ThemeState:
        """
        Store a new choice, persist it, and notify subscribers.

        The choice is written before it takes effect; if the write fails the
        store keeps its previous choice and the error propagates.
        """
        preference = ThemePreference(preference)
        if preference is self._preference:
            return self.state
        self._persist(preference)
        self._preference = preference
        self._notify()
        return self.state

    def set_system_dark(self, system_dark: bool) -> ThemeState:
        """Record the OS preference; notifies only if the effective theme changes."""
        before = self.resolved
        self._system_dark = system_dark
        if self.resolved is not before:
            self._notify()
        return self.state

    def toggle(self) -> ThemeState:
        """Switch to the explicit opposite of what is currently shown."""
        if self.resolved is ResolvedTheme.DARK:
            return self.set_preference(ThemePreference.LIGHT)
        return self.set_preference(ThemePreference.DARK)

    def _persist(self, preference: ThemePreference) -> None:
        ensure_dir(os.path.dirname(self.path) or ".")
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"theme": preference.value}, f)

    def _notify(self) -> None:
        state = self.state
        for callback in list(self._subscribers):
            callback(state)
