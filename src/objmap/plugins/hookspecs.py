"""Pluggy hook specifications for objmap capability plugins.

Plugins contribute named converters and resolvers. Names are what TOML
profiles refer to (``converter = "join"``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from collections.abc import Callable

PROJECT_NAME = "objmap"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ObjmapHookSpec:
    """Hook specifications for the objmap plugin system."""

    @hookspec
    def register_converters(self) -> dict[str, Callable[..., Any]] | None:
        """Return ``name -> converter factory``.

        A factory is called with the profile's ``converter_args`` as keyword
        arguments and must return a TypeConverter (or a plain callable).
        """

    @hookspec
    def register_resolvers(self) -> dict[str, Callable[..., Any]] | None:
        """Return ``name -> resolver factory``, called like converter factories."""
