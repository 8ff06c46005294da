"""Parse configuration held in a ContextVar.

The inline parser never takes its rule table as a global: it reads the
ParseConfig active in the current context. ``Markdown`` builds one config
per instance and activates it around each parse, so instances with
different plugins can run side by side in threads or tasks.

Thread Safety:
    Every thread (and asyncio task) sees its own value of the ContextVar.
    ParseConfig itself is frozen.

Usage:
    md = Markdown(plugins=["subscript", "strikethrough"])
    html = md("H~2~O")  # activates md's config for the parse

    with parse_config_context(ParseConfig.from_dict({"plugins": ["subscript"]})):
        inlines = InlineParser().parse("H~2~O")

"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields

from subtilde.parsing.inline.rules import CORE_INLINE_RULES, InlineRuleTable


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """What the inline parser should recognize.

    The source file name is not part of the config; it changes per call
    and is passed to the parser directly.

    Attributes:
        inline_rules: Rule table the inline parser dispatches through
        plugins: Names of the plugins that built ``inline_rules``

    """

    inline_rules: InlineRuleTable = CORE_INLINE_RULES
    plugins: tuple[str, ...] = ()

    @classmethod
    def for_plugins(cls, plugins: Iterable[str]) -> "ParseConfig":
        """Config whose rule table is the core rules plus ``plugins``.

        Raises:
            PluginError: If a plugin name is not recognized

        """
        # Deferred: plugins import the rule modules that this module feeds
        from subtilde.extensions import ExtensionsBuilder
        from subtilde.plugins import apply_plugins

        builder = apply_plugins(plugins, ExtensionsBuilder())
        return cls(inline_rules=builder.build().inline_rules, plugins=builder.applied_plugins)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Build a config from loosely-typed settings.

        Keys that are not ParseConfig fields are ignored. A ``"plugins"``
        list goes through ``for_plugins``; an explicit ``"inline_rules"``
        entry still replaces the resulting table.

        Example:
            >>> config = ParseConfig.from_dict({"plugins": ["subscript"], "x": 1})
            >>> "subscript" in config.inline_rules
            True

        """
        known = {f.name for f in fields(cls)}
        settings = {k: v for k, v in config_dict.items() if k in known}
        if "plugins" not in settings:
            return cls(**settings)

        config = cls.for_plugins(settings["plugins"])
        if "inline_rules" in settings:
            return cls(inline_rules=settings["inline_rules"], plugins=config.plugins)
        return config


_DEFAULT_CONFIG = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar("parse_config", default=_DEFAULT_CONFIG)


def get_parse_config() -> ParseConfig:
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Activate ``config`` for the rest of the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Activate ``config`` for the ``with`` block only.

    The previous config comes back on exit, also when the block raises.

    """
    token = _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.reset(token)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
