# phanalist/errors.py
"""
Exception hierarchy.

::

    PhanalistError
    ├── ConfigError         bad configuration file or shape
    ├── PhpSyntaxError      source text the grammar cannot parse
    ├── SettingsError       a rule settings blob that does not coerce
    └── RuleRegistryError   duplicate or unknown rule codes

Only :class:`ConfigError` is meant to reach the command line.  A
:class:`PhpSyntaxError` is turned into an empty statement list by
:func:`phanalist.parser.parse_statements`, and :class:`SettingsError` is
always handled inside :meth:`phanalist.rules.base.Rule.configure`.
"""

from __future__ import annotations

from typing import Optional


class PhanalistError(Exception):
    """Base class for every error raised by phanalist."""


class ConfigError(PhanalistError):
    """The configuration file is unreadable or has the wrong shape."""


class PhpSyntaxError(PhanalistError):
    """The PHP source could not be parsed."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class SettingsError(PhanalistError):
    """A settings blob could not be coerced into a rule's settings."""


class RuleRegistryError(PhanalistError):
    """A rule code is registered twice, or looked up but unknown."""


__all__ = [
    "PhanalistError",
    "ConfigError",
    "PhpSyntaxError",
    "SettingsError",
    "RuleRegistryError",
]
