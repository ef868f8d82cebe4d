"""Argument validation for id-taking commands."""

from __future__ import annotations

import re

from .errors import MissingParameterError, NotANumberError

__all__ = ["validate_id"]

# Leading integer prefix, the way ``parseInt``-style parsers read it.
_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def validate_id(raw: object) -> int:
    """Turn a raw ``<id>`` token into an integer.

    Parsing is permissive: ``"12abc"`` yields ``12``. ``None`` raises
    :class:`MissingParameterError`; anything without a leading integer
    raises :class:`NotANumberError`.
    """

    if raw is None:
        raise MissingParameterError("Missing <id> parameter.")
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    match = _INT_PREFIX.match(str(raw))
    if match is None:
        raise NotANumberError("The <id> parameter is not a number.")
    return int(match.group(1))
