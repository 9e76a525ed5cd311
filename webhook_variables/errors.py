"""Exceptions raised while resolving webhook variables.

Everything raised during evaluation derives from `ResolutionError` so the
per-rule boundary in `resolver.resolve_rule` can capture it uniformly.
"""

from __future__ import annotations


class ResolutionError(Exception):
    """A rule could not be resolved against a payload."""


class PathNotFoundError(ResolutionError):
    """A definite path matched nothing. Expected and never logged."""


class ConfigurationError(ResolutionError, ValueError):
    """A rule is misconfigured (unknown expression type, bad index, empty name)."""


class XmlDoctypeError(ResolutionError):
    """An XML payload declared a DOCTYPE and was rejected."""


class XPathResultError(ResolutionError):
    """An XPath expression evaluated to something other than a node-set."""
