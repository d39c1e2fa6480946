"""
convflow: execution core for a conversation-flow scripting language.
"""

from .version import __version__  # noqa: F401

__all__ = [
    "ast_nodes",
    "components",
    "config",
    "errors",
    "flows",
    "runtime",
    "__version__",
]
