"""Policy document expansion."""

from .expander import ACTION_FIELDS, PolicyExpander, expand_policy

__all__ = ["ACTION_FIELDS", "PolicyExpander", "expand_policy"]
