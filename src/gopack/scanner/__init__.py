"""
Source scanning: import usage reports for Go source trees.
"""

from .facade import analyze_source_tree

__all__ = ["analyze_source_tree"]
