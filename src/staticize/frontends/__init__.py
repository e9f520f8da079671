"""
Source Frontends.

A frontend owns the real syntax tree of a language: it lowers declarations
into ``staticize.core.tree`` with resolved bindings, and splices the decisions
of the recipes back into its own tree.
"""
