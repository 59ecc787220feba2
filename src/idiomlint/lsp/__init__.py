"""
idiomlint LSP support.

Converts findings into Language Server Protocol diagnostics and code
actions.
"""
