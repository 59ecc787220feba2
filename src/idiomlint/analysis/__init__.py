"""
idiomlint analysis core.

Tree node definitions, structural matchers, identifier collection, text
scanning, the lint context and finding presentation. The linter driver
lives in ``idiomlint.analysis.linter``.
"""
