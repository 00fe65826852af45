"""Enterprise registries.

- parser.py: quote-aware line splitter and typed rows for the global ($M)
  and domestic (full-dollar) tables
- merger.py: unified enterprise list with provenance and revenue ordering
"""
