"""Name resolution.

Maps free-text company names onto canonical registry names (alias table,
exact match, substring containment) and derives stable directory ids.
Pure-python, deterministic. See `enterprise_intel/resolver/core.py`.
"""
