"""Command contract, registry and the built-in command set.

Every command goes through the same parse -> execute pipeline so queued and ad hoc
entries report consistently.
"""
