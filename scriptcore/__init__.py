"""Execution core for a small command scripting engine.

Script entries are built by an external compiler (or ad hoc through `/ex`),
queued, tag-filled and dispatched to registered commands.
"""
