"""Core script primitives (entries, context values, argument interpretation).

Kept free of FastAPI and Redis concerns so it can be reused by queues, the HTTP
surface and tests.
"""
