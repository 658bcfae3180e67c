"""
Starlette / FastAPI integration.

Adapts incoming requests into execution contexts, renders the
fallback 404/500 responses and registers the exception handlers.
"""
