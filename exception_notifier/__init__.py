"""
exception-notifier: unhandled exception notification for ASGI applications.

Package root. Follows a hexagonal layout (ports & adapters):

Bounded contexts:
    - notices: Error classification, notice normalization, trusted addresses.

Layers:
    - domain: Pure notice logic, entities, ports (ABCs), errors.
    - application: Use cases (notify_of, rescue action).
    - infrastructure: Delivery adapters (SMTP, logging) implementing domain ports.
    - interfaces: Starlette/FastAPI integration (context, renderer, handlers).
    - shared: Cross-cutting concerns (logging).
"""

__version__ = "0.1.0"
