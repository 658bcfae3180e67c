"""
Delivery adapters for the notices bounded context.

Each adapter implements NoticeDeliveryPort: SMTP e-mail or log-only.
"""
