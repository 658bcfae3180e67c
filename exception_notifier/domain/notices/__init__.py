"""
Notices bounded context, domain layer.

- Classification of raised errors (expected 404 vs unexpected 500)
- Normalization of errors and manual notices into Notice records
- Trusted address filtering
- Backtrace sanitization
"""
