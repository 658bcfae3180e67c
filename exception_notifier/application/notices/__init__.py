"""
Application layer for the notices bounded context.

Use cases coordinate the classifier, the normalizer and the
delivery/rendering ports. No framework or infrastructure imports allowed.
"""
