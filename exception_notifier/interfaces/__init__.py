"""
Interfaces layer package.

Binds the notices use cases to the hosting web framework.
No business logic belongs here.
"""
