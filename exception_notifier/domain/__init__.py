"""
Domain layer package.

Contains pure notice logic: entities, value objects, domain services,
and port interfaces. No framework imports, no network IO.
"""
