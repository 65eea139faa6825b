"""
Service layer abstraction.

Services sit between the HTTP handlers and the repositories.  They
validate input, call the repository port and translate repository
failures into the error taxonomy in ``core.errors``.  Handlers never
talk to a repository directly.
"""
