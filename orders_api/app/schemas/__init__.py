"""
Pydantic schema definitions for API payloads.

Request bodies are declared here.  Responses reuse the domain
``Order`` model, which is itself a pydantic model.
"""
