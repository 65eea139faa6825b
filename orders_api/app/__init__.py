"""
Application package for the Orders API.

The code is split into layers so that storage can be swapped without
touching the HTTP handlers:

* ``domain`` holds the order model and its validation rules;
* ``repositories`` defines the persistence port and its adapters;
* ``services`` orchestrates validation and repository calls;
* ``api`` exposes the service over HTTP;
* ``core`` contains configuration, logging, errors and database helpers.

The FastAPI instance is built by :func:`orders_api.app.main.create_app`.
Import ``orders_api.app.main:app`` to serve the default instance.
"""
