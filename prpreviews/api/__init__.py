"""pr-previews HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the pr-previews runtime HTTP surface.

Usage
-----
Create and run the application::

    from prpreviews.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # with cluster and webhook endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when a command dispatcher is provided, the cluster and
    GitHub webhook endpoints.
"""

from prpreviews.api.app import create_app

__all__ = ["create_app"]
