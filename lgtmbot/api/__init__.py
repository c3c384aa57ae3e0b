"""lgtmbot HTTP API layer.

Usage
-----
Create and run the application::

    from lgtmbot.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # webhook handling enabled
"""

from lgtmbot.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
