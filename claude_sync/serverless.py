"""
Request-Scoped Entry Point

The same application for ephemeral-filesystem hosts, where each
invocation may run in a fresh process and only /tmp is writable.
"""
from .config import serverless_settings
from .application import configure_logging, create_app

settings = serverless_settings()
configure_logging(settings)
app = create_app(settings)
