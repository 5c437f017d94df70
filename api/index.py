"""
Request-scoped handler for serverless hosts (e.g. Vercel's Python runtime).
"""
from claude_sync.serverless import app

__all__ = ["app"]
