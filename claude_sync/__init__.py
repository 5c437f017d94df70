"""
Claude Sync - persist per-project context for an AI coding assistant.
"""
__version__ = "1.0.0"
