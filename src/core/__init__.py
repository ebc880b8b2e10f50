"""Core domain package for sigscope.

Core contains parsing, reconciliation, and view logic without any Textual
or storage-specific code, keeping the business logic portable.
"""
