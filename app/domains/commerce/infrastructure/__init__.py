"""
Commerce Infrastructure Layer

SQLAlchemy adapters for the commerce ports.
"""
