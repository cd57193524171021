"""
Core architecture components: domain building blocks, dependency wiring,
application factory and lifecycle.
"""
