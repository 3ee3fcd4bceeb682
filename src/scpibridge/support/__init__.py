"""
Small helpers shared across the bridge: event sources and value-object mixins.
"""
