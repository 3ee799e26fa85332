"""
Wire formats spoken by the built-in connectors.
"""
