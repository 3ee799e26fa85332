"""
Small helpers shared by the connector and session modules: event sources and the logger factory registry.
"""
