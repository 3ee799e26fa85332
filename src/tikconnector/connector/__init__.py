"""
The connector logs on to a device and exchanges commands with it over a conduit.
Sessions own one connector; entity code reaches transport-specific operations through the
optional capability interfaces a connector implements (see CommandConnector).
"""
