"""
The conduit package provides an abstraction of a bi-directional byte stream to a device.
Connectors open a conduit and run their protocol over it; the TCP socket conduit is the only
concrete implementation needed by the API connector.
"""
