"""
Access to MikroTik RouterOS devices over their API.

- Connector: a pluggable transport that can log on to a device, exchange commands and close.
  A connector may implement optional capabilities (e.g. CommandConnector) beyond the minimal contract.
- Conduit: abstraction of a bi-directional channel used by a connector. Combines 2 streams
  for reading and writing.
- Session: owns exactly one connector. Creating a session makes it the active session of the
  current thread, disposing it restores the previously active session.
- Entity: one configuration row on the device, described by a schema (path, edit mode and typed fields)
  and backed by a property store holding the raw values.
- EntityList: loads and saves the rows of one entity kind through the session's connector.

Typical use:

    with Session(ConnectorType.API) as session:
        session.open('192.168.88.1', 'admin', '')
        logs = EntityList(Log)
        logs.load_all()
        for log in logs:
            print(log.time, log.message)
"""
