"""
A simple configuration helper built on top of ConfigObj that allows configuration files to be
layered - neutral / default / os-specific / user, with a schema to validate the types of the config data.

Used to build the SessionSettings an application passes to open_session() at startup.
"""
