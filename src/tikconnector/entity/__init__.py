"""
The entity model: a configuration row on the device is an Entity whose fields live in a PropertyStore.
The fields, their types and whether they can be written are described by an EntitySchema.
"""
