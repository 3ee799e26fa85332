"""
Entity kinds for the menus the library uses itself. Other menus can be described the same way,
or at runtime with entity_type().
"""
from tikconnector.entity.base import Entity
from tikconnector.entity.properties import EditMode
from tikconnector.entity.schema import EntitySchema, EntityField, FieldKind

read_only = EditMode.READ_ONLY


class Log(Entity):
    """
    Represents one row in /log on the router.
    """
    schema = EntitySchema('/log', EditMode.READ_ONLY, [
        EntityField('message'),
        EntityField('time'),
        EntityField('topics', FieldKind.LIST),
    ])


class QueueSimple(Entity):
    """
    Represents one row in /queue/simple on the router.
    """
    schema = EntitySchema('/queue/simple', EditMode.EDITABLE, [
        EntityField('name'),
        EntityField('target'),
        EntityField('max-limit'),
        EntityField('limit-at'),
        EntityField('priority'),
        EntityField('parent'),
        EntityField('comment'),
        EntityField('disabled', FieldKind.BOOLEAN),
        EntityField('dynamic', FieldKind.BOOLEAN, read_only),
        EntityField('bytes', edit_mode=read_only),
    ])


class SystemResource(Entity):
    """
    The router's identity and resource usage (/system/resource). Has a single row.
    """
    schema = EntitySchema('/system/resource', EditMode.READ_ONLY, [
        EntityField('uptime', FieldKind.DURATION),
        EntityField('version'),
        EntityField('build-time'),
        EntityField('free-memory', FieldKind.INTEGER),
        EntityField('total-memory', FieldKind.INTEGER),
        EntityField('cpu'),
        EntityField('cpu-count', FieldKind.INTEGER),
        EntityField('cpu-frequency', FieldKind.INTEGER),
        EntityField('cpu-load', FieldKind.INTEGER),
        EntityField('free-hdd-space', FieldKind.INTEGER),
        EntityField('total-hdd-space', FieldKind.INTEGER),
        EntityField('architecture-name'),
        EntityField('board-name'),
        EntityField('platform'),
    ], id_field=None)
