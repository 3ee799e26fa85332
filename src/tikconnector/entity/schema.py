from enum import Enum

from tikconnector.entity.properties import EditMode, PropertyStore


class FieldKind(Enum):
    """ the semantic type of a field, selecting the PropertyStore accessor used to read it. """
    STRING = 'string'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    LIST = 'list'
    DURATION = 'duration'
    ENUM = 'enum'


class EntityField:
    """
    Describes one field of an entity kind.
    :param name         the field name used by the device, e.g. 'max-limit'
    :param kind         the semantic type of the value
    :param edit_mode    READ_ONLY for fields the device computes (counters, ids) even on editable entities
    :param enum_type    the Enum class for ENUM fields
    """
    def __init__(self, name, kind=FieldKind.STRING, edit_mode=EditMode.EDITABLE, enum_type=None):
        if kind is FieldKind.ENUM and enum_type is None:
            raise ValueError("field '%s' is an enum field and requires enum_type" % name)
        self.name = name
        self.kind = kind
        self.edit_mode = edit_mode
        self.enum_type = enum_type

    def __repr__(self):
        return 'EntityField(%r, %s)' % (self.name, self.kind)

    @property
    def attribute(self):
        """ the python attribute name, e.g. 'max_limit' for 'max-limit' """
        return self.name.lstrip('.').replace('-', '_')

    def read(self, store: PropertyStore):
        if self.kind is FieldKind.INTEGER:
            return store.get_as_int_or_none(self.name)
        if self.kind is FieldKind.BOOLEAN:
            return store.get_as_bool_or_none(self.name)
        if self.kind is FieldKind.LIST:
            return store.get_as_list_or_none(self.name)
        if self.kind is FieldKind.DURATION:
            return store.get_as_duration_or_none(self.name)
        if self.kind is FieldKind.ENUM:
            return store.get_as_enum_or_none(self.name, self.enum_type)
        return store.get_as_string_or_none(self.name)


class EntitySchema:
    """
    Describes one entity kind: the menu path on the device, whether rows can be edited,
    and the typed fields of a row.
    """
    def __init__(self, path, edit_mode, fields, id_field='.id'):
        self.path = path
        self.edit_mode = edit_mode
        self.id_field = id_field
        self.fields = {}
        for f in fields:
            if f.name in self.fields:
                raise ValueError("duplicate field '%s' in schema %s" % (f.name, path))
            self.fields[f.name] = f

    def __repr__(self):
        return 'EntitySchema(%r, %s)' % (self.path, self.edit_mode)

    def field(self, name):
        """ :return: the field with the given name, or None if the schema does not declare it. """
        return self.fields.get(name)

    def command(self, verb):
        """ :return: the command path for a verb on this menu, e.g. '/log/print' """
        return self.path.rstrip('/') + '/' + verb
