import logging

from tikconnector.connector.base import CommandConnector
from tikconnector.context import resolve_session
from tikconnector.entity.properties import PropertyStore, EditMode, ReadOnlyEntityError, EntityError
from tikconnector.entity.schema import EntitySchema, EntityField

logger = logging.getLogger(__name__)


class FieldProperty:
    """ exposes a schema field as a typed attribute of the entity class """

    def __init__(self, field: EntityField):
        self.field = field
        self.__doc__ = "Row %s property." % field.name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return self.field.read(instance.properties)

    def __set__(self, instance, value):
        instance.set(self.field.name, value)


class Entity:
    """
    One row of a menu on the device.

    Subclasses declare a schema; each schema field becomes a typed attribute (e.g. queue.max_limit)
    that reads through the property store. Writes go through set(), which rejects read-only entities
    and read-only fields.

    :param session  the session used to reach the device. The active session when omitted.
    :param values   the raw row values, as delivered by the connector
    """
    schema = None
    # instance attributes a field attribute must not shadow
    reserved_attributes = ('session', 'properties')

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.schema is None:
            return
        for field in cls.schema.fields.values():
            if field.attribute not in cls.reserved_attributes and not hasattr(cls, field.attribute):
                setattr(cls, field.attribute, FieldProperty(field))

    def __init__(self, session=None, values=None):
        if self.schema is None:
            raise TypeError("%s declares no schema" % type(self).__name__)
        self.session = resolve_session(session)
        self.properties = PropertyStore(values, self.schema.edit_mode)

    @property
    def id(self):
        """ the row identifier assigned by the device ('.id'), None for rows not read from the device """
        return self.properties.get_as_string_or_none(self.schema.id_field)

    @property
    def editable(self):
        return self.properties.editable

    def get(self, name):
        """ reads a field, typed by the schema. Fields missing from the schema are returned as strings. """
        field = self.schema.field(name)
        if field is None:
            return self.properties.get_as_string_or_none(name)
        return field.read(self.properties)

    def set(self, name, value):
        field = self.schema.field(name)
        if name == self.schema.id_field or (field is not None and field.edit_mode is EditMode.READ_ONLY):
            raise ReadOnlyEntityError("field '%s' of %s is read-only" % (name, self.schema.path))
        self.properties.set_attribute(name, value)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Entity) or other.schema is not self.schema:
            return NotImplemented
        return self.id is not None and self.id == other.id

    def __hash__(self):
        row_id = self.id
        return hash((self.schema.path, row_id)) if row_id is not None else id(self)

    def __repr__(self):
        return '<%s %s %s>' % (type(self).__name__, self.schema.path, self.id)

    @classmethod
    def load_instance(cls, session=None):
        """
        Loads an entity kind that has exactly one row, such as /system/resource.
        """
        session = resolve_session(session)
        connector = session.cast_connector(CommandConnector)
        rows = connector.execute(cls.schema.command('print'))
        if len(rows) != 1:
            raise EntityError("expected one row in %s, got %d" % (cls.schema.path, len(rows)))
        return cls(session, rows[0])


def entity_type(class_name, schema: EntitySchema):
    """
    Creates an Entity subclass for a schema known only at runtime.
    """
    return type(class_name, (Entity,), {'schema': schema, '__doc__': "Represents one row in %s." % schema.path})
