import logging

from tikconnector.connector.base import CommandConnector
from tikconnector.context import resolve_session
from tikconnector.entity.properties import ReadOnlyEntityError, EntityError, EditMode

logger = logging.getLogger(__name__)


class EntityList:
    """
    The rows of one entity kind, loaded through a session.
    :param entity_type  the Entity subclass of the rows
    :param session      the session used to reach the device. The active session when omitted.
    """
    def __init__(self, entity_type, session=None):
        self.entity_type = entity_type
        self.session = resolve_session(session)
        self._items = []

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    @property
    def schema(self):
        return self.entity_type.schema

    def _connector(self) -> CommandConnector:
        return self.session.cast_connector(CommandConnector)

    def load_all(self):
        return self.load()

    def load(self, **queries):
        """
        Replaces the contents with the rows matching the queries.
        Query names use python spelling; 'max_limit' matches the device field 'max-limit'.
        """
        queries = {name.replace('_', '-'): value for name, value in queries.items()}
        rows = self._connector().execute(self.schema.command('print'), queries=queries or None)
        self._items = [self.entity_type(self.session, row) for row in rows]
        logger.debug("loaded %d rows from %s", len(self._items), self.schema.path)
        return self

    def find(self, row_id):
        """ :return: the entity with the given row id, or None """
        for item in self._items:
            if item.id == row_id:
                return item
        return None

    def save(self):
        """
        Sends the modified fields of each row to the device.
        :return: the number of rows updated
        """
        if self.schema.edit_mode is not EditMode.EDITABLE:
            raise ReadOnlyEntityError("rows of %s are read-only" % self.schema.path)
        connector = self._connector()
        count = 0
        for item in self._items:
            changes = item.properties.modified()
            if not changes:
                continue
            if item.id is None:
                raise EntityError("cannot save a row of %s without %s" % (self.schema.path, self.schema.id_field))
            attributes = {self.schema.id_field: item.id}
            attributes.update(changes)
            connector.execute(self.schema.command('set'), attributes)
            item.properties.mark_clean()
            count += 1
        logger.debug("saved %d rows to %s", count, self.schema.path)
        return count
