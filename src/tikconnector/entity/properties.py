import re
from datetime import timedelta
from enum import Enum


class EditMode(Enum):
    READ_ONLY = 'read-only'
    EDITABLE = 'editable'


class EntityError(Exception):
    """ base class for errors raised by entities and their property stores. """


class ReadOnlyEntityError(EntityError):
    """ A field was written on a read-only entity, or a read-only field was written. """


class PropertyCoercionError(EntityError, ValueError):
    """ A field is present but its value cannot be represented as the requested type. """
    def __init__(self, name, value, type_name):
        super().__init__("field '%s' value '%s' is not a valid %s" % (name, value, type_name))
        self.name = name
        self.value = value


true_values = ('true', 'yes')
false_values = ('false', 'no')

duration_units = (('w', 604800), ('d', 86400), ('h', 3600), ('m', 60), ('s', 1))
_duration_pattern = re.compile(
    r'^(?:(?P<w>\d+)w)?(?:(?P<d>\d+)d)?'
    r'(?:(?:(?P<h>\d+)h)?(?:(?P<m>\d+)m(?!s))?(?:(?P<s>\d+)s)?(?:(?P<ms>\d+)ms)?'
    r'|(?P<hh>\d+):(?P<mm>\d\d):(?P<ss>\d\d)(?:\.(?P<frac>\d+))?)$')


def parse_duration(text):
    """
    Parses a RouterOS time interval.
    >>> parse_duration('1w2d03:04:05')
    datetime.timedelta(days=9, seconds=11045)
    >>> parse_duration('5m30s')
    datetime.timedelta(seconds=330)
    :return: the timedelta, or None if the text is not an interval.
    """
    match = _duration_pattern.match(text)
    if not match or not text:
        return None
    parts = {k: int(v) for k, v in match.groupdict().items() if v is not None and k != 'frac'}
    seconds = sum(parts.get(unit, 0) * factor for unit, factor in duration_units)
    seconds += parts.get('hh', 0) * 3600 + parts.get('mm', 0) * 60 + parts.get('ss', 0)
    result = timedelta(seconds=seconds, milliseconds=parts.get('ms', 0))
    if match.group('frac'):
        result += timedelta(seconds=float('0.' + match.group('frac')))
    return result


def format_duration(value: timedelta):
    """
    >>> format_duration(timedelta(days=1, seconds=3661))
    '1d1h1m1s'
    """
    if value < timedelta(0):
        raise ValueError("negative interval %s has no device form" % value)
    total_ms = int(round(value.total_seconds() * 1000))
    seconds, ms = divmod(total_ms, 1000)
    text = ''
    for unit, factor in duration_units:
        count, seconds = divmod(seconds, factor)
        if count:
            text += '%d%s' % (count, unit)
    if ms:
        text += '%dms' % ms
    return text or '0s'


def format_value(value):
    """ converts a python value to the text form used by the device. """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return ','.join(format_value(v) for v in value)
    return str(value)


class PropertyStore:
    """
    The raw field values of one row, keyed by the case-sensitive field name.

    Values are kept as delivered by the device; the get_as_xxx_or_none accessors coerce them on each read
    and return None when the field is absent. Fields no accessor knows about are kept as they are.
    set_attribute is only permitted when the store is EDITABLE.
    """

    def __init__(self, values=None, edit_mode=EditMode.READ_ONLY):
        self._values = {}
        self._modified = set()
        self.edit_mode = edit_mode
        if values:
            self.load(values)

    def __contains__(self, name):
        return name in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return '%s(%r, %s)' % (type(self).__name__, self._values, self.edit_mode)

    @property
    def editable(self):
        return self.edit_mode is EditMode.EDITABLE

    def items(self):
        return self._values.items()

    def raw(self, name):
        return self._values.get(name)

    def load(self, values):
        """ replaces the contents with a row read from the device. Permitted regardless of the edit mode. """
        self._values = dict(values)
        self._modified = set()

    def modified(self):
        """ :return: a dict of the fields set since the last load or mark_clean """
        return {name: self._values[name] for name in self._modified}

    def mark_clean(self):
        self._modified = set()

    def set_attribute(self, name, value):
        if not self.editable:
            raise ReadOnlyEntityError("cannot set field '%s': entity is read-only" % name)
        self._values[name] = format_value(value)
        self._modified.add(name)

    def _typed_value(self, name):
        # an empty value is how the device (and set_attribute(name, None)) spells "not set"
        value = self._values.get(name)
        return None if value == '' else value

    def get_as_string_or_none(self, name):
        value = self._values.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else format_value(value)

    def get_as_int_or_none(self, name):
        value = self._typed_value(name)
        if value is None:
            return None
        if isinstance(value, bool):
            raise PropertyCoercionError(name, value, 'integer')
        try:
            return int(value)
        except (TypeError, ValueError):
            raise PropertyCoercionError(name, value, 'integer') from None

    def get_as_bool_or_none(self, name):
        value = self._typed_value(name)
        if value is None or isinstance(value, bool):
            return value
        text = str(value).lower()
        if text in true_values:
            return True
        if text in false_values:
            return False
        raise PropertyCoercionError(name, value, 'boolean')

    def get_as_list_or_none(self, name):
        """ a comma separated set, e.g. topics 'system,info' """
        value = self._values.get(name)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return list(value)
        if not isinstance(value, str):
            raise PropertyCoercionError(name, value, 'list')
        return value.split(',') if value else []

    def get_as_duration_or_none(self, name):
        value = self._typed_value(name)
        if value is None or isinstance(value, timedelta):
            return value
        result = parse_duration(value) if isinstance(value, str) else None
        if result is None:
            raise PropertyCoercionError(name, value, 'duration')
        return result

    def get_as_enum_or_none(self, name, enum_type):
        value = self._typed_value(name)
        if value is None or isinstance(value, enum_type):
            return value
        try:
            return enum_type(value)
        except ValueError:
            raise PropertyCoercionError(name, value, enum_type.__name__) from None
