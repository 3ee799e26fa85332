import logging
import os
import platform

from configobj import ConfigObj, Section, ConfigObjError, flatten_errors
from validate import Validator

logger = logging.getLogger(__name__)

config_extension = '.cfg'

# directory holding the schemas shipped with the package
schema_directory = os.path.dirname(os.path.abspath(__file__))


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('tikconnector', 'linux')
    'tikconnector.linux'
    """
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory=None):
    """ the path of '<name>.cfg' in the directory, the current directory when None """
    if directory is None:
        directory = os.getcwd()
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Reads one configuration file.
    :param file:        path of the file
    :param must_exist:  when False, a missing file gives an empty configuration instead of an IOError
    """
    if must_exist or os.path.exists(file):
        return ConfigObj(file, interpolation='Template', file_error=must_exist)
    return ConfigObj()


def config_flavor_file(name, directory=None, flavor=None, must_exist=False) -> ConfigObj:
    """
    Reads '<name>.<flavor>.cfg', or '<name>.cfg' without a flavor. Flavors hold the values shared
    by a group of installations, such as 'default' or the platform name.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), must_exist)


def load_schema(name, directory=None):
    """
    Loads the configspec '<name>.schema.cfg', looking first in the given directory and then among the
    schemas shipped with the package.
    """
    file = config_filename(config_flavor(name, 'schema'), directory)
    if not os.path.exists(file):
        file = config_filename(config_flavor(name, 'schema'), schema_directory)
    return ConfigObj(file, _inspec=True, file_error=True)


def load_config(name, directory=None, include_user=True):
    """
    Builds the configuration for name from its layers, each overriding the ones before it:
        <name>.default.cfg, <name>.<platform>.cfg, ~/<name>.cfg (when include_user), <name>.cfg
    None of the files is required. The result is validated against the schema, which fills in
    defaults and converts values to their declared types.
    Raises ConfigObjError after logging each value that fails validation.
    """
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, platform.system().lower()))
    if include_user:
        config.merge(load_config_file_base(os.path.expanduser('~/' + name + config_extension), must_exist=False))
    config.merge(config_flavor_file(name, directory))

    config.configspec = load_schema(name, directory)
    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        for section_list, key, res in flatten_errors(config, result):
            if key is not None:
                logger.error("'%s' in [%s] is invalid: %s", key, ', '.join(section_list), res)
            else:
                logger.error("missing section [%s]", ', '.join(section_list))
        raise ConfigObjError("the %s configuration failed validation" % name)
    return config


def fetch_conf_path(conf: Section, path):
    """ :return: the section reached by following the section names in path, or None if one is missing """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf_path(conf: Section, name_parts, target):
    """ applies the section at name_parts to target. A missing section leaves target unchanged. """
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def apply_conf(conf: Section, target):
    """
    Copies each value of the section onto the target attribute of the same name.
    Subsections and names the target does not already have are skipped.
    """
    for k, v in conf.items():
        if hasattr(target, k) and not isinstance(v, Section):
            setattr(target, k, v)
