import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from configobj.validate import Validator

from scpibridge.bridge import BridgeError

# The default extension for configuration files
config_extension = '.cfg'


class ConfigError(BridgeError):
    """ A configuration file could not be read, or failed validation. """


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('server', 'default')
    'server.default'
    >>> config_flavor('server')
    'server'
    """
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an IOError is raised.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise ConfigError(str(e) + ' at ' + file) from e


def config_flavor_file(name, directory, flavor=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The file is named after the base name, followed by a
    period and the flavor when one is given. A missing file gives an empty configuration.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def load_config(name, directory, user_directory=None):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later files overriding earlier ones:
        - the default specialization
        - the platform specialization
        - the user override, from the user's home directory
        - the base configuration
        The result is validated against the "schema" specialization, which also supplies default values.
    :param directory: the location of the configuration files
    :param user_directory: where to find the user override, the home directory if not given.
    :return: the validated ConfigObj
    """
    if user_directory is None:
        user_directory = os.path.expanduser('~')
    config = ConfigObj(interpolation='Template')
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    config.merge(config_flavor_file(name, user_directory))
    config.merge(config_flavor_file(name, directory))

    config.configspec = load_config_schema(name, directory)
    result = config.validate(Validator())
    if result is not True:
        raise ConfigError("the config file %s failed validation %s" % (name, result))
    return config


def load_config_schema(name, directory) -> ConfigObj:
    """
    Loads the validation schema for a configuration. Schema files are read without list parsing so that
    checks with several parameters, such as integer(min=0, max=10), are kept whole.
    """
    file = config_filename(config_flavor(name, 'schema'), directory)
    if not os.path.exists(file):
        return ConfigObj(list_values=False, _inspec=True)
    try:
        return ConfigObj(file, list_values=False, _inspec=True)
    except ConfigObjError as e:
        raise ConfigError(str(e) + ' at ' + file) from e


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:  The root configuration
    :param path:  An iterable that lists the names of the nested sections to resolve
    :return: The configuration section identified by the path, or None if it doesn't exist.
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Applies the values contained in a configuration section to a target object,
    setting any attributes with the same name.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)


def apply_conf_path(conf: Section, name_parts, target):
    """
    Applies the section at the given path to a target object. Nothing is applied if the section doesn't exist.
    """
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)
