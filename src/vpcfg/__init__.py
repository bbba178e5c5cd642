# coding: utf-8
#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your rights.
#
"""Utilities that find and read the vproweather configuration file"""

import os.path

import configobj

DEFAULT_LOCATIONS = ['.', '/etc/vproweather', os.path.expanduser('~/.vproweather')]

DEFAULT_FILE_NAME = 'vproweather.conf'

# Name of the section holding the console options:
SECTION = 'Vantage'


def find_file(file_path=None, locations=DEFAULT_LOCATIONS, file_name=DEFAULT_FILE_NAME):
    """Find and return a path to a file, looking in "the usual places."

    If file_path is given, it must name an existing file. Otherwise, the list of
    directory locations is searched, looking for a file with file name file_name.

    Args:
        file_path (str): A candidate path to the file.
        locations (list[str]): A list of directories to be searched. Relative
            directories are taken relative to the current working directory.
        file_name (str): The name of the file to be found. This is used
            only if the directories must be searched.

    Returns:
        str: full path to the file

    Raises:
        IOError: If the file cannot be found, or is not a file.
    """

    if file_path is None:
        for directory in locations:
            candidate = os.path.abspath(os.path.join(directory, file_name))
            if os.path.isfile(candidate):
                return candidate

    if file_path is None:
        raise IOError("Unable to find file '%s'. Tried directories %s"
                      % (file_name, locations))
    elif not os.path.isfile(file_path):
        raise IOError("%s is not a file" % file_path)

    return file_path


def read_config(config_path, locations=DEFAULT_LOCATIONS,
                file_name=DEFAULT_FILE_NAME, interpolation='ConfigParser'):
    """Read the specified configuration file, return an instance of ConfigObj
    with the file contents. If no file is specified, look in the standard
    locations for vproweather.conf. Returns the filename of the actual
    configuration file, as well as the ConfigObj.

    Args:

        config_path (str): configuration filename.
        locations (list[str]): A list of directories to search.
        file_name (str): The name of the config file. Default is 'vproweather.conf'
        interpolation (str): The type of interpolation to use when reading the config file.
            Default is 'ConfigParser'.

    Returns:
        (str, configobj.ConfigObj): path-to-file, instance-of-ConfigObj

    Raises:
        SyntaxError: If there is a syntax error in the file
        IOError: If the file cannot be found
    """
    # Find and open the config file:
    config_path = find_file(config_path,
                            locations=locations, file_name=file_name)
    try:
        # Now open it up and parse it.
        config_dict = configobj.ConfigObj(config_path,
                                          interpolation=interpolation,
                                          file_error=True,
                                          encoding='utf-8',
                                          default_encoding='utf-8')
    except configobj.ConfigObjError as e:
        # Add on the path of the offending file, then reraise.
        e.msg += " File '%s'." % config_path
        raise

    # Remember where we found the config file
    config_dict['config_path'] = os.path.realpath(config_path)

    return config_path, config_dict


def load_config(config_path=None, locations=DEFAULT_LOCATIONS):
    """Like read_config(), except a missing file is only an error if it was asked for explicitly.

    Returns:
        (str|None, configobj.ConfigObj): path-to-file (None if no file was found), and the
            configuration. The configuration always holds a [Vantage] section.
    """
    try:
        config_fn, config_dict = read_config(config_path, locations=locations)
    except IOError:
        if config_path is not None:
            raise
        config_fn, config_dict = None, configobj.ConfigObj(interpolation=False, encoding='utf-8')

    if SECTION not in config_dict:
        config_dict[SECTION] = {}

    return config_fn, config_dict


def merge_options(config_dict, options):
    """Overlay values given on the command line on top of the [Vantage] section.

    Args:
        config_dict(configobj.ConfigObj): The configuration. Modified in place.
        options(dict): Option name to value. Entries with value None were not given on the
            command line and are ignored.

    Returns:
        configobj.Section: The updated [Vantage] section.
    """
    section = config_dict.setdefault(SECTION, {})
    for key, value in options.items():
        if value is not None:
            section[key] = value
    return config_dict[SECTION]
