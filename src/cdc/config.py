""" Process-wide configuration for CDC connections. The defaults here are
    read once, at import time, from the environment; they are immutable
    values shared by every :class:`cdc.Connection` in the process.

    ``CDC_TIMEOUT``
        Default network timeout in seconds for a connection that does not
        specify one. Defaults to 10.

    ``CDC_CLIENT_ID``
        The client identity announced in the registration message. Defaults
        to ``CDC_CONNECTOR``.
"""

import os
import socket


class ConfigurationError(ValueError):
    """ A connection parameter is not usable as given.
    """


version = '1.0.0'
client_id = os.environ.get('CDC_CLIENT_ID', 'CDC_CONNECTOR')

try:
    default_timeout = float(os.environ.get('CDC_TIMEOUT', 10))
except ValueError:
    raise ConfigurationError('CDC_TIMEOUT must be a number of seconds')

if default_timeout <= 0:
    raise ConfigurationError('CDC_TIMEOUT must be positive')



def timeout(value=None):
    """ Resolve a per-connection timeout, in seconds. None selects the
        process default.
    """

    if value is None:
        return default_timeout

    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError('Invalid timeout: ' + repr(value))

    if value <= 0:
        raise ConfigurationError('Invalid timeout: ' + repr(value))

    return value



def address(value):
    """ Only numeric IPv4 addresses are accepted; no name resolution is
        performed.
    """

    try:
        socket.inet_aton(value)
    except (OSError, TypeError, ValueError):
        raise ConfigurationError('Invalid address: ' + str(value))

    return value



def port(value):

    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError('Invalid port: ' + repr(value))

    if value < 0 or value > 65535:
        raise ConfigurationError('Invalid port: ' + repr(value))

    return value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
