""" Connection settings. Every setting has a class-level default on
    :class:`Settings`; the defaults can be replaced process-wide through
    environment variables, and per connection through keyword arguments.

    ===========  ====================  ====================
    Setting      Environment           Default
    ===========  ====================  ====================
    transport    GRAPHWIRE_TRANSPORT   zmq
    timeout      GRAPHWIRE_TIMEOUT     60.0 (seconds)
    user         GRAPHWIRE_USER        neo4j
    user_agent   GRAPHWIRE_USER_AGENT  graphwire/<version>
    ===========  ====================  ====================
"""

import os

version = '0.1.0'


def _float(name, default):

    value = os.environ.get(name)

    if value is None or value == '':
        return default

    try:
        return float(value)
    except ValueError:
        raise ValueError("%s must be a number of seconds, not %s" % (name, repr(value)))



class Settings:
    """ A bag of connection settings. Unknown keyword arguments are rejected
        so that a misspelled setting does not silently fall back to its
        default.
    """

    transport = os.environ.get('GRAPHWIRE_TRANSPORT', 'zmq')
    timeout = _float('GRAPHWIRE_TIMEOUT', 60.0)
    user = os.environ.get('GRAPHWIRE_USER', 'neo4j')
    user_agent = os.environ.get('GRAPHWIRE_USER_AGENT', 'graphwire/' + version)

    names = ('transport', 'timeout', 'user', 'user_agent')

    def __init__(self, **overrides):

        for key, value in overrides.items():
            if key not in self.names:
                raise TypeError('unknown setting: ' + repr(key))

            if value is None:
                continue

            if key == 'timeout':
                value = float(value)
                if value <= 0:
                    raise ValueError('timeout must be positive, not ' + repr(value))

            setattr(self, key, value)


    def __repr__(self):
        pairs = ('%s=%r' % (name, getattr(self, name)) for name in self.names)
        return 'Settings(' + ', '.join(pairs) + ')'


    def as_dict(self):
        return dict((name, getattr(self, name)) for name in self.names)


# end of class Settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
