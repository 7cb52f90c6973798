from . import framing
from . import request

from .request import Stream, Server

connect = Stream.connect
