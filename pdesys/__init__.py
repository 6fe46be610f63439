"""The py-pdesys package provides symbolic descriptions of PDE systems."""

# determine the package version
try:
    # try reading version of the automatically generated module
    from ._version import __version__
except ImportError:
    # determine version automatically from package information
    from importlib.metadata import PackageNotFoundError, version

    try:
        __version__ = version("py-pdesys")
    except PackageNotFoundError:
        # package is not installed, so we cannot determine any version
        __version__ = "unknown"
    del PackageNotFoundError, version  # clean name space

# initialize the configuration
from .tools.config import Config, environment  # noqa: F401

config = Config()  # initialize the default configuration

# import most common classes into main name space
from .domains import *  # noqa: F403
from .symbolic import *  # noqa: F403
from .systems import *  # noqa: F403

# register the problems of the library in the process-wide registry
from . import library  # noqa: F401, E402

del Config  # clean name space
