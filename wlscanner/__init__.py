"""wlscanner - Wayland protocol scanner generating C bindings."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wlscanner")
except PackageNotFoundError:
    __version__ = "(local)"
