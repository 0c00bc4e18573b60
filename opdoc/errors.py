"""
Exception types raised by opdoc.
"""


class OpdocError(Exception):
    """Base class for all opdoc errors."""


class DescriptorError(OpdocError):
    """An operator descriptor file could not be turned into a descriptor."""


class GraphError(OpdocError):
    """A graph file is not well-formed or lacks required structure."""


class ConfigError(OpdocError):
    """Configuration values (rc file or environment) are invalid."""
