"""opdoc: command-line usage and graph templates from operator descriptors."""

__version__ = "0.1.0"

# Defaults interpolated into the catalog usage text
DEFAULT_TOOL_NAME = "gpt"
DEFAULT_TARGET_FILEPATH = "target.dim"
DEFAULT_FORMAT_NAME = "BEAM-DIMAP"
DEFAULT_TILE_CACHE_SIZE_MB = 512
