"""Building blocks for an HTTP web framework: renderers, errors, logging, proxies and paths."""

__version__ = "0.1.0"