"""varfilter: placeholder expansion with swappable resolution handlers."""

__version__ = '0.1.0'
