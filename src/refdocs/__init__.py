"""refdocs - import parsed documentation trees into a reference content store."""

__version__ = "0.1.0"
