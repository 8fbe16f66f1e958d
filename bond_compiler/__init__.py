"""bond-compiler: compile bond expressions into OpenSearch boolean queries."""

__version__ = "0.1.0"
