"""memov - daily todos and categorized memos kept as plain Markdown files."""

__version__ = "0.1.0"
