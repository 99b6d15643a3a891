"""Voice-driven editor commands with streamed code generation."""

__version__ = "0.1.0"
