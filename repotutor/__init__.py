"""repotutor: turn a code repository into a multi-chapter tutorial."""

__version__ = "0.1.0"
