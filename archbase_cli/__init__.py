"""archbase-cli: code generation and static analysis for Archbase React projects."""

__version__ = "0.1.0"
