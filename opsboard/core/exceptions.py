# opsboard/core/exceptions.py


class StorageError(Exception):
    """Base class for errors raised by the storage layer"""


class ConfigurationError(StorageError):
    """The selected backend cannot be built from the current configuration"""
