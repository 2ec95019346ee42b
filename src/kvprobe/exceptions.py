class KvprobeException(Exception):
    """Base Exception Class"""
    pass

class ConnectionError(KvprobeException):
    """Connection Failure"""
    pass

class ConfigurationError(KvprobeException):
    """Configuration Error (bad file, bad descriptor option, etc.)"""
    pass

class UsageError(KvprobeException):
    """Invalid command line usage"""
    pass

class RecorderError(KvprobeException):
    """Output file could not be written"""
    pass

def describe_error(error: BaseException) -> str:
    """Full human readable description: exception type plus message."""
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name
