"""Error messages shared by the scan, size and delete workers."""


def describe_os_error(e: OSError) -> str:
    """Turn an OSError into the message carried by error events."""
    if isinstance(e, PermissionError):
        return f"Permission denied: {e}"
    return f"OS error: {e}"
