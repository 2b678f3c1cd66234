import os
import logging

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

TOOL_NAME = "ExtensionAuditor"
# manifest name of this tool, never scanned
RESERVED_NAME = "extension-auditor"

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_SCAN_TIME_LIMIT = 120
DEFAULT_CLONE_DEPTH = 1


def _get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        logger.warning(f"Invalid {name} env var, using default {default}")
        return default


def get_log_file_path() -> str:
    """Log destination, <home>/Documents/<tool>/analysis.log unless AUDIT_LOG_FILE is set"""
    path = os.getenv("AUDIT_LOG_FILE")
    if path:
        return os.path.expanduser(path)
    return os.path.join(os.path.expanduser("~"), "Documents", TOOL_NAME, "analysis.log")


def get_extensions_dir() -> str:
    path = os.getenv("EXTENSIONS_DIR")
    if path:
        return os.path.expanduser(path)
    return os.path.join(os.path.expanduser("~"), ".vscode", "extensions")


def get_max_file_size() -> int:
    return _get_int("MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE)


def get_scan_time_limit() -> int:
    """Seconds allowed per package scan, 0 disables the limit"""
    return _get_int("SCAN_TIME_LIMIT", DEFAULT_SCAN_TIME_LIMIT)


def get_clone_depth() -> int:
    return _get_int("CLONE_DEPTH", DEFAULT_CLONE_DEPTH)
