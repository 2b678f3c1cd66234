import os
import logging
import threading

from data_classes import PackageMetadata, ScanReport

logger = logging.getLogger(__name__)

LOG_HEADER = "Extension Analysis Log\n=======================\n\n"
SEPARATOR = "======================="

# shared by every AuditLog so writers to the same file never interleave
_log_lock = threading.Lock()


def format_report(metadata: PackageMetadata, report: ScanReport) -> str:
    """Renders the audit block for one package.

    Grouped findings appear as "<code> (<type>) (x<count>)" in first-seen order,
    followed by the unique URLs, one per line.
    """

    details = "\n".join(f"{key} (x{count})" for key, count in report.grouped.items())
    urls = "\n".join(report.unique_urls)

    return (
        "\n"
        f"Extension: {metadata.name}\n"
        f"Version: {metadata.version}\n"
        f"Publisher: {metadata.publisher}\n"
        f"Description: {metadata.description}\n"
        f"Malicious Code Detected: {'Yes' if report.malicious else 'No'}\n"
        "Details:\n"
        f"{details}\n"
        "URLs Found:\n"
        f"{urls}\n"
        f"{SEPARATOR}\n"
    )


class AuditLog:
    """Append-only text log, one block per scanned package.

    Appends from all instances are serialized by one module lock, so blocks from
    concurrent callers never interleave.
    """

    def __init__(self, path: str):
        self.path = path

    def initialize(self) -> None:
        """Creates the log directory and resets the file to the header, discarding any previous content"""

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with _log_lock:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(LOG_HEADER)
        logger.info(f"Initialized analysis log at {self.path}")

    def append(self, text: str) -> None:
        with _log_lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(text)


def log_package_analysis(
    audit_log: AuditLog, metadata: PackageMetadata, report: ScanReport
) -> str:
    block = format_report(metadata, report)
    audit_log.append(block)
    logger.debug(f"Logged analysis for {metadata.name} to {audit_log.path}")
    return block
