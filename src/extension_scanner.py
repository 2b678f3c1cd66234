import os
import stat
import time
import shutil
import tempfile
import logging
from typing import List, Optional, Tuple

from git import Repo

import settings
from command_registry import CommandRegistry
from data_classes import FileScanResult, PackageMetadata, ScanReport
from file_walker import walk_files
from line_scanner import scan_content
from report_formatter import AuditLog, log_package_analysis
from result_aggregator import aggregate

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://", "git@", "ssh://")


class ExtensionScanner:
    """This class walks one extension package, scans its files and builds the report"""

    def __init__(
        self,
        root_path: str,
        metadata: Optional[PackageMetadata] = None,
        registry: Optional[CommandRegistry] = None,
    ):
        """
        Initializes ExtensionScanner

        Args:
            root_path (str): Local package directory or remote git URL of its source.
            metadata (PackageMetadata, optional): Report header data, defaults to the directory name.
            registry (CommandRegistry, optional): Denylist used by the exec() detector.
        """

        self.root_path = root_path
        self.metadata = metadata or PackageMetadata(
            name=os.path.basename(os.path.normpath(root_path))
        )
        self.registry = registry or CommandRegistry()
        self.max_file_size = settings.get_max_file_size()
        self.time_limit = settings.get_scan_time_limit()
        self.temp_dir = None

        self.stats = {"files_scanned": 0, "files_skipped": 0}

    def _is_remote_url(self, path: str) -> bool:
        return path.startswith(REMOTE_PREFIXES)

    def _clone_remote_repo(self, url: str) -> str:
        """clones the extension source into a temporary directory"""

        self.temp_dir = tempfile.mkdtemp(prefix="ext_scan_")
        logger.info(f"Cloning repository to {self.temp_dir}...")

        try:
            Repo.clone_from(url, self.temp_dir, depth=settings.get_clone_depth())
            return self.temp_dir
        except Exception as e:
            shutil.rmtree(self.temp_dir, ignore_errors=True)
            self.temp_dir = None
            raise Exception(f"Failed to clone repository: {e}")

    def _resolve_root(self) -> str:
        if self._is_remote_url(self.root_path):
            return self._clone_remote_repo(self.root_path)
        return self.root_path

    def _get_file_content(self, file_path: str) -> str:
        """Reads a file as UTF-8, dropping undecodable bytes. Raises OSError when unreadable"""

        info = os.stat(file_path)
        if not stat.S_ISREG(info.st_mode):
            raise OSError(f"Not a regular file: {file_path}")

        size = info.st_size
        if size > self.max_file_size:
            raise OSError(f"File exceeds {self.max_file_size} bytes ({size})")

        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()

    def _record_skip(self, skipped: List[str], path: str, error: Exception):
        logger.warning(f"Could not read file: {path}: {error}")
        skipped.append(path)
        self.stats["files_skipped"] += 1

    def _scan_files(
        self, files: List[str], skipped: List[str]
    ) -> Tuple[List[FileScanResult], bool]:
        results = []
        truncated = False
        deadline = time.monotonic() + self.time_limit if self.time_limit > 0 else None

        for i, path in enumerate(files, 1):
            if deadline is not None and time.monotonic() > deadline:
                logger.warning(
                    f"Scan time limit of {self.time_limit}s reached for {self.metadata.name}, "
                    f"{len(files) - i + 1} files not scanned"
                )
                truncated = True
                break

            try:
                content = self._get_file_content(path)
            except OSError as e:
                self._record_skip(skipped, path, e)
                continue

            findings, urls = scan_content(content, self.registry)
            results.append(FileScanResult(file_path=path, findings=findings, urls=urls))
            self.stats["files_scanned"] += 1

        return results, truncated

    def scan(self) -> ScanReport:
        """
        Walks the package and returns the aggregated report.

        Raises OSError when the package root cannot be read. Unreadable files are skipped
        and listed in report.skipped_files.
        """

        logger.info(f"Analyzing extension: {self.metadata.name}")

        try:
            root = self._resolve_root()
            skipped: List[str] = []

            files = walk_files(root, on_error=lambda e: skipped.append(str(e.filename)))
            logger.debug(f"Found {len(files)} files under {root}")

            results, truncated = self._scan_files(files, skipped)

            report = aggregate(results)
            report.skipped_files = skipped
            report.truncated = truncated

            logger.info(
                f"{self.metadata.name}: {len(report.findings)} findings, "
                f"{len(report.urls)} unique urls, {len(skipped)} skipped"
            )
            return report

        finally:
            self._cleanup_temp_files()

    def scan_and_log(self, audit_log: AuditLog) -> bool:
        """Scans the package, appends its block to the log and tells whether anything was flagged"""

        report = self.scan()
        log_package_analysis(audit_log, self.metadata, report)
        return report.malicious

    def _cleanup_temp_files(self) -> None:
        if self.temp_dir and os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir, ignore_errors=True)
            logger.info("Cleaned up temp. files")
        self.temp_dir = None
