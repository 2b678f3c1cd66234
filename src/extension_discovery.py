import os
import json
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import settings
from data_classes import PackageMetadata, ScanReport
from extension_scanner import ExtensionScanner
from report_formatter import AuditLog, log_package_analysis

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


@dataclass
class InstalledExtension:
    path: str
    metadata: PackageMetadata


def default_extensions_dir() -> str:
    return settings.get_extensions_dir()


def load_metadata(package_dir: str) -> PackageMetadata:
    """Reads the package manifest, falling back to the directory name when it is missing or invalid"""

    manifest_path = os.path.join(package_dir, MANIFEST_NAME)
    fallback = PackageMetadata(name=os.path.basename(os.path.normpath(package_dir)))

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            manifest = json.load(f)
    except FileNotFoundError:
        return fallback
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read manifest {manifest_path}: {e}")
        return fallback

    if not isinstance(manifest, dict):
        logger.warning(f"Unexpected manifest format in {manifest_path}")
        return fallback

    metadata = PackageMetadata.from_manifest(manifest)
    if not metadata.name:
        metadata.name = fallback.name
    return metadata


def discover_extensions(
    extensions_dir: str, exclude: Iterable[str] = (settings.RESERVED_NAME,)
) -> List[InstalledExtension]:
    """Lists the installed extensions, one per sub-directory, sorted by directory name"""

    excluded = set(exclude)
    extensions = []

    with os.scandir(extensions_dir) as it:
        entries = sorted((e for e in it if e.is_dir()), key=lambda e: e.name)

    for entry in entries:
        metadata = load_metadata(entry.path)
        if metadata.name in excluded:
            logger.debug(f"Skipping excluded extension: {metadata.name}")
            continue
        extensions.append(InstalledExtension(path=entry.path, metadata=metadata))

    logger.info(f"Discovered {len(extensions)} extensions in {extensions_dir}")
    return extensions


def analyze_extensions(
    extensions: Iterable[InstalledExtension],
    audit_log: AuditLog,
    notify: Optional[Callable[[str], None]] = None,
) -> List[Tuple[InstalledExtension, ScanReport]]:
    """
    Scans the extensions one after the other and appends one block per extension to the log.

    notify is called with the extension name for every extension with findings. An extension
    whose directory cannot be walked is logged and left out of the results. Log failures propagate.
    """

    reports = []

    for extension in extensions:
        scanner = ExtensionScanner(extension.path, metadata=extension.metadata)
        try:
            report = scanner.scan()
        except OSError as e:
            logger.error(f"Could not analyze extension {extension.metadata.name}: {e}")
            continue

        log_package_analysis(audit_log, extension.metadata, report)
        reports.append((extension, report))

        if report.malicious and notify is not None:
            notify(extension.metadata.name)

    logger.info("Extensions analysis completed. Check the log file for details.")
    return reports
