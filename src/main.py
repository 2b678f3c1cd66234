import sys
import argparse
import logging

import settings
from extension_discovery import (
    InstalledExtension,
    analyze_extensions,
    default_extensions_dir,
    discover_extensions,
    load_metadata,
)
from data_classes import PackageMetadata
from extension_scanner import REMOTE_PREFIXES
from report_formatter import AuditLog

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logging.getLogger("git.cmd").setLevel(logging.WARNING)
logging.getLogger("git.util").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def _warn(name: str) -> None:
    print(f"Possible malicious code found in extension: {name}")


def _target_extensions(args) -> list:
    if args.path:
        if args.path.startswith(REMOTE_PREFIXES):
            name = args.path.rstrip("/").rsplit("/", 1)[-1]
            if name.endswith(".git"):
                name = name[:-4]
            metadata = PackageMetadata(name=name)
        else:
            metadata = load_metadata(args.path)
        return [InstalledExtension(path=args.path, metadata=metadata)]

    return discover_extensions(args.extensions_dir)


def main():
    parser = argparse.ArgumentParser(
        description="Installed extension auditor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
            #Scan every installed VS Code extension
            %(prog)s
            #Scan a single extension directory
            %(prog)s --path ~/.vscode/extensions/publisher.some-extension-1.0.0
            #Scan the source of an extension before installing it
            %(prog)s --path https://github.com/user/extension.git --sarif results.sarif
        """,
    )
    parser.add_argument(
        "--extensions-dir",
        default=default_extensions_dir(),
        help="Directory holding the installed extensions (default: ~/.vscode/extensions)",
    )
    parser.add_argument(
        "--path",
        help="Scan only this extension directory or git URL (https)",
    )
    parser.add_argument(
        "--log",
        default=settings.get_log_file_path(),
        help="Analysis log file, reset on every run (default: ~/Documents/ExtensionAuditor/analysis.log)",
    )
    parser.add_argument(
        "--sarif",
        metavar="FILE",
        help="Also export findings in SARIF format (compatible with GitHub, JetBrains IDEs, VS Code)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        audit_log = AuditLog(args.log)
        audit_log.initialize()

        extensions = _target_extensions(args)
        results = analyze_extensions(extensions, audit_log, notify=_warn)

        flagged = [ext.metadata.name for ext, report in results if report.malicious]

        print("Analysis completed")
        print(f"Extensions scanned: {len(results)}")
        print(f"Extensions flagged: {len(flagged)}")
        for name in flagged:
            print(f"  - {name}")
        print(f"Detailed log saved to: {audit_log.path}")

        if args.sarif:
            from sarif_export import export_to_sarif

            sarif_file = export_to_sarif(
                ((ext.metadata, report) for ext, report in results), args.sarif
            )
            print(f"SARIF exported: {sarif_file}")

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
