from dataclasses import replace
from typing import Iterable

from data_classes import FileScanResult, ScanReport


def aggregate(per_file_results: Iterable[FileScanResult]) -> ScanReport:
    """Merges per-file results into one report for the package.

    Findings get their file path attached and are grouped by "<code> (<type>)".
    URLs are deduplicated, keeping the files each one was found in.
    """

    report = ScanReport()

    for result in per_file_results:
        for finding in result.findings:
            if finding.file_path != result.file_path:
                finding = replace(finding, file_path=result.file_path)
            report.findings.append(finding)

            key = finding.group_key
            if key in report.grouped:
                report.grouped[key] += 1
            else:
                report.grouped[key] = 1

        for url in result.urls:
            files = report.urls.setdefault(url, [])
            if result.file_path not in files:
                files.append(result.file_path)

    return report
