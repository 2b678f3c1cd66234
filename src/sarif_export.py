import json
from typing import Any, Dict, Iterable, List, Tuple

from data_classes import EXEC_FINDING_TYPE, PackageMetadata, ScanReport

RULE_ID = "potentially-dangerous-exec"


def export_to_sarif(
    results: Iterable[Tuple[PackageMetadata, ScanReport]],
    output_file: str = "results.sarif",
) -> str:
    """Exports the scanned packages and their findings to a SARIF file"""

    results = list(results)

    sarif = {
        "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "Extension-Auditor",
                        "version": "1.0.0",
                        "rules": _generate_rules(),
                    }
                },
                "results": _generate_results(results),
            }
        ],
    }

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(sarif, f, indent=2)

    return output_file


def _generate_rules() -> List[Dict[str, Any]]:
    return [
        {
            "id": RULE_ID,
            "name": "PotentiallyDangerousExec",
            "shortDescription": {"text": "Detects exec() calls running denylisted commands"},
            "fullDescription": {
                "text": "This rule flags exec() invocations whose argument contains a shell, "
                "network, process control or account management command name."
            },
            "help": {
                "text": "Review the invocation and remove the extension if the command is not expected."
            },
            "defaultConfiguration": {"level": _map_level(EXEC_FINDING_TYPE)},
            "properties": {"tags": ["security", "extensions"], "precision": "low"},
        }
    ]


def _generate_results(
    results: List[Tuple[PackageMetadata, ScanReport]]
) -> List[Dict[str, Any]]:
    """Generates one SARIF result per finding, tagged with the package it belongs to"""

    sarif_results = []

    for metadata, report in results:
        for finding in report.findings:
            sarif_results.append(
                {
                    "ruleId": RULE_ID,
                    "level": _map_level(finding.finding_type),
                    "message": {"text": f"{finding.finding_type}: {finding.code}"},
                    "locations": [
                        {
                            "physicalLocation": {
                                "artifactLocation": {"uri": finding.file_path},
                                "region": {
                                    "startLine": finding.line_number,
                                    "snippet": {"text": finding.code},
                                },
                            }
                        }
                    ],
                    "properties": {
                        "package": metadata.name,
                        "version": metadata.version,
                        "publisher": metadata.publisher,
                    },
                }
            )

    return sarif_results


def _map_level(finding_type: str) -> str:
    mapping = {EXEC_FINDING_TYPE: "warning"}
    return mapping.get(finding_type, "note")
