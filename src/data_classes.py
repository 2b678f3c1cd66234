from typing import Any, Dict, List
from dataclasses import dataclass, field

EXEC_FINDING_TYPE = "potentially dangerous exec usage"


@dataclass(frozen=True)
class Finding:
    """Represents a single dangerous exec() invocation detected during a scan"""

    file_path: str
    line_number: int
    code: str
    finding_type: str = EXEC_FINDING_TYPE

    @property
    def group_key(self) -> str:
        return f"{self.code} ({self.finding_type})"


@dataclass(frozen=True)
class UrlOccurrence:
    url: str
    file_path: str


@dataclass
class FileScanResult:
    """Findings and URLs produced for one file"""

    file_path: str
    findings: List[Finding] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)


@dataclass
class ScanReport:
    """Aggregated result of scanning every file of one package.

    grouped maps the "<code> (<type>)" key to its number of occurrences and
    urls maps each unique URL to the files it was found in, both in first-seen order.
    """

    findings: List[Finding] = field(default_factory=list)
    grouped: Dict[str, int] = field(default_factory=dict)
    urls: Dict[str, List[str]] = field(default_factory=dict)
    skipped_files: List[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def malicious(self) -> bool:
        return len(self.findings) > 0

    @property
    def unique_urls(self) -> List[str]:
        return list(self.urls)

    def url_occurrences(self) -> List[UrlOccurrence]:
        return [
            UrlOccurrence(url=url, file_path=path)
            for url, paths in self.urls.items()
            for path in paths
        ]


@dataclass
class PackageMetadata:
    """Describes the scanned package, only used for report headers"""

    name: str = ""
    version: str = ""
    publisher: str = ""
    description: str = ""

    @classmethod
    def from_manifest(cls, manifest: Dict[str, Any]) -> "PackageMetadata":
        return cls(
            name=str(manifest.get("name", "")),
            version=str(manifest.get("version", "")),
            publisher=str(manifest.get("publisher", "")),
            description=str(manifest.get("description", "")),
        )
