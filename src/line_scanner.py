import re
import logging
from typing import List, Optional, Tuple

from command_registry import CommandRegistry
from data_classes import EXEC_FINDING_TYPE, Finding

logger = logging.getLogger(__name__)

# single line, non-greedy: stops at the first ")" and takes only the first call per line
EXEC_PATTERN = re.compile(r"exec\((.*?)\)")
URL_PATTERN = re.compile(r"https?://[\w/:%#$&?()~.=+\-]+", re.ASCII)

_default_registry = CommandRegistry()


def detect_dangerous_exec(
    content: str, registry: Optional[CommandRegistry] = None
) -> List[Finding]:
    """
    Looks for exec(<argument>) on every line and reports the ones whose argument
    contains a denylisted command name.

    The returned findings carry an empty file_path, the caller attaches it.
    """

    registry = registry or _default_registry
    findings = []

    for i, line in enumerate(content.split("\n"), 1):
        match = EXEC_PATTERN.search(line)
        if not match:
            continue

        command = match.group(1)
        if registry.matches(command):
            findings.append(
                Finding(
                    file_path="",
                    line_number=i,
                    code=command,
                    finding_type=EXEC_FINDING_TYPE,
                )
            )

    return findings


def _trim_unbalanced_parens(url: str) -> str:
    # "exec(curl http://host/x)" should yield "http://host/x"
    while url.endswith(")") and url.count(")") > url.count("("):
        url = url[:-1]
    return url


def detect_urls(content: str) -> List[str]:
    """Returns every http(s) URL in the content in order of appearance, duplicates included.

    Parentheses are valid URL characters, but a trailing ")" with no matching "(" inside
    the URL belongs to the surrounding code and is dropped.
    """
    return [_trim_unbalanced_parens(url) for url in URL_PATTERN.findall(content)]


def scan_content(
    content: str, registry: Optional[CommandRegistry] = None
) -> Tuple[List[Finding], List[str]]:
    findings = detect_dangerous_exec(content, registry)
    urls = detect_urls(content)
    logger.debug(f"Line scan: {len(findings)} findings, {len(urls)} urls")
    return findings, urls
