import unittest
import os
import sys
import tempfile

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from file_walker import walk_files


def _touch(path, content=""):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


class TestFileWalker(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name
        self.addCleanup(self._tmp.cleanup)

    def test_collects_nested_files_in_name_order(self):
        _touch(os.path.join(self.root, "b.js"))
        _touch(os.path.join(self.root, "a", "deep", "x.js"))
        _touch(os.path.join(self.root, "a", "c.txt"))
        _touch(os.path.join(self.root, "package.json"))

        files = walk_files(self.root)
        relative = [os.path.relpath(f, self.root) for f in files]
        self.assertEqual(
            relative,
            [
                os.path.join("a", "c.txt"),
                os.path.join("a", "deep", "x.js"),
                "b.js",
                "package.json",
            ],
        )

    def test_empty_directory(self):
        os.makedirs(os.path.join(self.root, "empty"))
        self.assertEqual(walk_files(self.root), [])

    def test_missing_root_raises(self):
        with self.assertRaises(OSError):
            walk_files(os.path.join(self.root, "does-not-exist"))

    def test_repeated_walk_is_identical(self):
        _touch(os.path.join(self.root, "z", "1.js"))
        _touch(os.path.join(self.root, "y.js"))
        self.assertEqual(walk_files(self.root), walk_files(self.root))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlink_cycle_terminates(self):
        _touch(os.path.join(self.root, "pkg", "index.js"))
        try:
            os.symlink(self.root, os.path.join(self.root, "pkg", "loop"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")

        files = walk_files(self.root)
        self.assertEqual(files, [os.path.join(self.root, "pkg", "index.js")])

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_dangling_symlink_is_skipped(self):
        _touch(os.path.join(self.root, "real.js"))
        try:
            os.symlink(os.path.join(self.root, "missing"), os.path.join(self.root, "dangling"))
            os.symlink(os.path.join(self.root, "real.js"), os.path.join(self.root, "link.js"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")

        self.assertEqual(
            walk_files(self.root),
            [os.path.join(self.root, "link.js"), os.path.join(self.root, "real.js")],
        )

    @unittest.skipUnless(hasattr(os, "mkfifo"), "named pipes not supported")
    def test_named_pipe_is_not_returned(self):
        _touch(os.path.join(self.root, "a.js"), "exec(rm -rf /)\n")
        os.mkfifo(os.path.join(self.root, "pipe"))

        self.assertEqual(walk_files(self.root), [os.path.join(self.root, "a.js")])

    @unittest.skipIf(
        not hasattr(os, "geteuid") or os.geteuid() == 0, "permissions not enforced"
    )
    def test_unreadable_nested_directory_goes_to_callback(self):
        _touch(os.path.join(self.root, "ok.js"))
        locked = os.path.join(self.root, "locked")
        _touch(os.path.join(locked, "secret.js"))
        os.chmod(locked, 0)
        self.addCleanup(os.chmod, locked, 0o755)

        errors = []
        files = walk_files(self.root, on_error=errors.append)

        self.assertEqual(files, [os.path.join(self.root, "ok.js")])
        self.assertEqual(len(errors), 1)

        with self.assertRaises(OSError):
            walk_files(self.root)


if __name__ == "__main__":
    unittest.main()
