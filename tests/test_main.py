"""
Tests for the command-line front end.
"""

import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from linkleaf.feed_repository import FeedRepository
from linkleaf.main import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, main
from linkleaf.utils.helpers import derive_link_id

CLEAN_ENV = {key: value for key, value in os.environ.items() if not key.startswith('LINKLEAF_')}


@patch.dict(os.environ, CLEAN_ENV, clear=True)
class TestMain(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.test_dir, 'feed.pb')

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir)

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def add(self, title, url, *extra):
        return self.run_main('add', '--file', self.path, '--title', title, '--url', url,
                             '--date', '2025-08-18', *extra)

    def test_init(self):
        code, out, _ = self.run_main('init', self.path, '--title', 'My Links', '--version', '3')

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, f'initialized {self.path} (version=3, title="My Links")\n')
        feed = FeedRepository().load(self.path)
        self.assertEqual((feed.title, feed.version), ("My Links", 3))

    def test_init_defaults(self):
        code, out, _ = self.run_main('init', self.path)
        self.assertEqual(code, EXIT_OK)
        self.assertIn('(version=1, title="")', out)

    def test_add_prints_assigned_id(self):
        code, out, _ = self.add('Best Practices', 'https://example.org/bp', '--tags', 'protobuf, design')

        link_id = derive_link_id('https://example.org/bp', '2025-08-18')
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, f"added [{link_id}] Best Practices\n")
        self.assertEqual(FeedRepository().load(self.path).links[0].tags, ["protobuf", "design"])

    def test_add_with_explicit_id(self):
        code, out, _ = self.add('Title', 'https://example.org/x', '--id', 'mine')
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, "added [mine] Title\n")

    def test_add_uses_configured_default_path(self):
        default_path = os.path.join(self.test_dir, 'default.pb')
        with patch.dict(os.environ, {"LINKLEAF_FEED_PATH": default_path}):
            code, _, _ = self.run_main('add', '--title', 'T', '--url', 'https://e.x', '--date', '2025-01-01')

        self.assertEqual(code, EXIT_OK)
        self.assertEqual(len(FeedRepository().load(default_path).links), 1)

    def test_add_missing_required_argument(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main('add', '--file', self.path, '--title', 'T')
        self.assertEqual(ctx.exception.code, EXIT_USAGE)

    def test_add_empty_title_is_usage_error(self):
        code, _, err = self.add('', 'https://example.org/x')
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("title", err)
        self.assertFalse(os.path.exists(self.path))

    def test_add_undecodable_title_is_usage_error(self):
        code, _, err = self.add('bad\udcff', 'https://example.org/x')
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("not valid Unicode", err)
        self.assertFalse(os.path.exists(self.path))

    def test_init_undecodable_title_is_usage_error(self):
        code, _, err = self.run_main('init', self.path, '--title', 'bad\udcff')
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("not valid Unicode", err)

    def test_list(self):
        self.run_main('init', self.path, '--title', 'My Links')
        self.add('Older', 'https://example.org/old')
        self.add('Newer', 'https://example.org/new', '--summary', 'A short note', '--via', 'https://via.example')

        code, out, _ = self.run_main('list', self.path)

        self.assertEqual(code, EXIT_OK)
        lines = out.splitlines()
        self.assertTrue(lines[0].startswith('Feed: "My Links"  (version=1, generated_at='))
        self.assertIn("  1) [", lines[1])
        self.assertTrue(lines[1].endswith("] Newer"))
        self.assertIn("     A short note", lines)
        self.assertIn("     via: https://via.example", lines)
        self.assertTrue(any(line.endswith("] Older") and line.startswith("  2) [") for line in lines))

    def test_print(self):
        self.add('Title', 'https://example.org/x', '--tags', 'a,b')

        code, out, _ = self.run_main('print', self.path)

        self.assertEqual(code, EXIT_OK)
        self.assertTrue(out.startswith("FEED\n----\nversion: 0\ntitle: \n"))
        self.assertIn("links: 1\n", out)
        self.assertIn("  url: https://example.org/x\n", out)
        self.assertIn("  tags: a, b\n", out)
        self.assertNotIn("summary:", out)

    def test_list_missing_file(self):
        code, _, err = self.run_main('list', self.path)
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("error:", err)

    def test_print_corrupt_file(self):
        with open(self.path, 'wb') as f:
            f.write(b"\xff\xff")
        code, _, err = self.run_main('print', self.path)
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("Invalid binary feed encoding", err)

    def test_export_and_import(self):
        self.run_main('init', self.path, '--title', 'My Links')
        self.add('Title', 'https://example.org/x')
        json_path = os.path.join(self.test_dir, 'feed.json')

        code, _, _ = self.run_main('export', self.path, '-o', json_path)
        self.assertEqual(code, EXIT_OK)
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data["title"], "My Links")

        data["links"].append({"title": "Hand written", "url": "https://example.org/h", "date": "2025-01-01"})
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(data, f)

        target = os.path.join(self.test_dir, 'imported.pb')
        code, out, _ = self.run_main('import', json_path, target)

        self.assertEqual(code, EXIT_OK)
        self.assertIn("(2 links)", out)
        links = FeedRepository().load(target).links
        self.assertEqual(links[1].id, derive_link_id("https://example.org/h", "2025-01-01"))

    def test_export_to_stdout(self):
        self.run_main('init', self.path, '--title', 'My Links')
        code, out, _ = self.run_main('export', self.path)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(out)["title"], "My Links")

    def test_missing_config_file(self):
        code, _, err = self.run_main('--config', os.path.join(self.test_dir, 'nope.json'), 'list', self.path)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("invalid configuration", err)

    def test_config_path_is_directory(self):
        code, _, err = self.run_main('--config', self.test_dir, 'list', self.path)
        self.assertEqual(code, EXIT_USAGE)
        self.assertIn("invalid configuration", err)

    def test_import_non_object_json(self):
        json_path = os.path.join(self.test_dir, 'bad.json')
        with open(json_path, 'w', encoding='utf-8') as f:
            f.write("[]")

        code, _, err = self.run_main('import', json_path, self.path)
        self.assertEqual(code, EXIT_FAILURE)
        self.assertIn("expected a JSON object", err)
        self.assertFalse(os.path.exists(self.path))


if __name__ == '__main__':
    unittest.main()
