import unittest

from repodiagram.agent.click_events import build_repository_url, is_file_path, rewrite_click_events


class ClickEventRewriterTests(unittest.TestCase):
    def test_files_link_to_blob_and_directories_to_tree(self):
        diagram = 'flowchart TD\n  A["Entry"]\n  click A "src/index.ts"\n  click B "src"\n'

        rewritten = rewrite_click_events(diagram, "o", "r", "main", host="https://github.com")

        self.assertIn('click A "https://github.com/o/r/blob/main/src/index.ts"', rewritten)
        self.assertIn('click B "https://github.com/o/r/tree/main/src"', rewritten)
        self.assertTrue(rewritten.startswith('flowchart TD\n  A["Entry"]\n'))

    def test_path_is_trimmed_and_stray_quotes_removed(self):
        rewritten = rewrite_click_events("click Api \" 'app/api' \"", "o", "r", "dev", host="https://github.com")
        self.assertEqual(rewritten, 'click Api "https://github.com/o/r/tree/dev/app/api"')

    def test_extension_heuristic_only_looks_at_last_segment(self):
        self.assertFalse(is_file_path("v1.2/handlers"))
        self.assertTrue(is_file_path("handlers/v1.2"))
        self.assertTrue(is_file_path("Dockerfile.dev"))
        self.assertFalse(is_file_path("Makefile"))

    def test_non_matching_text_is_left_alone(self):
        diagram = "click\nclick A \"\"\nclick \"quoted\" \"src\"\nA --> B"
        self.assertEqual(rewrite_click_events(diagram, "o", "r", "main"), diagram)

    def test_directive_order_is_preserved(self):
        diagram = 'click Z "z.py"\nclick Y "y"\nclick X "x.md"'
        rewritten = rewrite_click_events(diagram, "o", "r", "main", host="https://github.com")
        names = [line.split()[1] for line in rewritten.splitlines()]
        self.assertEqual(names, ["Z", "Y", "X"])

    def test_host_defaults_to_configured_web_url(self):
        self.assertEqual(
            build_repository_url("octocat", "hello-world", "main", "README"),
            "https://github.com/octocat/hello-world/tree/main/README",
        )


if __name__ == "__main__":
    unittest.main()
