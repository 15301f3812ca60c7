import pytest

from repodiagram.agent.path_filter import EXCLUDED_PATTERNS, filter_paths, should_include


def test_source_file_is_included():
    assert should_include("src/index.ts") is True


@pytest.mark.parametrize("pattern", EXCLUDED_PATTERNS)
def test_every_denylisted_substring_is_excluded_in_any_case(pattern):
    assert should_include(f"pkg/{pattern}rest") is False
    assert should_include(f"pkg/{pattern.upper()}rest") is False


@pytest.mark.parametrize(
    "path",
    [
        "frontend/node_modules/react/index.js",
        "assets/Logo.PNG",
        "static/app.min.js",
        "backend/__pycache__/models.cpython-312.pyc",
        "yarn.lock",
        ".idea/workspace.xml",
    ],
)
def test_noise_paths_are_excluded(path):
    assert should_include(path) is False


def test_glob_looking_pattern_is_matched_literally():
    assert should_include("logs/server.log") is True
    assert should_include("logs/*.log") is False


def test_filter_paths_preserves_tree_order():
    paths = ["src", "src/b.py", "img/a.png", "README.md", "src/a.py"]
    assert filter_paths(paths) == ["src", "src/b.py", "README.md", "src/a.py"]


def test_should_include_is_deterministic():
    assert [should_include("docs/guide.md") for _ in range(3)] == [True, True, True]
