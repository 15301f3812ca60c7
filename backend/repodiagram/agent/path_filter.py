"""Decide which repository paths are worth showing to the model.

Build output, lockfiles, binaries, images, fonts, caches and editor metadata
add prompt tokens without telling the model anything about architecture.
"""

EXCLUDED_PATTERNS: tuple[str, ...] = (
    "node_modules/",
    "vendor/",
    "venv/",
    ".min.",
    ".pyc",
    ".pyo",
    ".pyd",
    ".so",
    ".dll",
    ".class",
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".ico",
    ".svg",
    ".ttf",
    ".woff",
    ".webp",
    "__pycache__/",
    ".cache/",
    ".tmp/",
    "yarn.lock",
    "poetry.lock",
    # Matched as a literal substring, not a glob.
    "*.log",
    ".vscode/",
    ".idea/",
)


def should_include(path: str) -> bool:
    lowered = path.lower()
    return not any(pattern in lowered for pattern in EXCLUDED_PATTERNS)


def filter_paths(paths: list[str]) -> list[str]:
    """Keep relevant paths, preserving their original order."""
    return [path for path in paths if should_include(path)]
