"""Path and content patterns used by the relevance classifier.

Paths are repository-relative with forward slashes. Each table is checked
with ``search`` so anchors are explicit in the pattern.
"""

from __future__ import annotations

import re


def _compile(patterns: list[str], flags: int = 0) -> list[re.Pattern[str]]:
    return [re.compile(p, flags) for p in patterns]


# Dropped before classification.
IGNORE_PATTERNS: list[re.Pattern[str]] = _compile(
    [
        # Lock files
        r"(^|/)package-lock\.json$",
        r"(^|/)yarn\.lock$",
        r"(^|/)pnpm-lock\.yaml$",
        r"(^|/)bun\.lockb$",
        r"(^|/)Gemfile\.lock$",
        r"(^|/)poetry\.lock$",
        r"(^|/)Cargo\.lock$",
        r"(^|/)composer\.lock$",
        r"(^|/)uv\.lock$",
        # Build output and dependencies
        r"^dist/",
        r"^build/",
        r"^out/",
        r"^\.next/",
        r"(^|/)node_modules/",
        r"^vendor/",
        r"(^|/)__pycache__/",
        r"\.pyc$",
        # IDE / editor
        r"^\.vscode/",
        r"^\.idea/",
        r"\.swp$",
        r"\.swo$",
        r"(^|/)\.DS_Store$",
        # Binary assets
        r"\.(png|jpe?g|gif|svg|ico|webp|bmp|mp4|mp3|wav|pdf|zip|gz|tar|woff2?|ttf|eot|otf)$",
        # Minified and bundled output
        r"\.min\.(js|css)$",
        r"\.bundle\.(js|css)$",
        # Source maps
        r"\.map$",
        # Env files
        r"(^|/)\.env($|\.)",
        # VCS metadata
        r"^\.git/",
        r"(^|/)\.gitignore$",
        r"(^|/)\.gitattributes$",
    ]
)

TEST_PATTERNS: list[re.Pattern[str]] = _compile(
    [
        r"\.test\.(js|ts|jsx|tsx)$",
        r"\.spec\.(js|ts|jsx|tsx)$",
        r"_test\.(go|py|rb)$",
        r"(^|/)test_[^/]*\.py$",
        r"(^|/)conftest\.py$",
        r"(^|/)tests?/",
        r"(^|/)__tests__/",
        r"^spec/",
    ]
)

CONFIG_PATTERNS: list[re.Pattern[str]] = _compile(
    [
        r"^package\.json$",
        r"^tsconfig[^/]*\.json$",
        r"^next\.config\.(js|ts|mjs)$",
        r"^vite\.config\.(js|ts)$",
        r"^webpack\.config\.(js|ts)$",
        r"^tailwind\.config\.(js|ts)$",
        r"^postcss\.config\.(js|ts|mjs)$",
        r"^\.?eslint[^/]*\.(json|js|cjs)$",
        r"^\.?prettier[^/]*\.(json|js)$",
        r"^jest\.config\.(js|ts)$",
        r"^vitest\.config\.(js|ts)$",
        r"^\.babelrc$",
        r"^Dockerfile$",
        r"^docker-compose\.ya?ml$",
        r"^Makefile$",
        r"^CMakeLists\.txt$",
        r"(^|/)requirements[^/]*\.txt$",
        r"(^|/)pyproject\.toml$",
        r"(^|/)setup\.cfg$",
        r"(^|/)Cargo\.toml$",
        r"(^|/)go\.mod$",
        r"(^|/)go\.sum$",
    ]
)

DOCS_PATTERNS: list[re.Pattern[str]] = _compile(
    [
        r"^README",
        r"^CHANGELOG",
        r"^CONTRIBUTING",
        r"^LICENSE",
        r"^docs?/",
        r"\.mdx?$",
        r"\.rst$",
    ],
    re.IGNORECASE,
)

_PYTHON_ENTRY_POINTS = [
    r"^main\.py$",
    r"^app\.py$",
    r"^__main__\.py$",
    r"^manage\.py$",
    r"^wsgi\.py$",
    r"^asgi\.py$",
]

# Typical entry points per framework.
ENTRY_POINTS: dict[str, list[re.Pattern[str]]] = {
    "nextjs": _compile(
        [
            r"^src/app/page\.(tsx|jsx|ts|js)$",
            r"^src/app/layout\.(tsx|jsx|ts|js)$",
            r"^app/page\.(tsx|jsx|ts|js)$",
            r"^app/layout\.(tsx|jsx|ts|js)$",
            r"^pages/index\.(tsx|jsx|ts|js)$",
            r"^pages/_app\.(tsx|jsx|ts|js)$",
        ]
    ),
    "react": _compile(
        [
            r"^src/App\.(tsx|jsx|ts|js)$",
            r"^src/index\.(tsx|jsx|ts|js)$",
            r"^src/main\.(tsx|jsx|ts|js)$",
        ]
    ),
    "express": _compile(
        [
            r"^(src/)?index\.(ts|js)$",
            r"^(src/)?app\.(ts|js)$",
            r"^(src/)?server\.(ts|js)$",
        ]
    ),
    "python": _compile(_PYTHON_ENTRY_POINTS),
    "django": _compile(_PYTHON_ENTRY_POINTS),
    "flask": _compile(_PYTHON_ENTRY_POINTS),
    "fastapi": _compile(_PYTHON_ENTRY_POINTS),
    "go": _compile([r"^main\.go$", r"^cmd/.*/main\.go$"]),
    "rust": _compile([r"^src/main\.rs$", r"^src/lib\.rs$"]),
}

ALL_ENTRY_POINTS: list[re.Pattern[str]] = [
    p for patterns in ENTRY_POINTS.values() for p in patterns
]

# Core heuristic: conventional source roots, minus generic helper modules.
SOURCE_ROOT = re.compile(r"^(src|lib|app|packages)/")
UTILITY_FILE = re.compile(r"/(utils?|helpers?|constants?|types?|interfaces?)\.")
CORE_CONTENT_THRESHOLD = 1000
DECLARATION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"export\s+(default\s+)?(class|function|const)"),
    re.compile(r"^class\s+\w+", re.MULTILINE),
]

LANGUAGE_MAP: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".swift": "swift",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".c": "c",
    ".h": "c",
    ".hpp": "cpp",
    ".vue": "vue",
    ".svelte": "svelte",
    ".sql": "sql",
    ".sh": "bash",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".toml": "toml",
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".html": "html",
    ".md": "markdown",
}

# package.json dependency -> framework label, first match wins.
NPM_FRAMEWORKS: list[tuple[str, str]] = [
    ("next", "nextjs"),
    ("express", "express"),
    ("react", "react"),
    ("vue", "vue"),
    ("svelte", "svelte"),
    ("@angular/core", "angular"),
    ("fastify", "fastify"),
    ("koa", "koa"),
]

# Python manifest dependency -> framework label, first match wins.
PYTHON_FRAMEWORKS: list[tuple[str, str]] = [
    ("django", "django"),
    ("fastapi", "fastapi"),
    ("flask", "flask"),
]

# Path-shape fallbacks, first match wins.
PATH_FRAMEWORKS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^src/app/|^next\.config\.(js|ts|mjs)$"), "nextjs"),
    (re.compile(r"^(manage|wsgi)\.py$"), "django"),
    (re.compile(r"^(app|flask_app)\.py$"), "flask"),
    (re.compile(r"^main\.go$|^cmd/"), "go"),
    (re.compile(r"^Cargo\.toml$"), "rust"),
]
