"""
File Extractor - recovers project files from free-form LLM output

Ordered pattern cascade; the first pattern that yields at least one file wins:
1. Path comment + fence:   // src/App.js            then ```jsx ... ```
2. Bold path + fence:      **src/App.js**           then ```jsx ... ```
3. Bare tagged fence:      ```jsx ... ```           path guessed from content

Bare blocks get paths from an ordered rule list (manifest, HTML shell,
Tailwind config, stylesheet, entry point, root component, numbered component),
so the same text always produces the same files.

Never raises. An empty result means the caller must scaffold a default project.
"""

import posixpath
import re
from typing import Dict, List, Optional, Pattern, Set

from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import FileOperation, GeneratedFile, Language
from sandcraft.utils.languages import extension_for_tag, is_script, resolve


# Blocks shorter than this (after stripping) are treated as stray fences
MIN_CONTENT_LENGTH = 10

# Files that live at the project root instead of under /src or /public
ROOT_LEVEL_FILES = ('package.json',)
ROOT_LEVEL_PREFIXES = ('tailwind.', 'postcss.')

_EXTENSIONS = r'(?:jsx?|tsx?|css|html|json|md)'
_PATH = rf'(?:\./|/)?[\w.\-/]+\.{_EXTENSIONS}'
_FENCE_BODY = r'```[^\n]*\n(?P<body>[\s\S]*?)```'


class FileExtractor:
    """Extract (path, content, language) triples from raw LLM text"""

    # 1. "// src/App.js", "1. // package.json", "// File: src/index.css", "<!-- public/index.html -->"
    PATH_COMMENT_PATTERN: Pattern = re.compile(
        rf'^[ \t]*(?:\d+\.[ \t]+)?(?://|#{{1,6}}|<!--|/\*)[ \t]*(?:(?:file|filepath|path)[ \t]*:[ \t]*)?'
        rf'`?(?P<path>{_PATH})`?[ \t]*(?:-->|\*/)?[ \t]*\n'
        rf'\s*{_FENCE_BODY}',
        re.IGNORECASE | re.MULTILINE,
    )

    # 2. "**src/App.js**", "**`src/App.js`**", "**File: src/App.js**"
    BOLD_PATH_PATTERN: Pattern = re.compile(
        rf'^[ \t]*(?:[-*][ \t]+|\d+\.[ \t]+)?\*\*(?:(?:file|filepath|path)[ \t]*:[ \t]*)?'
        rf'`?(?P<path>{_PATH})`?:?\*\*:?[ \t]*\n'
        rf'\s*{_FENCE_BODY}',
        re.IGNORECASE | re.MULTILINE,
    )

    # 3. Any fence with a recognised language tag
    BARE_BLOCK_PATTERN: Pattern = re.compile(
        r'```(?P<tag>javascript|typescript|jsx?|tsx?|css|html|json)[ \t]*\n(?P<body>[\s\S]*?)```',
        re.IGNORECASE,
    )

    @classmethod
    def extract(cls, raw_text: str) -> List[GeneratedFile]:
        """
        Run the pattern cascade over an LLM response.

        Args:
            raw_text: Completion text (markdown prose + fenced code blocks)

        Returns:
            Files in order of appearance; empty list when nothing matched
        """
        if not raw_text or not isinstance(raw_text, str):
            logger.log_pipeline_event("extract", "empty input")
            return []

        text = raw_text.replace('\r\n', '\n')

        for name, pattern in (
            ("path_comment", cls.PATH_COMMENT_PATTERN),
            ("bold_path", cls.BOLD_PATH_PATTERN),
        ):
            files = cls._extract_annotated(text, pattern)
            if files:
                logger.log_pipeline_event("extract", f"{len(files)} files via {name}", pattern=name)
                return files

        files = cls._extract_bare_blocks(text)
        logger.log_pipeline_event(
            "extract",
            f"{len(files)} files via bare_block" if files else "no files found",
            pattern="bare_block",
        )
        return files

    # =========================================================================
    # PATTERNS 1 + 2: explicit paths
    # =========================================================================

    @classmethod
    def _extract_annotated(cls, text: str, pattern: Pattern) -> List[GeneratedFile]:
        files: List[GeneratedFile] = []
        index_by_path: Dict[str, int] = {}

        for match in pattern.finditer(text):
            content = match.group('body').strip()
            if len(content) < MIN_CONTENT_LENGTH:
                continue

            path = normalize_path(match.group('path'))
            if path is None:
                logger.warning(f"[FileExtractor] Skipping block with path outside the project: {match.group('path')}")
                continue
            generated = GeneratedFile(
                path=path,
                content=content,
                language=resolve(path),
                operation=FileOperation.CREATE,
            )

            # Same path twice: later block wins, first position kept
            if path in index_by_path:
                files[index_by_path[path]] = generated
                continue
            index_by_path[path] = len(files)
            files.append(generated)

        return files

    # =========================================================================
    # PATTERN 3: bare blocks + heuristic paths
    # =========================================================================

    @classmethod
    def _extract_bare_blocks(cls, text: str) -> List[GeneratedFile]:
        files: List[GeneratedFile] = []
        taken: Set[str] = set()
        file_index = 1

        for match in cls.BARE_BLOCK_PATTERN.finditer(text):
            tag = match.group('tag').lower()
            content = match.group('body').strip()
            if len(content) < MIN_CONTENT_LENGTH:
                continue

            path = guess_path(content, tag, file_index)
            if path in taken:
                path = numbered_component_path(tag, file_index)
            taken.add(path)

            files.append(GeneratedFile(
                path=path,
                content=content,
                language=resolve(path),
                operation=FileOperation.CREATE,
            ))
            file_index += 1

        return files


def normalize_path(raw_path: str) -> Optional[str]:
    """
    Coerce a model-written path to the Sandpack layout.

    "App.js" -> "/src/App.js", "./public/index.html" -> "/public/index.html",
    "package.json" -> "/package.json", "index.html" -> "/public/index.html"

    Returns None when the path climbs above the project root ("src/../../x.js").
    """
    path = raw_path.strip().strip('`').replace('\\', '/').lstrip('/')
    path = posixpath.normpath(path) if path else path
    if not path or path == '.' or path == '..' or path.startswith('../'):
        return None

    name = path.rsplit('/', 1)[-1]
    if '/' not in path and (name in ROOT_LEVEL_FILES or name.startswith(ROOT_LEVEL_PREFIXES)):
        return '/' + path
    if path.startswith(('src/', 'public/')):
        return '/' + path
    if resolve(path) == Language.HTML:
        return '/public/' + path
    return '/src/' + path


def numbered_component_path(tag: str, index: int) -> str:
    return f"/src/components/Component{index}.{extension_for_tag(tag)}"


_DOCTYPE_OR_HTML = re.compile(r'^\s*(?:<!doctype\s+html|<html[\s>])', re.IGNORECASE)
_ROOT_CREATION = re.compile(r'\bcreateRoot\s*\(|\bReactDOM\.render\s*\(')
_DEFAULT_EXPORT = re.compile(r'\bexport\s+default\b')
_JSX_RETURN = re.compile(r'\breturn\s*\(?\s*<')


def guess_path(content: str, tag: str, index: int) -> str:
    """
    Assign a path to a block that carried no explicit one.

    Rules are checked in order; the first match wins.
    """
    lower = content.lower()
    stripped = content.lstrip()

    # Manifest: object literal declaring both name and dependencies
    if stripped.startswith('{') and '"name"' in lower and '"dependencies"' in lower:
        return '/package.json'

    # HTML shell
    if _DOCTYPE_OR_HTML.match(content):
        return '/public/index.html'

    # Tailwind config object
    if is_script(resolve(tag)) and 'tailwind' in lower and re.search(r'module\.exports\s*=|export\s+default\s*\{', content):
        return '/tailwind.config.js'

    # Global stylesheet carrying the Tailwind directives
    if resolve(tag) == Language.CSS and 'tailwind' in lower:
        return '/src/index.css'

    # Entry point mounting the root component
    if is_script(resolve(tag)) and _ROOT_CREATION.search(content):
        return '/src/index.js'

    # Root application component
    if is_script(resolve(tag)) and (
        re.search(r'\bexport\s+default\s+function\s+App\b', content)
        or (_DEFAULT_EXPORT.search(content) and _JSX_RETURN.search(content))
    ):
        return '/src/App.js'

    return numbered_component_path(tag, index)


# Module-level helper matching the contract `extract(raw_text)`
def extract(raw_text: Optional[str]) -> List[GeneratedFile]:
    return FileExtractor.extract(raw_text or "")
