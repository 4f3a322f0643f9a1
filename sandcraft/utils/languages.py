"""
Language / extension resolver

Maps a file path, extension or fenced-code-block tag to a canonical Language.
Total function: anything unrecognized resolves to Language.TEXT.
"""

from typing import Dict

from sandcraft.models.generated_file import Language


# Extension or fence tag -> language
LANGUAGE_MAP: Dict[str, Language] = {
    'js': Language.JAVASCRIPT,
    'jsx': Language.JAVASCRIPT,
    'mjs': Language.JAVASCRIPT,
    'cjs': Language.JAVASCRIPT,
    'javascript': Language.JAVASCRIPT,
    'ts': Language.TYPESCRIPT,
    'tsx': Language.TYPESCRIPT,
    'typescript': Language.TYPESCRIPT,
    'css': Language.CSS,
    'html': Language.HTML,
    'htm': Language.HTML,
    'json': Language.JSON,
    'md': Language.MARKDOWN,
    'markdown': Language.MARKDOWN,
}

# Where a file of each language goes when nothing better is known
DEFAULT_PATHS: Dict[Language, str] = {
    Language.JAVASCRIPT: '/src/App.js',
    Language.TYPESCRIPT: '/src/App.tsx',
    Language.CSS: '/src/index.css',
    Language.HTML: '/public/index.html',
    Language.JSON: '/package.json',
    Language.MARKDOWN: '/README.md',
    Language.TEXT: '/src/file.txt',
}

SCRIPT_LANGUAGES = (Language.JAVASCRIPT, Language.TYPESCRIPT)


def resolve(path_or_tag: str) -> Language:
    """
    Resolve a path ("/src/App.jsx"), extension (".css") or fence tag ("tsx").

    Examples:
        resolve("/src/App.jsx")  -> Language.JAVASCRIPT
        resolve("json")          -> Language.JSON
        resolve("Dockerfile")    -> Language.TEXT
    """
    if not path_or_tag:
        return Language.TEXT

    key = path_or_tag.strip().lower()
    # Last path segment only; directory names may contain dots
    key = key.rsplit('/', 1)[-1]
    if '.' in key:
        key = key.rsplit('.', 1)[-1]
    return LANGUAGE_MAP.get(key, Language.TEXT)


def default_path(language: Language) -> str:
    return DEFAULT_PATHS.get(language, DEFAULT_PATHS[Language.TEXT])


def extension_for_tag(tag: str) -> str:
    """File extension to use for a bare block with fence tag `tag`"""
    tag = (tag or '').strip().lower()
    if tag in ('js', 'jsx', 'javascript'):
        return 'jsx'
    if tag in ('ts', 'tsx', 'typescript'):
        return 'tsx'
    if tag in LANGUAGE_MAP:
        return tag
    return 'txt'


def is_script(language: Language) -> bool:
    return language in SCRIPT_LANGUAGES
