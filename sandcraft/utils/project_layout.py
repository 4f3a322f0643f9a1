"""
Sandpack project layout: essential files and file roles.

Files are matched by path suffix, not exact path, so "/src/App.jsx" and
"/src/App.tsx" both count as the root component.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sandcraft.models.generated_file import GeneratedFile
from sandcraft.utils.languages import is_script, resolve


MANIFEST = "package.json"
HTML_SHELL = "public/index.html"
STYLESHEET = "src/index.css"
ENTRY_POINT = "src/index.js"
ROOT_COMPONENT = "src/App.js"

# Essential file key -> accepted path suffixes, in scaffolding order
ESSENTIAL_FILES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (MANIFEST, ("package.json",)),
    (HTML_SHELL, ("index.html",)),
    (STYLESHEET, ("index.css",)),
    (ENTRY_POINT, (
        "src/index.js", "src/index.jsx", "src/index.ts", "src/index.tsx",
        "src/main.js", "src/main.jsx", "src/main.tsx",
    )),
    (ROOT_COMPONENT, ("App.js", "App.jsx", "App.ts", "App.tsx")),
)

_SUFFIXES = dict(ESSENTIAL_FILES)


def matches(path: str, key: str) -> bool:
    """True if `path` plays the role of essential file `key`"""
    path = "/" + path.lstrip("/")
    return any(path.endswith("/" + suffix) for suffix in _SUFFIXES[key])


def find(files: Iterable[GeneratedFile], key: str) -> Optional[GeneratedFile]:
    for f in files:
        if matches(f.path, key):
            return f
    return None


def missing(files: List[GeneratedFile]) -> List[str]:
    """Essential file keys with no matching file, in scaffolding order"""
    return [key for key, _ in ESSENTIAL_FILES if find(files, key) is None]


def is_entry_point(path: str) -> bool:
    return matches(path, ENTRY_POINT)


def is_root_component(path: str) -> bool:
    return matches(path, ROOT_COMPONENT)


def is_config_file(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    return ".config." in name or name.startswith(("tailwind.", "postcss."))


def is_component_file(path: str) -> bool:
    """Script file expected to export a component (not entry, not config)"""
    return is_script(resolve(path)) and not is_entry_point(path) and not is_config_file(path)


REQUIRED_DEPENDENCIES = ("react", "react-dom")


def load_manifest(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parsed manifest object, or None when the content is not a JSON object"""
    try:
        data = json.loads(content or "")
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def merged_dependencies(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """dependencies + devDependencies; non-object sections are ignored"""
    deps: Dict[str, Any] = {}
    for key in ("dependencies", "devDependencies"):
        section = manifest.get(key)
        if isinstance(section, dict):
            deps.update(section)
    return deps
