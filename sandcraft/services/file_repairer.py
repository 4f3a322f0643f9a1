"""
File Repairer - targeted, idempotent text fixes for extracted files

Rules (applied per file, in this order):
1. Entry point without the React 18 root API -> replaced by the canonical bootstrap
2. HTML attribute names in JSX: class= -> className=, for= -> htmlFor=
3. JSX markup without a React import -> import prepended
4. Component file without any export -> `export default <Name>;` appended

No parsing: every rule is a regex or substring test, so repair(repair(x)) == repair(x).
Input files are never mutated; new GeneratedFile objects are returned.
"""

import re
from dataclasses import replace
from typing import List, Optional

from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import GeneratedFile
from sandcraft.utils.file_templates import ENTRY_BOOTSTRAP, FRAMEWORK_IMPORT
from sandcraft.utils.languages import is_script, resolve
from sandcraft.utils.project_layout import is_component_file, is_entry_point


# Fallback when no capitalized function/const is declared
DEFAULT_COMPONENT_NAME = "Component"

ROOT_API_PATTERN = re.compile(r'\bcreateRoot\s*\(')

# Closing tags, self-closing tags and fragments; TS generics like Array<string> don't match
JSX_MARKUP_PATTERN = re.compile(r'</[A-Za-z][\w.]*\s*>|<[A-Za-z][\w.]*(?:\s[^<>]*)?/>|<>|</>')

FRAMEWORK_IMPORT_PATTERN = re.compile(r'\bimport\s+(?:\*\s+as\s+)?React\b')

CLASS_ATTRIBUTE_PATTERN = re.compile(r'(\s)class=')
FOR_ATTRIBUTE_PATTERN = re.compile(r'(\s)for=')

EXPORT_PATTERN = re.compile(r'\bexport\s')
DECLARATION_PATTERN = re.compile(r'\b(?:function|const)\s')
COMPONENT_FUNCTION_PATTERN = re.compile(r'\bfunction\s+([A-Z]\w*)')
COMPONENT_CONST_PATTERN = re.compile(r'\bconst\s+([A-Z]\w*)\s*=')


def has_jsx(content: str) -> bool:
    return bool(JSX_MARKUP_PATTERN.search(content))


def has_framework_import(content: str) -> bool:
    return bool(FRAMEWORK_IMPORT_PATTERN.search(content))


def has_html_attributes(content: str) -> bool:
    return bool(CLASS_ATTRIBUTE_PATTERN.search(content) or FOR_ATTRIBUTE_PATTERN.search(content))


def has_export(content: str) -> bool:
    return bool(EXPORT_PATTERN.search(content))


def component_name(content: str) -> str:
    """First capitalized function or const declared in `content`"""
    match = COMPONENT_FUNCTION_PATTERN.search(content) or COMPONENT_CONST_PATTERN.search(content)
    return match.group(1) if match else DEFAULT_COMPONENT_NAME


def bootstrap_entry(content: str) -> str:
    if ROOT_API_PATTERN.search(content):
        return content
    return ENTRY_BOOTSTRAP


def fix_html_attributes(content: str) -> str:
    content = CLASS_ATTRIBUTE_PATTERN.sub(r'\1className=', content)
    return FOR_ATTRIBUTE_PATTERN.sub(r'\1htmlFor=', content)


def ensure_framework_import(content: str) -> str:
    if has_jsx(content) and not has_framework_import(content):
        return f"{FRAMEWORK_IMPORT}\n\n{content}"
    return content


def ensure_default_export(content: str) -> str:
    if has_export(content) or not DECLARATION_PATTERN.search(content):
        return content
    return f"{content.rstrip()}\n\nexport default {component_name(content)};"


class FileRepairer:
    """Apply the repair rules to every script file of a file set"""

    @classmethod
    def repair(cls, files: List[GeneratedFile]) -> List[GeneratedFile]:
        repaired: List[GeneratedFile] = []
        changed = 0

        for f in files:
            content = cls.repair_content(f.path, f.content)
            if content != f.content:
                changed += 1
                repaired.append(replace(f, content=content))
            else:
                repaired.append(f)

        logger.log_pipeline_event("repair", f"{changed}/{len(files)} files repaired", changed=changed)
        return repaired

    @staticmethod
    def repair_content(path: str, content: Optional[str]) -> str:
        """Repaired content for one file; non-script files pass through unchanged"""
        content = content if isinstance(content, str) else ""
        if not is_script(resolve(path)):
            return content

        if is_entry_point(path):
            content = bootstrap_entry(content)

        content = fix_html_attributes(content)
        content = ensure_framework_import(content)

        if is_component_file(path):
            content = ensure_default_export(content)

        return content


def repair(files: List[GeneratedFile]) -> List[GeneratedFile]:
    return FileRepairer.repair(files)
