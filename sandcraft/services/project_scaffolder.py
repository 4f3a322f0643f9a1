"""
Project Scaffolder / Auto-Fixer

Turns an inspected file set into an executable one:
- synthesizes every missing essential file from the default templates
- replaces an unparseable manifest, merges react/react-dom into one that lacks them
- replaces an entry point that does not mount App with the React 18 bootstrap
- applies the deterministic syntax-warning fixes (className/htmlFor, React import, export)
- builds the root component from raw text when a completion had no code block

Every applied fix is recorded as a recommendation string. Input files are
never mutated.
"""

import json
import re
from dataclasses import replace
from typing import List, Optional

from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import FileOperation, GeneratedFile
from sandcraft.models.validation import (
    MSG_APP_EXPORT,
    MSG_APP_RETURN,
    MSG_CLASS_ATTRIBUTE,
    MSG_ENTRY_ROOT_API,
    MSG_ENTRY_TARGET,
    MSG_FOR_ATTRIBUTE,
    MSG_INVALID_JSON,
    MSG_JSX_WITHOUT_IMPORT,
    MSG_MISSING_EXPORT,
    FixResult,
    ValidationIssues,
    find_finding,
)
from sandcraft.services.file_repairer import (
    component_name,
    ensure_default_export,
    ensure_framework_import,
    fix_html_attributes,
    has_framework_import,
)
from sandcraft.utils import project_layout
from sandcraft.utils.file_templates import (
    APP_COMPONENT,
    ENTRY_BOOTSTRAP,
    FRAMEWORK_IMPORT,
    REACT_DOM_VERSION,
    REACT_VERSION,
    default_manifest,
    get_template,
    prose_app,
)
from sandcraft.utils.languages import resolve

# Fence markers left in a completion the extractor could not split into files
STRAY_FENCE_PATTERN = re.compile(r'```\w*\n?')

# Placeholder Apps show at most this much of a prose answer
PROSE_EXCERPT_LENGTH = 100

# Dropped from the prose excerpt so the placeholder stays balanced
UNBALANCED_CHARS_PATTERN = re.compile(r'[{}()\[\]<>]')


class ProjectScaffolder:
    """Synthesize and patch files until the project can boot in Sandpack"""

    @classmethod
    def auto_fix(cls, files: List[GeneratedFile], issues: ValidationIssues) -> FixResult:
        """
        Apply every fix the inspection results allow.

        Args:
            files: File set that was inspected
            issues: Per-check results from TemplateValidator.inspect

        Returns:
            FixResult with a new file list and one recommendation per applied fix
        """
        fixed = list(files)
        recommendations: List[str] = []

        cls._add_missing_files(fixed, issues, recommendations)
        cls._fix_manifest(fixed, issues, recommendations)
        cls._fix_linkage(fixed, issues, recommendations)
        cls._fix_syntax_warnings(fixed, issues, recommendations)

        logger.log_pipeline_event(
            "auto_fix",
            f"{len(recommendations)} fixes applied, {len(fixed)} files",
            fixes=len(recommendations),
        )
        return FixResult(files=fixed, recommendations=recommendations)

    @classmethod
    def scaffold(cls) -> List[GeneratedFile]:
        """A complete default project (used for empty extractions)"""
        return [cls._from_template(key) for key, _ in project_layout.ESSENTIAL_FILES]

    @classmethod
    def root_component_from_text(cls, raw_text: Optional[str]) -> Optional[GeneratedFile]:
        """
        Build /src/App.js from a completion that had no extractable code block.

        Text that looks like code (declares a function or exports something)
        becomes the App with stray fences removed and a React import added.
        Anything else is shown inside a placeholder App, cut to
        PROSE_EXCERPT_LENGTH characters.

        Returns:
            The root component, or None when the text is blank
        """
        text = STRAY_FENCE_PATTERN.sub('', raw_text or '').strip()
        if not text:
            return None

        if 'function ' in text or 'export ' in text:
            content = text if has_framework_import(text) else f"{FRAMEWORK_IMPORT}\n\n{text}"
            kind = "code"
        else:
            excerpt = UNBALANCED_CHARS_PATTERN.sub('', text[:PROSE_EXCERPT_LENGTH])
            content = prose_app(' '.join(excerpt.split()))
            kind = "prose"

        logger.log_pipeline_event("scaffold", f"App built from unfenced {kind}", kind=kind)
        path = "/" + project_layout.ROOT_COMPONENT
        return GeneratedFile(path=path, content=content, language=resolve(path), operation=FileOperation.CREATE)

    # =========================================================================
    # FIXES
    # =========================================================================

    @classmethod
    def _add_missing_files(cls, files: List[GeneratedFile], issues: ValidationIssues,
                           recommendations: List[str]) -> None:
        for key in issues.essential_files.missing:
            # Re-check: an earlier fix may have produced it
            if project_layout.find(files, key) is not None:
                continue
            files.append(cls._from_template(key))
            recommendations.append(f"✅ Added default {key}")

    @classmethod
    def _fix_manifest(cls, files: List[GeneratedFile], issues: ValidationIssues,
                      recommendations: List[str]) -> None:
        manifest = project_layout.find(files, project_layout.MANIFEST)
        if manifest is None:
            return

        data = project_layout.load_manifest(manifest.content)
        if data is None or find_finding(issues.syntax.errors, manifest.path, MSG_INVALID_JSON):
            _replace_content(files, manifest, default_manifest())
            recommendations.append(f"✅ Replaced invalid {manifest.name} with the default manifest")
            return

        deps = project_layout.merged_dependencies(data)
        pinned = {"react": REACT_VERSION, "react-dom": REACT_DOM_VERSION}
        added = [name for name in project_layout.REQUIRED_DEPENDENCIES if not deps.get(name)]
        if not added:
            return

        section = data.get("dependencies")
        if not isinstance(section, dict):
            section = {}
        for name in added:
            section[name] = pinned[name]
        data["dependencies"] = section

        _replace_content(files, manifest, json.dumps(data, indent=2))
        recommendations.append(f"✅ Added {', '.join(added)} to {manifest.name} dependencies")

    @classmethod
    def _fix_linkage(cls, files: List[GeneratedFile], issues: ValidationIssues,
                     recommendations: List[str]) -> None:
        errors = issues.linkage.errors

        entry = project_layout.find(files, project_layout.ENTRY_POINT)
        if entry is not None and (MSG_ENTRY_ROOT_API in errors or MSG_ENTRY_TARGET in errors):
            _replace_content(files, entry, ENTRY_BOOTSTRAP)
            recommendations.append(f"✅ Replaced {entry.path} with the React 18 bootstrap")

        app = project_layout.find(files, project_layout.ROOT_COMPONENT)
        if app is None:
            return
        if MSG_APP_RETURN in errors:
            _replace_content(files, app, APP_COMPONENT)
            recommendations.append(f"✅ Replaced {app.path} with the default App component")
        elif MSG_APP_EXPORT in errors:
            content = f"{app.content.rstrip()}\n\nexport default {component_name(app.content)};"
            _replace_content(files, app, content)
            recommendations.append(f"✅ Added default export to {app.path}")

    @classmethod
    def _fix_syntax_warnings(cls, files: List[GeneratedFile], issues: ValidationIssues,
                             recommendations: List[str]) -> None:
        for warning in issues.syntax.warnings:
            target = next((f for f in files if f.path == warning.file), None)
            if target is None:
                continue

            if warning.message == MSG_CLASS_ATTRIBUTE:
                content, fix = fix_html_attributes(target.content), f"✅ Fixed className in {target.path}"
            elif warning.message == MSG_FOR_ATTRIBUTE:
                content, fix = fix_html_attributes(target.content), f"✅ Fixed htmlFor in {target.path}"
            elif warning.message == MSG_JSX_WITHOUT_IMPORT:
                content, fix = ensure_framework_import(target.content), f"✅ Added React import to {target.path}"
            elif warning.message == MSG_MISSING_EXPORT:
                content, fix = ensure_default_export(target.content), f"✅ Added default export to {target.path}"
            else:
                continue

            if content != target.content:
                _replace_content(files, target, content)
                recommendations.append(fix)

    @staticmethod
    def _from_template(key: str) -> GeneratedFile:
        template = get_template(key)
        return GeneratedFile(
            path=template["path"],
            content=template["content"],
            language=resolve(template["path"]),
            operation=FileOperation.CREATE,
        )


def _replace_content(files: List[GeneratedFile], target: GeneratedFile, content: str) -> None:
    """Swap `target` for a copy carrying `content`, keeping its position"""
    for i, f in enumerate(files):
        if f is target:
            files[i] = replace(f, content=content)
            return


def auto_fix(files: List[GeneratedFile], issues: ValidationIssues) -> FixResult:
    return ProjectScaffolder.auto_fix(files, issues)
