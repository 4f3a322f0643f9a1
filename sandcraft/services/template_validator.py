"""
Template Validator - checks that a file set is an executable Sandpack React project

Checks (each feeds errors/warnings and the score):
- Essential files:  manifest, HTML shell, stylesheet, entry point, root component   -15 each missing
- Completeness:     empty/short content, trailing "...", unbalanced {} [] ()        -10 per file
- Syntax:           heuristic JSX/JS checks, manifest JSON, HTML shell             -5 per error
- Dependencies:     react + react-dom declared in the manifest                      -20 flat
- Linkage:          App exports/returns markup, entry mounts App on #root           -8 per error

Validation and fixing are separate pure stages:
    inspect(files)  -> Inspection (no fixing)
    ProjectScaffolder.auto_fix(files, issues) -> FixResult
    validate(files) -> inspect, auto_fix when there are errors, inspect again

`score` and `issues` describe the submitted files; `is_valid` reflects the
errors still present after auto-fix. Warnings never block validity.
"""

import re
from typing import Any, Dict, List

from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import GeneratedFile, Language
from sandcraft.models.validation import (
    MSG_APP_EXPORT,
    MSG_APP_RETURN,
    MSG_CLASS_ATTRIBUTE,
    MSG_ENTRY_APP,
    MSG_ENTRY_ROOT_API,
    MSG_ENTRY_TARGET,
    MSG_FOR_ATTRIBUTE,
    MSG_HTML_NOT_CLOSED,
    MSG_INVALID_JSON,
    MSG_JSX_WITHOUT_IMPORT,
    MSG_MISSING_DEPENDENCIES,
    MSG_MISSING_EXPORT,
    MSG_MISSING_ROOT,
    CompletenessCheck,
    DependencyCheck,
    EssentialFilesCheck,
    Inspection,
    LinkageCheck,
    SyntaxCheck,
    SyntaxFinding,
    ValidationIssues,
    ValidationReport,
)
from sandcraft.services.file_repairer import (
    CLASS_ATTRIBUTE_PATTERN,
    FOR_ATTRIBUTE_PATTERN,
    ROOT_API_PATTERN,
    has_export,
    has_framework_import,
    has_jsx,
)
from sandcraft.services.project_scaffolder import ProjectScaffolder
from sandcraft.utils.file_templates import ROOT_ELEMENT_ID
from sandcraft.utils import project_layout
from sandcraft.utils.languages import is_script, resolve
from sandcraft.utils.project_layout import REQUIRED_DEPENDENCIES, load_manifest, merged_dependencies


# Penalties
MISSING_FILE_PENALTY = 15
INCOMPLETE_FILE_PENALTY = 10
SYNTAX_ERROR_PENALTY = 5
DEPENDENCY_PENALTY = 20
LINKAGE_ERROR_PENALTY = 8

MIN_CONTENT_LENGTH = 10

# "...", "…", "// ...", "/* ... */", "{/* ... */}", "<!-- ... -->" at the very end
ELISION_PATTERN = re.compile(r'(?:\.\.\.|…)\s*(?:\*/\s*\}?|-->)?$')

FUNCTION_DECLARATION_PATTERN = re.compile(r'\bfunction\s+\w+\s*\(')
IMPORT_SOURCE_PATTERN = re.compile(r'''\bimport\s+(?:[\w*{}\s,]+?\s+from\s+)?['"]([^'"]+)['"]''')

_BRACKETS = (('{', '}'), ('[', ']'), ('(', ')'))


class TemplateValidator:
    """Score and report on a Sandpack file set"""

    @classmethod
    def validate(cls, files: List[GeneratedFile], auto_fix: bool = True) -> ValidationReport:
        """
        Validate a file set, auto-fixing when errors are found.

        Args:
            files: Extracted (and repaired) files; never mutated
            auto_fix: Run the scaffolder when the inspection finds errors

        Returns:
            ValidationReport whose `fixed_files` is always a new list
        """
        files = list(files or [])
        initial = cls.inspect(files)

        fixed_files = files
        recommendations: List[str] = []
        errors, warnings = initial.errors, initial.warnings

        if initial.errors and auto_fix:
            fix = ProjectScaffolder.auto_fix(files, initial.issues)
            fixed_files = fix.files
            recommendations = fix.recommendations
            after = cls.inspect(fixed_files)
            errors, warnings = after.errors, after.warnings

        report = ValidationReport(
            is_valid=not errors,
            score=initial.score,
            errors=list(errors),
            warnings=list(warnings),
            issues=initial.issues,
            recommendations=recommendations,
            fixed_files=list(fixed_files),
            initial_errors=list(initial.errors),
        )

        logger.log_pipeline_event(
            "validate",
            f"score={report.score} valid={report.is_valid} "
            f"errors={len(initial.errors)}->{len(errors)} fixes={len(recommendations)}",
            score=report.score,
            valid=report.is_valid,
        )
        return report

    @classmethod
    def inspect(cls, files: List[GeneratedFile]) -> Inspection:
        """Run every check once; no fixing"""
        issues = ValidationIssues(
            essential_files=cls.check_essential_files(files),
            completeness=cls.check_completeness(files),
            syntax=cls.check_syntax(files),
            dependencies=cls.check_dependencies(files),
            linkage=cls.check_linkage(files),
        )

        errors: List[str] = []
        warnings: List[str] = []

        errors.extend(f"Missing essential file: {name}" for name in issues.essential_files.missing)
        errors.extend(f"Incomplete file: {path}" for path in issues.completeness.incomplete_files)
        errors.extend(f"Syntax error in {e.file}: {e.message}" for e in issues.syntax.errors)
        warnings.extend(f"Syntax warning in {w.file}: {w.message}" for w in issues.syntax.warnings)
        if not issues.dependencies.valid:
            errors.append(MSG_MISSING_DEPENDENCIES)
        errors.extend(f"Linkage error: {e}" for e in issues.linkage.errors)
        warnings.extend(f"Linkage warning: {w}" for w in issues.linkage.warnings)

        return Inspection(issues=issues, errors=errors, warnings=warnings, score=cls.calculate_score(issues))

    @classmethod
    def generate_report(cls, files: List[GeneratedFile]) -> Dict[str, Any]:
        """Validation result shaped for a UI panel"""
        report = cls.validate(files)
        return {
            "status": "VALID" if report.is_valid else "INVALID",
            "score": report.score,
            "summary": {
                "valid": report.is_valid,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
                "filesChecked": len(files or []),
            },
            "details": report.issues.to_dict(),
            "errors": report.errors,
            "warnings": report.warnings,
            "recommendations": report.recommendations,
            "fixedFiles": [f.to_dict() for f in report.fixed_files],
        }

    # =========================================================================
    # CHECKS
    # =========================================================================

    @staticmethod
    def check_essential_files(files: List[GeneratedFile]) -> EssentialFilesCheck:
        missing = project_layout.missing(files)
        total = len(project_layout.ESSENTIAL_FILES)
        return EssentialFilesCheck(
            all_present=not missing,
            missing=missing,
            found=total - len(missing),
            total=total,
        )

    @staticmethod
    def check_completeness(files: List[GeneratedFile]) -> CompletenessCheck:
        incomplete: List[str] = []
        issues: List[str] = []

        for f in files:
            problems = completeness_problems(f)
            if problems:
                if f.path not in incomplete:
                    incomplete.append(f.path)
                issues.extend(f"{f.path}: {p}" for p in problems)

        return CompletenessCheck(
            all_complete=not incomplete,
            incomplete_files=incomplete,
            issues=issues,
            complete_count=len(files) - len(incomplete),
            total_count=len(files),
        )

    @staticmethod
    def check_syntax(files: List[GeneratedFile]) -> SyntaxCheck:
        check = SyntaxCheck()

        for f in files:
            content = f.content if isinstance(f.content, str) else ""
            language = resolve(f.path)

            if is_script(language):
                for message in script_syntax_errors(content):
                    check.errors.append(SyntaxFinding(f.path, message))

                if has_jsx(content) and not has_framework_import(content):
                    check.warnings.append(SyntaxFinding(f.path, MSG_JSX_WITHOUT_IMPORT))
                if CLASS_ATTRIBUTE_PATTERN.search(content):
                    check.warnings.append(SyntaxFinding(f.path, MSG_CLASS_ATTRIBUTE))
                if FOR_ATTRIBUTE_PATTERN.search(content):
                    check.warnings.append(SyntaxFinding(f.path, MSG_FOR_ATTRIBUTE))
                if project_layout.is_component_file(f.path) and not has_export(content):
                    check.warnings.append(SyntaxFinding(f.path, MSG_MISSING_EXPORT))

            elif project_layout.matches(f.path, project_layout.MANIFEST):
                if load_manifest(content) is None:
                    check.errors.append(SyntaxFinding(f.path, MSG_INVALID_JSON))

            elif language == Language.HTML:
                if '</html>' not in content.lower():
                    check.errors.append(SyntaxFinding(f.path, MSG_HTML_NOT_CLOSED))
                if not re.search(rf'''id\s*=\s*["']{ROOT_ELEMENT_ID}["']''', content):
                    check.warnings.append(SyntaxFinding(f.path, MSG_MISSING_ROOT))

        return check

    @staticmethod
    def check_dependencies(files: List[GeneratedFile]) -> DependencyCheck:
        manifest = project_layout.find(files, project_layout.MANIFEST)
        if manifest is None:
            return DependencyCheck(issues=["package.json not found"])

        data = load_manifest(manifest.content)
        if data is None:
            return DependencyCheck(issues=["Invalid package.json JSON"])

        deps = merged_dependencies(data)
        check = DependencyCheck(
            has_react=bool(deps.get("react")),
            has_react_dom=bool(deps.get("react-dom")),
            has_react_scripts=bool(deps.get("react-scripts")),
            dependencies=list(deps),
            versions={name: str(deps.get(name) or "missing") for name in REQUIRED_DEPENDENCIES},
        )
        check.valid = check.has_react and check.has_react_dom
        check.issues = [f"{name} not declared" for name in REQUIRED_DEPENDENCIES if not deps.get(name)]
        return check

    @staticmethod
    def check_linkage(files: List[GeneratedFile]) -> LinkageCheck:
        check = LinkageCheck()

        app = project_layout.find(files, project_layout.ROOT_COMPONENT)
        if app is not None:
            content = app.content or ""
            if "export default" not in content:
                check.errors.append(MSG_APP_EXPORT)
            if "return" not in content and "render" not in content:
                check.errors.append(MSG_APP_RETURN)

        entry = project_layout.find(files, project_layout.ENTRY_POINT)
        if entry is not None:
            content = entry.content or ""
            if not ROOT_API_PATTERN.search(content):
                check.errors.append(MSG_ENTRY_ROOT_API)
            if "App" not in content:
                check.warnings.append(MSG_ENTRY_APP)
            if "document.getElementById" not in content:
                check.errors.append(MSG_ENTRY_TARGET)

        # Sandpack only ships react + react-dom
        for f in files:
            if not is_script(resolve(f.path)) or project_layout.is_entry_point(f.path):
                continue
            seen = set()
            for source in IMPORT_SOURCE_PATTERN.findall(f.content or ""):
                if source.startswith((".", "/", "react")) or source in seen:
                    continue
                seen.add(source)
                check.warnings.append(f'{f.path}: Import from external package "{source}"')

        return check

    @staticmethod
    def calculate_score(issues: ValidationIssues) -> int:
        score = 100
        score -= len(issues.essential_files.missing) * MISSING_FILE_PENALTY
        score -= len(issues.completeness.incomplete_files) * INCOMPLETE_FILE_PENALTY
        score -= len(issues.syntax.errors) * SYNTAX_ERROR_PENALTY
        if not issues.dependencies.valid:
            score -= DEPENDENCY_PENALTY
        score -= len(issues.linkage.errors) * LINKAGE_ERROR_PENALTY
        return max(0, score)


# =============================================================================
# HELPERS
# =============================================================================

def completeness_problems(f: GeneratedFile) -> List[str]:
    if not isinstance(f.content, str) or not f.content.strip():
        return ["Missing or invalid content"]

    content = f.content.strip()
    problems: List[str] = []

    if len(content) < MIN_CONTENT_LENGTH or ELISION_PATTERN.search(content):
        problems.append("Content appears incomplete or too short")

    if is_script(resolve(f.path)):
        unbalanced = [
            f"{opening}{closing}" for opening, closing in _BRACKETS
            if content.count(opening) != content.count(closing)
        ]
        if unbalanced:
            problems.append(f"Unmatched braces/brackets/parentheses ({', '.join(unbalanced)})")

    return problems


def script_syntax_errors(content: str) -> List[str]:
    """Heuristic errors for a JS/TS file; a real parser is out of reach"""
    errors: List[str] = []

    if FUNCTION_DECLARATION_PATTERN.search(content) and not content.rstrip().endswith('}'):
        if content.count('{') > content.count('}'):
            errors.append("Unclosed function body")

    if '=>' in content and 'function' not in content:
        if content.count('(') != content.count(')'):
            errors.append("Arrow function has unmatched parentheses")

    if 'export default' in content and has_jsx(content) and 'return' not in content and '=>' not in content:
        errors.append("JSX component without return statement")

    return errors


def validate(files: List[GeneratedFile]) -> ValidationReport:
    return TemplateValidator.validate(files)
