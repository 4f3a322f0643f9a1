"""
Validation result models

Each check of the template validator produces one of the dataclasses below;
ValidationReport bundles them with the score, the error/warning lists and the
auto-fixed file set.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from sandcraft.models.generated_file import GeneratedFile, files_to_dicts


@dataclass
class EssentialFilesCheck:
    all_present: bool
    missing: List[str] = field(default_factory=list)
    found: int = 0
    total: int = 0


@dataclass
class CompletenessCheck:
    all_complete: bool
    incomplete_files: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    complete_count: int = 0
    total_count: int = 0


@dataclass
class SyntaxFinding:
    file: str
    message: str


@dataclass
class SyntaxCheck:
    errors: List[SyntaxFinding] = field(default_factory=list)
    warnings: List[SyntaxFinding] = field(default_factory=list)


@dataclass
class DependencyCheck:
    has_react: bool = False
    has_react_dom: bool = False
    has_react_scripts: bool = False
    valid: bool = False
    dependencies: List[str] = field(default_factory=list)
    versions: Dict[str, str] = field(default_factory=dict)
    issues: List[str] = field(default_factory=list)


@dataclass
class LinkageCheck:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class ValidationIssues:
    """Per-check results for one file set"""
    essential_files: EssentialFilesCheck
    completeness: CompletenessCheck
    syntax: SyntaxCheck
    dependencies: DependencyCheck
    linkage: LinkageCheck

    def to_dict(self) -> Dict[str, Any]:
        return {
            "essentialFiles": asdict(self.essential_files),
            "completeness": asdict(self.completeness),
            "syntax": asdict(self.syntax),
            "dependencies": asdict(self.dependencies),
            "linkage": asdict(self.linkage),
        }


@dataclass
class Inspection:
    """Outcome of running every check once (no fixing)"""
    issues: ValidationIssues
    errors: List[str]
    warnings: List[str]
    score: int


@dataclass
class FixResult:
    """Outcome of the auto-fixer"""
    files: List[GeneratedFile]
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """
    Final verdict for a file set.

    `score` and `issues` describe the files as submitted. `errors` and
    `warnings` are what remains after auto-fix (identical to the initial
    ones when no fix ran); `initial_errors` keeps the pre-fix errors.
    """
    is_valid: bool
    score: int
    errors: List[str]
    warnings: List[str]
    issues: ValidationIssues
    recommendations: List[str] = field(default_factory=list)
    fixed_files: List[GeneratedFile] = field(default_factory=list)
    initial_errors: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "score": self.score,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "files": len(self.fixed_files),
        }

    def to_dict(self, include_files: bool = True) -> Dict[str, Any]:
        data = {
            "isValid": self.is_valid,
            "score": self.score,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "initialErrors": list(self.initial_errors),
            "issues": self.issues.to_dict(),
            "recommendations": list(self.recommendations),
        }
        if include_files:
            data["fixedFiles"] = files_to_dicts(self.fixed_files)
        return data


def find_finding(findings: List[SyntaxFinding], file: str, needle: str) -> Optional[SyntaxFinding]:
    """First finding for `file` whose message contains `needle`"""
    for finding in findings:
        if finding.file == file and needle in finding.message:
            return finding
    return None


# Check messages; the auto-fixer keys its fixes on these
MSG_INVALID_JSON = "Invalid JSON syntax"
MSG_JSX_WITHOUT_IMPORT = "JSX detected but React not imported"
MSG_CLASS_ATTRIBUTE = 'Using "class" instead of "className"'
MSG_FOR_ATTRIBUTE = 'Using "for" instead of "htmlFor"'
MSG_MISSING_EXPORT = "Component file missing export statement"
MSG_HTML_NOT_CLOSED = "HTML not properly closed"
MSG_MISSING_ROOT = "Missing root div element"
MSG_MISSING_DEPENDENCIES = "Missing React or React-DOM in dependencies"
MSG_APP_EXPORT = "App component must have export default"
MSG_APP_RETURN = "App component must return JSX"
MSG_ENTRY_ROOT_API = "Entry point must use ReactDOM.createRoot (React 18)"
MSG_ENTRY_APP = "Entry point should import App component"
MSG_ENTRY_TARGET = "Entry point must target the root element"
