from sandcraft.models.generated_file import (
    FileOperation,
    GeneratedFile,
    GenerationType,
    Language,
    ProviderResponse,
    ProviderUsage,
)
from sandcraft.models.validation import FixResult, Inspection, ValidationIssues, ValidationReport

__all__ = [
    "FileOperation",
    "GeneratedFile",
    "GenerationType",
    "Language",
    "ProviderResponse",
    "ProviderUsage",
    "FixResult",
    "Inspection",
    "ValidationIssues",
    "ValidationReport",
]
