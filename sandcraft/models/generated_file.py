"""
Generated file model - one source file recovered from (or synthesized for) an LLM response
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Language(str, Enum):
    """Canonical language identifiers"""
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    CSS = "css"
    HTML = "html"
    JSON = "json"
    MARKDOWN = "markdown"
    TEXT = "text"


class FileOperation(str, Enum):
    """What the storage collaborator should do with the file"""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class GenerationType(str, Enum):
    """Kind of generation request; selects the system prompt"""
    REACT = "react"
    SANDPACK = "sandpack"
    COMPONENT = "component"
    GENERAL = "general"


@dataclass
class GeneratedFile:
    """A single project file: Sandpack-style path (/src/App.js) plus content"""
    path: str
    content: str
    language: Language = Language.TEXT
    operation: FileOperation = FileOperation.CREATE

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for the persistence collaborator / API response"""
        return {
            "path": self.path,
            "content": self.content,
            "language": self.language.value,
            "operation": self.operation.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratedFile":
        content = data.get("content")
        return cls(
            path=data.get("path", ""),
            content=content if isinstance(content, str) else "",
            language=Language(data.get("language", Language.TEXT.value)),
            operation=FileOperation(data.get("operation", FileOperation.CREATE.value)),
        )


@dataclass
class ProviderUsage:
    """Token usage reported by a provider"""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": self.total_tokens,
        }


@dataclass
class ProviderResponse:
    """Raw completion text plus metadata; the pipeline only reads `content`"""
    content: str
    provider: str
    model: str = ""
    usage: ProviderUsage = field(default_factory=ProviderUsage)
    stop_reason: Optional[str] = None


def files_to_dicts(files: List[GeneratedFile]) -> List[Dict[str, Any]]:
    return [f.to_dict() for f in files]
