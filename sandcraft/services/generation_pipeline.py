"""
Generation Pipeline - prompt in, validated Sandpack project out

    prompt -> ProviderGateway -> raw text -> FileExtractor -> FileRepairer
           -> TemplateValidator (-> ProjectScaffolder when errors) -> GenerationResult

A completion with no extractable block still yields an App built from its
text; blank text falls through to the default project.

Only the gateway call does I/O. `process_response` runs the pure stages on
text obtained elsewhere (a saved completion, a test fixture).
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from sandcraft.core.exceptions import ConfigurationError, InvalidGenerationRequestError
from sandcraft.core.logging_config import logger
from sandcraft.models.generated_file import GeneratedFile, GenerationType, ProviderUsage, files_to_dicts
from sandcraft.models.validation import ValidationReport
from sandcraft.services.file_extractor import FileExtractor
from sandcraft.services.file_repairer import FileRepairer
from sandcraft.services.project_scaffolder import ProjectScaffolder
from sandcraft.services.provider_gateway import ProviderGateway
from sandcraft.services.template_validator import TemplateValidator


@dataclass
class GenerationResult:
    """Final file set plus the report and the text it came from"""
    files: List[GeneratedFile]
    report: ValidationReport
    raw_text: str
    provider: Optional[str] = None
    model: Optional[str] = None
    usage: ProviderUsage = field(default_factory=ProviderUsage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for API response"""
        return {
            "files": files_to_dicts(self.files),
            "report": self.report.to_dict(include_files=False),
            "rawText": self.raw_text,
            "provider": self.provider,
            "model": self.model,
            "usage": self.usage.to_dict(),
        }


class GenerationPipeline:
    """Glue between the provider gateway and the pure normalization stages"""

    def __init__(self, gateway: Optional[ProviderGateway] = None):
        self.gateway = gateway

    def process_response(self, raw_text: Optional[str]) -> GenerationResult:
        """Extract, repair and validate one completion; never raises for content problems"""
        raw_text = raw_text or ""
        start = time.perf_counter()

        extracted = FileExtractor.extract(raw_text)
        if not extracted:
            app = ProjectScaffolder.root_component_from_text(raw_text)
            extracted = [app] if app else []
        repaired = FileRepairer.repair(extracted)
        report = TemplateValidator.validate(repaired)

        logger.log_performance(
            "process_response",
            (time.perf_counter() - start) * 1000,
            threshold_ms=500,
            extracted=len(extracted),
            final=len(report.fixed_files),
        )
        return GenerationResult(files=report.fixed_files, report=report, raw_text=raw_text)

    async def generate_project(
        self,
        prompt: str,
        generation_type: Union[GenerationType, str] = GenerationType.REACT,
        context: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult:
        """
        Full request: provider call then normalization.

        Raises:
            InvalidGenerationRequestError: blank prompt or unknown generation type
            ConfigurationError: no gateway configured
            AllProvidersFailedError: primary and fallback both failed
        """
        if not prompt or not prompt.strip():
            raise InvalidGenerationRequestError("Prompt is required", field="prompt")
        try:
            generation_type = GenerationType(generation_type)
        except ValueError:
            raise InvalidGenerationRequestError(
                f"Unknown generation type '{generation_type}'", field="type"
            )
        if self.gateway is None:
            raise ConfigurationError("GenerationPipeline needs a ProviderGateway to call providers")

        logger.info(f"[GenerationPipeline] generating type={generation_type.value}, prompt_len={len(prompt)}")

        response = await self.gateway.generate(prompt, generation_type, context or {})
        result = self.process_response(response.content)
        result.provider = response.provider
        result.model = response.model
        result.usage = response.usage

        logger.info(
            f"[GenerationPipeline] {len(result.files)} files from {response.provider}, "
            f"score={result.report.score}, valid={result.report.is_valid}"
        )
        return result
