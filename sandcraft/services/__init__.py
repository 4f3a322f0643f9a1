from sandcraft.services.file_extractor import FileExtractor
from sandcraft.services.file_repairer import FileRepairer
from sandcraft.services.template_validator import TemplateValidator
from sandcraft.services.project_scaffolder import ProjectScaffolder
from sandcraft.services.provider_gateway import ProviderGateway
from sandcraft.services.generation_pipeline import GenerationPipeline, GenerationResult

__all__ = [
    # Pure normalization stages
    "FileExtractor",
    "FileRepairer",
    "TemplateValidator",
    "ProjectScaffolder",
    # Orchestration
    "ProviderGateway",
    "GenerationPipeline",
    "GenerationResult",
]
