"""
Unit Tests for GenerationPipeline

End-to-end normalization scenarios and pipeline-level properties.
"""
import json

import pytest

from sandcraft.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    InvalidGenerationRequestError,
    ProviderUnavailableError,
)
from sandcraft.models.generated_file import GenerationType
from sandcraft.services.file_extractor import FileExtractor
from sandcraft.services.file_repairer import FileRepairer
from sandcraft.services.generation_pipeline import GenerationPipeline
from sandcraft.services.provider_gateway import ProviderGateway
from sandcraft.services.template_validator import TemplateValidator
from sandcraft.utils.file_templates import FRAMEWORK_IMPORT
from mocks.fake_providers import FakeProvider
from mocks.llm_responses import (
    ANNOTATED_COUNTER_RESPONSE,
    BARE_BLOCKS_RESPONSE,
    BOLD_PATH_RESPONSE,
    FULL_PROJECT_RESPONSE,
    HTML_ATTRIBUTES_RESPONSE,
    INVALID_MANIFEST_RESPONSE,
    UNBALANCED_RESPONSE,
)


ALL_RESPONSES = [
    "",
    "I cannot help with that request.",
    "export default function App() {\n  return <p class=\"x\">Unfenced</p>;\n}",
    "```\n\n```",
    ANNOTATED_COUNTER_RESPONSE,
    FULL_PROJECT_RESPONSE,
    BOLD_PATH_RESPONSE,
    BARE_BLOCKS_RESPONSE,
    HTML_ATTRIBUTES_RESPONSE,
    INVALID_MANIFEST_RESPONSE,
    UNBALANCED_RESPONSE,
]


@pytest.fixture
def pipeline() -> GenerationPipeline:
    return GenerationPipeline()


class TestScenarios:
    """Test the documented normalization scenarios"""

    def test_single_annotated_component(self, pipeline, annotated_counter_response):
        """Test one counter component becomes a complete project"""
        result = pipeline.process_response(annotated_counter_response)
        report = result.report

        assert report.issues.essential_files.missing == [
            "package.json", "public/index.html", "src/index.css", "src/index.js",
        ]
        # only the missing-file and missing-manifest penalties
        assert report.score == 100 - 4 * 15 - 20
        assert report.is_valid is True
        assert len(result.files) >= 5
        assert result.files[0].path == "/src/App.js"

    def test_empty_response(self, pipeline):
        """Test empty text yields the five default files"""
        result = pipeline.process_response("")

        assert [f.path for f in result.files] == [
            "/package.json", "/public/index.html", "/src/index.css", "/src/index.js", "/src/App.js",
        ]
        assert result.report.is_valid is True

    def test_html_attributes_and_missing_import(self, pipeline, html_attributes_response):
        """Test class=/for= are rewritten and the React import added before validation"""
        result = pipeline.process_response(html_attributes_response)
        app = next(f for f in result.files if f.path == "/src/App.js")

        assert app.content.startswith(FRAMEWORK_IMPORT)
        assert 'className="p-4"' in app.content
        assert 'htmlFor="name"' in app.content
        assert not [w for w in result.report.warnings if "/src/App.js" in w]

    def test_invalid_manifest(self, pipeline, invalid_manifest_response):
        """Test a broken manifest is reported, penalized and replaced"""
        result = pipeline.process_response(invalid_manifest_response)
        report = result.report

        assert any(e.file == "/package.json" and e.message == "Invalid JSON syntax" for e in report.issues.syntax.errors)
        assert report.issues.dependencies.valid is False
        assert report.score <= 100 - 20
        assert "✅ Replaced invalid package.json with the default manifest" in report.recommendations
        assert report.is_valid is True
        manifest = next(f for f in result.files if f.path == "/package.json")
        assert json.loads(manifest.content)["dependencies"]["react-dom"]

    def test_invalid_manifest_without_auto_fix(self, invalid_manifest_response):
        """Test the verdict stays invalid when nothing replaces the manifest"""
        files = FileRepairer.repair(FileExtractor.extract(invalid_manifest_response))
        report = TemplateValidator.validate(files, auto_fix=False)

        assert report.is_valid is False

    def test_unbalanced_braces(self, pipeline, unbalanced_response):
        """Test the unbalanced file is listed as incomplete"""
        result = pipeline.process_response(unbalanced_response)
        completeness = result.report.issues.completeness

        assert completeness.incomplete_files == ["/src/components/Broken.jsx"]
        assert "Incomplete file: /src/components/Broken.jsx" in result.report.initial_errors

    def test_unfenced_code_becomes_app(self, pipeline):
        """Test a completion with no code fence keeps its component"""
        raw = (
            "import React from 'react';\n\n"
            "export default function App() {\n"
            "  return <h1 className=\"title\">Hello Sandcraft</h1>;\n"
            "}"
        )
        result = pipeline.process_response(raw)
        app = next(f for f in result.files if f.path == "/src/App.js")

        assert "Hello Sandcraft" in app.content
        assert app.content.count(FRAMEWORK_IMPORT) == 1
        assert result.report.is_valid is True
        assert len(result.files) == 5

    def test_prose_answer_becomes_placeholder_app(self, pipeline):
        result = pipeline.process_response("I cannot help with that request.")
        app = next(f for f in result.files if f.path == "/src/App.js")

        assert "I cannot help with that request." in app.content
        assert "Welcome to Your React App" not in app.content
        assert result.report.is_valid is True

    def test_blank_fence_still_gets_default_app(self, pipeline):
        result = pipeline.process_response("```\n\n```")
        app = next(f for f in result.files if f.path == "/src/App.js")

        assert "Welcome to Your React App" in app.content

    def test_unbalanced_file_kept_after_fix(self, pipeline, unbalanced_response):
        """Test auto-fix completes the project but does not rewrite the broken file"""
        result = pipeline.process_response(unbalanced_response)

        assert "/src/components/Broken.jsx" in [f.path for f in result.files]
        assert result.report.is_valid is False


class TestProperties:
    """Test pipeline-wide properties"""

    @pytest.mark.parametrize("raw", ALL_RESPONSES)
    def test_deterministic(self, pipeline, raw):
        """Test repeated runs produce identical output"""
        first = pipeline.process_response(raw).to_dict()
        second = GenerationPipeline().process_response(raw).to_dict()

        assert first == second

    @pytest.mark.parametrize("raw", ALL_RESPONSES)
    def test_always_executable(self, pipeline, raw):
        """Test every output passes the essential-files check"""
        result = pipeline.process_response(raw)
        assert TemplateValidator.check_essential_files(result.files).all_present is True

    @pytest.mark.parametrize("raw", ALL_RESPONSES)
    def test_repair_idempotent_on_extracted_files(self, pipeline, raw):
        files = pipeline.process_response(raw).files
        once = FileRepairer.repair(files)

        assert FileRepairer.repair(once) == once

    def test_full_project_needs_no_fixes(self, pipeline, full_project_response):
        result = pipeline.process_response(full_project_response)

        assert result.report.score == 100
        assert result.report.recommendations == []
        assert len(result.files) == 5

    def test_none_is_treated_as_empty(self, pipeline):
        result = pipeline.process_response(None)

        assert result.raw_text == ""
        assert result.report.is_valid is True


class TestGenerateProject:
    """Test the provider-backed entry point"""

    @pytest.mark.asyncio
    async def test_primary_result(self, fake_primary, fake_fallback):
        pipeline = GenerationPipeline(ProviderGateway(fake_primary, fake_fallback))
        result = await pipeline.generate_project("create a counter app")

        assert result.provider == "primary"
        assert result.model == "primary-model"
        assert result.usage.total_tokens == 30
        assert result.report.score == 100
        assert result.to_dict()["usage"] == {"promptTokens": 10, "completionTokens": 20, "totalTokens": 30}

    @pytest.mark.asyncio
    async def test_primary_timeout_fallback_result(self, fake_fallback):
        """Test a timed-out primary is invisible to the caller"""
        primary = FakeProvider(name="primary", delay=5.0)
        pipeline = GenerationPipeline(ProviderGateway(primary, fake_fallback, timeout=0.05))

        result = await pipeline.generate_project("create a counter app")

        assert result.provider == "fallback"
        assert result.raw_text == ANNOTATED_COUNTER_RESPONSE
        assert result.report.is_valid is True

    @pytest.mark.asyncio
    async def test_all_failed_propagates(self):
        primary = FakeProvider(name="primary", responses=[ProviderUnavailableError("primary", "down")])
        pipeline = GenerationPipeline(ProviderGateway(primary))

        with pytest.raises(AllProvidersFailedError):
            await pipeline.generate_project("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt", ["", "   ", None])
    async def test_blank_prompt_rejected(self, fake_primary, prompt):
        pipeline = GenerationPipeline(ProviderGateway(fake_primary))

        with pytest.raises(InvalidGenerationRequestError) as exc_info:
            await pipeline.generate_project(prompt)

        assert exc_info.value.details == {"field": "prompt"}
        assert fake_primary.call_count == 0

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, fake_primary):
        pipeline = GenerationPipeline(ProviderGateway(fake_primary))

        with pytest.raises(InvalidGenerationRequestError):
            await pipeline.generate_project("x", "vue")

    @pytest.mark.asyncio
    async def test_type_as_string(self, fake_primary):
        pipeline = GenerationPipeline(ProviderGateway(fake_primary))
        result = await pipeline.generate_project("x", "sandpack")

        assert result.provider == "primary"

    @pytest.mark.asyncio
    async def test_no_gateway(self):
        with pytest.raises(ConfigurationError):
            await GenerationPipeline().generate_project("x", GenerationType.REACT)
