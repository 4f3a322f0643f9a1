"""
Unit Tests for language resolution and project layout helpers
"""
import pytest

from sandcraft.models.generated_file import GeneratedFile, Language
from sandcraft.utils import project_layout
from sandcraft.utils.languages import default_path, extension_for_tag, is_script, resolve


class TestResolve:
    """Test resolve()"""

    @pytest.mark.parametrize("value,expected", [
        ("/src/App.jsx", Language.JAVASCRIPT),
        ("/src/App.tsx", Language.TYPESCRIPT),
        ("index.mjs", Language.JAVASCRIPT),
        (".css", Language.CSS),
        ("tsx", Language.TYPESCRIPT),
        ("JSON", Language.JSON),
        ("javascript", Language.JAVASCRIPT),
        ("/README.md", Language.MARKDOWN),
        ("/public/index.htm", Language.HTML),
        ("Dockerfile", Language.TEXT),
        ("/src/v1.2/Makefile", Language.TEXT),
        ("", Language.TEXT),
        (None, Language.TEXT),
    ])
    def test_resolve(self, value, expected):
        assert resolve(value) == expected

    def test_default_paths(self):
        assert default_path(Language.CSS) == "/src/index.css"
        assert default_path(Language.TEXT) == "/src/file.txt"

    @pytest.mark.parametrize("tag,expected", [
        ("js", "jsx"), ("javascript", "jsx"), ("typescript", "tsx"),
        ("css", "css"), ("json", "json"), ("python", "txt"), (None, "txt"),
    ])
    def test_extension_for_tag(self, tag, expected):
        assert extension_for_tag(tag) == expected

    def test_is_script(self):
        assert is_script(Language.TYPESCRIPT)
        assert not is_script(Language.JSON)


class TestProjectLayout:
    """Test file roles"""

    @pytest.mark.parametrize("path", ["/src/index.js", "/src/index.tsx", "/src/main.jsx", "src/index.js"])
    def test_entry_points(self, path):
        assert project_layout.is_entry_point(path)

    @pytest.mark.parametrize("path", ["/src/pages/index.js", "/src/indexes.js"])
    def test_not_entry_points(self, path):
        """Test only src/index.* and src/main.* count"""
        assert not project_layout.is_entry_point(path)

    def test_root_component_suffix(self):
        assert project_layout.is_root_component("/src/App.tsx")
        assert not project_layout.is_root_component("/src/MyApp.js")

    @pytest.mark.parametrize("path,expected", [
        ("/src/components/Card.jsx", True),
        ("/src/App.js", True),
        ("/src/index.js", False),
        ("/tailwind.config.js", False),
        ("/vite.config.ts", False),
        ("/src/index.css", False),
    ])
    def test_component_files(self, path, expected):
        assert project_layout.is_component_file(path) is expected

    def test_find_first_match(self):
        files = [
            GeneratedFile("/src/App.jsx", "a", Language.JAVASCRIPT),
            GeneratedFile("/src/App.js", "b", Language.JAVASCRIPT),
        ]
        assert project_layout.find(files, project_layout.ROOT_COMPONENT).content == "a"

    @pytest.mark.parametrize("content,expected", [
        ('{"name": "x"}', {"name": "x"}),
        ("[1, 2]", None),
        ("{", None),
        ("", None),
        (None, None),
    ])
    def test_load_manifest(self, content, expected):
        assert project_layout.load_manifest(content) == expected

    def test_merged_dependencies_ignores_bad_sections(self):
        manifest = {"dependencies": ["react"], "devDependencies": {"vite": "^5.0.0"}}
        assert project_layout.merged_dependencies(manifest) == {"vite": "^5.0.0"}
