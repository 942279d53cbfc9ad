"""Tests for the orchestrating CodeGenerator."""

import ast
from pathlib import Path

import pytest

from gql_typegen.core.artifacts import ArtifactKind
from gql_typegen.core.config import GeneratorConfig
from gql_typegen.core.errors import ArtifactWriteFailure, SchemaSyntaxError
from gql_typegen.core.generator import CodeGenerator
from gql_typegen.core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from gql_typegen.core.parser import parse_schema


@pytest.fixture
def config(tmp_path):
    return GeneratorConfig(
        namespace="blog",
        output_directory=tmp_path / "out",
        scalar_mappings={"Money": "decimal.Decimal"},
    )


class TestGenerateArtifacts:
    """Tests for artifact orchestration."""

    def test_order(self, config, blog_registry):
        artifacts = CodeGenerator(config).generate_artifacts(blog_registry)
        kinds = [a.kind for a in artifacts]
        object_count = len(blog_registry.object_types)

        assert kinds[:2 * object_count] == [ArtifactKind.VALUE, ArtifactKind.SELECTOR] * object_count
        rest = kinds[2 * object_count:]
        assert rest == (
            [ArtifactKind.INPUT] * 2
            + [ArtifactKind.ENUM]
            + [ArtifactKind.ROOT] + [ArtifactKind.OPERATION_BUILDER] * 4
            + [ArtifactKind.ROOT] + [ArtifactKind.OPERATION_BUILDER] * 2
        )

    def test_names(self, config, blog_registry):
        names = [a.name for a in CodeGenerator(config).generate_artifacts(blog_registry)]
        assert names[:4] == ["Node", "NodeSelector", "User", "UserSelector"]
        assert names[-8:] == [
            "QueryRoot", "UserQuery", "UsersQuery", "NodeQuery", "ServerTimeQuery",
            "MutationRoot", "CreateUserMutation", "ResetAllMutation",
        ]

    def test_no_roots(self, config):
        registry = parse_schema("type User { id: ID }")
        artifacts = CodeGenerator(config).generate_artifacts(registry)
        assert [a.kind for a in artifacts] == [ArtifactKind.VALUE, ArtifactKind.SELECTOR]

    def test_pure(self, config, blog_registry):
        generator = CodeGenerator(config)
        first = generator.generate_artifacts(blog_registry)
        second = generator.generate_artifacts(blog_registry)
        assert first == second

    def test_cyclic_schema(self, config, cyclic_registry):
        artifacts = CodeGenerator(config).generate_artifacts(cyclic_registry)
        assert {a.name for a in artifacts} >= {"A", "B", "ASelector", "BSelector", "QueryRoot", "AQuery"}

    def test_hooks(self, config, blog_registry):
        hooks = HookRunner()
        hooks.add_pre_hook(FilterTypesHook(exclude_prefix="Comm"))
        hooks.add_post_hook(AddHeaderHook("# generated"))
        artifacts = CodeGenerator(config, hooks).generate_artifacts(blog_registry)

        assert "Comment" not in {a.name for a in artifacts}
        assert all(a.source.startswith("# generated\n\n") for a in artifacts)


class TestWrite:
    """Tests for writing artifacts to disk."""

    def test_generate_writes_files(self, config, blog_schema):
        result = CodeGenerator(config).generate(blog_schema)
        root = config.output_directory / "blog"

        assert result.output_directory == config.output_directory
        assert result.artifact_count == len(result.artifacts)
        assert (root / "type" / "user.py").is_file()
        assert (root / "type" / "role.py").is_file()
        assert (root / "input" / "create_user_input.py").is_file()
        assert (root / "query" / "user_selector.py").is_file()
        assert (root / "query" / "user_query.py").is_file()
        assert (root / "query" / "query_root.py").is_file()
        assert (root / "mutation" / "create_user_mutation.py").is_file()
        assert (root / "mutation" / "mutation_root.py").is_file()

    def test_package_inits(self, config, blog_schema):
        result = CodeGenerator(config).generate(blog_schema)
        root = config.output_directory / "blog"
        inits = sorted(p.relative_to(root) for p in root.rglob("__init__.py"))

        assert inits == [
            Path("__init__.py"),
            Path("input/__init__.py"),
            Path("mutation/__init__.py"),
            Path("query/__init__.py"),
            Path("type/__init__.py"),
        ]
        assert result.files_written == result.artifact_count + 5

    def test_type_package_rebuilds_models(self, config, blog_schema):
        CodeGenerator(config).generate(blog_schema)
        source = (config.output_directory / "blog" / "type" / "__init__.py").read_text()
        assert "from .user import User" in source
        assert "User.model_rebuild(_types_namespace=_NAMESPACE)" in source
        assert "Role.model_rebuild" not in source
        assert "'Role': Role," in source

    def test_input_package_sees_enums(self, config, blog_schema):
        CodeGenerator(config).generate(blog_schema)
        source = (config.output_directory / "blog" / "input" / "__init__.py").read_text()
        assert "from .create_user_input import CreateUserInput, CreateUserInputBuilder" in source
        assert "from blog.type import Role" in source
        assert "'CreateUserInputBuilder'," in source

    def test_namespace_init(self, config, blog_schema):
        CodeGenerator(config).generate(blog_schema)
        source = (config.output_directory / "blog" / "__init__.py").read_text()
        assert "from .query import QueryRoot" in source
        assert "from .mutation import MutationRoot" in source

    def test_written_files_parse(self, config, blog_schema):
        CodeGenerator(config).generate(blog_schema)
        for path in (config.output_directory / "blog").rglob("*.py"):
            ast.parse(path.read_text(), filename=str(path))

    def test_dotted_namespace(self, tmp_path, blog_schema):
        config = GeneratorConfig(namespace="acme.blog_api", output_directory=tmp_path)
        CodeGenerator(config).generate(blog_schema)
        assert (tmp_path / "acme" / "blog_api" / "type" / "user.py").is_file()
        source = (tmp_path / "acme" / "blog_api" / "query" / "user_query.py").read_text()
        assert "from acme.blog_api.type import User" in source

    def test_generate_from_path(self, config, tmp_path, blog_schema):
        schema_file = tmp_path / "schema.graphql"
        schema_file.write_text(blog_schema)
        result = CodeGenerator(config).generate_from_path(schema_file)
        assert result.artifact_count > 0

    def test_write_failure(self, tmp_path, blog_registry):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        config = GeneratorConfig(namespace="blog", output_directory=blocker)
        generator = CodeGenerator(config)
        artifacts = generator.generate_artifacts(blog_registry)

        with pytest.raises(ArtifactWriteFailure) as exc_info:
            generator.write(artifacts)
        assert "blocked" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, OSError)

    def test_write_can_be_retried_elsewhere(self, tmp_path, blog_registry):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        artifacts = CodeGenerator(
            GeneratorConfig(namespace="blog", output_directory=blocker)
        ).generate_artifacts(blog_registry)

        with pytest.raises(ArtifactWriteFailure):
            CodeGenerator(GeneratorConfig(namespace="blog", output_directory=blocker)).write(artifacts)
        written = CodeGenerator(
            GeneratorConfig(namespace="blog", output_directory=tmp_path / "ok")
        ).write(artifacts)
        assert written == len(artifacts) + 5

    def test_schema_error_writes_nothing(self, config):
        with pytest.raises(SchemaSyntaxError):
            CodeGenerator(config).generate("type {")
        assert not config.output_directory.exists()

    def test_logs_summary(self, config, blog_schema, caplog):
        with caplog.at_level("INFO", logger="gql_typegen"):
            result = CodeGenerator(config).generate(blog_schema)
        assert f"Wrote {result.artifact_count} artifacts" in caplog.text
