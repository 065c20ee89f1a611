"""Tests for node record construction."""

from nggraph_cli.builder import build_node_record
from nggraph_cli.identity import AnalysisContext
from nggraph_cli.syntax import (
    ClassDeclarationNode,
    Decorator,
    DecoratorArgument,
    FunctionDeclarationNode,
    ObjectProperty,
    SourceFileNode,
    UnsupportedNode,
    VariableDeclarationNode,
)


def test_scenario_service_provided_in_root(context: AnalysisContext):
    """Test a service provided in root."""
    decorator = Decorator(
        name="Injectable",
        arguments=[DecoratorArgument(
            text="{ providedIn: 'root' }",
            properties=[ObjectProperty(name="providedIn", value="root")],
        )],
        text="@Injectable({ providedIn: 'root' })",
    )
    node = ClassDeclarationNode(file_path="/app/user.service.ts", name="UserService", decorators=[decorator])

    record = build_node_record(node, context)

    assert record.node_id == "0: user.service - UserService (Service)"
    assert record.name == "UserService (Service)"
    assert record.node_type == "Angular Service"
    assert record.file_path == "/app/user.service.ts"
    assert record.attributes == {}


def test_scenario_service_without_arguments(context: AnalysisContext):
    """Test a service decorated without arguments."""
    node = ClassDeclarationNode(
        file_path="/app/user.service.ts",
        name="UserService",
        decorators=[Decorator(name="Injectable", text="@Injectable()")],
    )
    record = build_node_record(node, context)
    assert "Service DI Warning" in record.attributes


def test_scenario_arrow_function(context: AnalysisContext):
    """Test a const arrow function."""
    node = VariableDeclarationNode(
        file_path="/app/greet.ts", name="greet", binding_kind="const", initializer_kind="arrow_function",
    )
    record = build_node_record(node, context)
    assert record.name == "greet (Arrow Function - const)"
    assert record.node_type == "Arrow Function"


def test_scenario_let_variable(context: AnalysisContext):
    """Test a let variable."""
    node = VariableDeclarationNode(file_path="/app/x.ts", name="x", binding_kind="let", initializer_kind="number")
    record = build_node_record(node, context)
    assert record.name == "x (let)"
    assert record.node_type == "Let variable"


def test_source_file_record(context: AnalysisContext):
    """Test the record built for a source file."""
    record = build_node_record(SourceFileNode(file_path="/app/main.ts"), context)
    assert record.node_id == "0: main - main.ts"
    assert record.facets()["File Path"] == "/app/main.ts"


def test_unsupported_kind_yields_no_record(context: AnalysisContext):
    """Test that unsupported kinds build no record."""
    node = UnsupportedNode(file_path="/app/types.ts", kind_name="TypeAliasDeclaration", name="Id")
    assert build_node_record(node, context) is None
    assert context.file_count == 0
    assert len(context.diagnostics) == 1


def test_ids_unique_across_files_with_same_declarations(context: AnalysisContext):
    """Test that equal declarations in two files get distinct ids."""
    nodes = [
        SourceFileNode(file_path="/a/index.ts"),
        FunctionDeclarationNode(file_path="/a/index.ts", name="main"),
        SourceFileNode(file_path="/b/index.ts"),
        FunctionDeclarationNode(file_path="/b/index.ts", name="main"),
        VariableDeclarationNode(file_path="/b/index.ts", name="main", binding_kind="var"),
        VariableDeclarationNode(file_path="/b/index.ts", name="main", binding_kind="var"),
    ]
    ids = [build_node_record(n, context).node_id for n in nodes]
    assert len(ids) == len(set(ids))


def test_ids_deterministic_across_runs():
    """Test that ids are stable across runs."""
    nodes = [
        SourceFileNode(file_path="/a/one.ts"),
        FunctionDeclarationNode(file_path="/a/one.ts", name="f"),
        SourceFileNode(file_path="/a/two.ts"),
        ClassDeclarationNode(file_path="/a/two.ts", name="C"),
    ]

    def run():
        ctx = AnalysisContext()
        return [build_node_record(n, ctx).node_id for n in nodes]

    assert run() == run()
