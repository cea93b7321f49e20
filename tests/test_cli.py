"""Tests for the hintgraph CLI commands."""

import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hintgraph._cli.main import app

runner = CliRunner()

DIVISION_SCRIPT = """
import hintgraph as hg

circuit = hg.GraphBuilder("cli_division")
a = circuit.init(label="a")
b = circuit.add(a, circuit.constant(1), label="b")
c = circuit.hint([b], lambda values: values[b.id] // 8, label="c")
circuit.assert_equal(circuit.mul(c, circuit.constant(8)), b)
"""

FAILING_HINT_SCRIPT = """
import hintgraph as hg

broken = hg.GraphBuilder("cli_failing_hint")
x = broken.init(label="x")
broken.hint([x], lambda values: 1 // values[x.id], label="inverse")
"""

IO_HINT_SCRIPT = """
from pathlib import Path

import hintgraph as hg


def read_table(values):
    return int(Path("cli_missing_table.txt").read_text())


reader = hg.GraphBuilder("cli_io_hint")
x = reader.init(label="x")
reader.hint([x], read_table, label="table")
"""


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command away from this repository's pyproject.toml."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def division_script(tmp_path: Path) -> Path:
    script = tmp_path / "cli_division.py"
    script.write_text(DIVISION_SCRIPT)
    return script


def write_inputs(path: Path, **values: int) -> Path:
    path.write_text("[inputs]\n" + "".join(f"{key} = {value}\n" for key, value in values.items()))
    return path


class TestHelp:
    """Tests for CLI help output."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "eval" in result.output
        assert "show" in result.output

    @pytest.mark.parametrize("command", ["eval", "show", "init"])
    def test_command_help(self, command: str) -> None:
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestEval:
    """Tests for the eval command."""

    def test_satisfied_constraints(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=15)

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(inputs), "--check"])

        assert result.exit_code == 0, result.output
        assert "PASS" in result.output
        assert "Evaluation complete" in result.output

    def test_violated_constraint_with_check(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=1)

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(inputs), "--check"])

        assert result.exit_code == 1
        assert "FAIL" in result.output
        assert "1 constraint(s) failed" in result.output

    def test_violated_constraint_without_check(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=1)

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(inputs)])

        assert result.exit_code == 0
        assert "FAIL" in result.output

    def test_writes_output(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=15)
        output = tmp_path / "out" / "values.toml"

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(inputs), "-o", str(output)])

        assert result.exit_code == 0, result.output
        with output.open("rb") as f:
            data = tomllib.load(f)
        assert data["values"]["a"] == 15
        assert data["values"]["c"] == 2
        assert data["constraints"]["satisfied"] is True

    def test_relaxation_strategy(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=15)
        output = tmp_path / "values.toml"

        result = runner.invoke(
            app,
            ["eval", str(division_script), "-i", str(inputs), "-o", str(output), "--strategy", "relaxation"],
        )

        assert result.exit_code == 0, result.output
        assert "relaxation" in result.output
        with output.open("rb") as f:
            assert tomllib.load(f)["values"]["c"] == 2

    def test_missing_input_value(self, division_script: Path, tmp_path: Path) -> None:
        inputs = tmp_path / "in.toml"
        inputs.write_text("[inputs]\n")

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(inputs)])

        assert result.exit_code == 1
        assert "Missing value for input node(s): 0" in result.output

    def test_no_input_file_given(self, division_script: Path) -> None:
        result = runner.invoke(app, ["eval", str(division_script)])

        assert result.exit_code == 1
        assert "Missing value" in result.output

    def test_input_file_not_found(self, division_script: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["eval", str(division_script), "-i", str(tmp_path / "nope.toml")])

        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_failing_hint(self, tmp_path: Path) -> None:
        script = tmp_path / "cli_failing_hint.py"
        script.write_text(FAILING_HINT_SCRIPT)
        inputs = write_inputs(tmp_path / "in.toml", x=0)

        result = runner.invoke(app, ["eval", str(script), "-i", str(inputs), "--circuit", "broken"])

        assert result.exit_code == 1
        assert "ZeroDivisionError" in result.output

    def test_hint_raising_os_error(self, tmp_path: Path) -> None:
        script = tmp_path / "cli_io_hint.py"
        script.write_text(IO_HINT_SCRIPT)
        inputs = write_inputs(tmp_path / "in.toml", x=1)

        result = runner.invoke(app, ["eval", str(script), "-i", str(inputs)])

        assert result.exit_code == 1
        assert "FileNotFoundError" in result.output

    def test_module_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "cli_module_division.py").write_text(DIVISION_SCRIPT)
        monkeypatch.syspath_prepend(str(tmp_path))
        inputs = write_inputs(tmp_path / "in.toml", a=7)

        result = runner.invoke(app, ["eval", "cli_module_division:circuit", "-i", str(inputs), "--check"])

        assert result.exit_code == 0, result.output
        assert "Loading circuit from module" in result.output

    def test_module_path_not_a_circuit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "cli_module_division.py").write_text(DIVISION_SCRIPT)
        monkeypatch.syspath_prepend(str(tmp_path))

        result = runner.invoke(app, ["eval", "cli_module_division:a"])

        assert result.exit_code == 1
        assert "is not a GraphBuilder instance" in result.output

    def test_script_not_found(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["eval", str(tmp_path / "nope.py")])

        assert result.exit_code == 1
        assert "Circuit script not found" in result.output

    def test_unknown_circuit_name(self, division_script: Path) -> None:
        result = runner.invoke(app, ["eval", str(division_script), "--circuit", "nothing"])

        assert result.exit_code == 1
        assert "Could not find circuit 'nothing'" in result.output

    def test_unknown_module(self) -> None:
        result = runner.invoke(app, ["eval", "cli_no_such_module:circuit"])

        assert result.exit_code == 1
        assert "No module named" in result.output

    def test_circuit_from_config(self, division_script: Path, tmp_path: Path) -> None:
        write_inputs(tmp_path / "in.toml", a=15)
        (tmp_path / "pyproject.toml").write_text(
            f"""
[tool.hintgraph]
circuit = {{ script = "{division_script.name}" }}
input = "in.toml"
output = "values.toml"
""",
        )

        result = runner.invoke(app, ["eval", "--check"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "values.toml").exists()

    def test_no_circuit(self) -> None:
        result = runner.invoke(app, ["eval"])

        assert result.exit_code != 0
        assert "No circuit specified" in result.output

    def test_verbose(self, division_script: Path, tmp_path: Path) -> None:
        inputs = write_inputs(tmp_path / "in.toml", a=15)

        result = runner.invoke(app, ["--verbose", "eval", str(division_script), "-i", str(inputs)])

        assert result.exit_code == 0, result.output


class TestShow:
    """Tests for the show command."""

    def test_node_table(self, division_script: Path) -> None:
        result = runner.invoke(app, ["show", str(division_script)])

        assert result.exit_code == 0, result.output
        assert "HINT" in result.output
        assert "6 nodes, 1 constraints" in result.output

    def test_node_detail(self, division_script: Path) -> None:
        result = runner.invoke(app, ["show", str(division_script), "--node", "c"])

        assert result.exit_code == 0, result.output
        assert "Dependents" in result.output
        assert "hint(b)" in result.output

    def test_node_by_id(self, division_script: Path) -> None:
        result = runner.invoke(app, ["show", str(division_script), "--node", "0"])

        assert result.exit_code == 0, result.output
        assert "INPUT" in result.output

    def test_unknown_node(self, division_script: Path) -> None:
        result = runner.invoke(app, ["show", str(division_script), "--node", "zzz"])

        assert result.exit_code == 1
        assert "does not name a node" in result.output


class TestInit:
    """Tests for the init command."""

    def test_writes_input_template(self, division_script: Path, tmp_path: Path) -> None:
        output = tmp_path / "inputs.toml"

        result = runner.invoke(app, ["init", str(division_script), "-o", str(output), "--default", "7"])

        assert result.exit_code == 0, result.output
        with output.open("rb") as f:
            assert tomllib.load(f) == {"inputs": {"a": 7}}

    def test_template_round_trips_through_eval(self, division_script: Path, tmp_path: Path) -> None:
        output = tmp_path / "inputs.toml"
        runner.invoke(app, ["init", str(division_script), "-o", str(output)])

        result = runner.invoke(app, ["eval", str(division_script), "-i", str(output)])

        assert result.exit_code == 0, result.output
