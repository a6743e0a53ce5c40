"""End-to-end tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from scopekit import __version__
from scopekit.config import Settings, save_settings
from scopekit.domain.shared import Ok
from scopekit.domain.task import TaskStatus, iter_tasks
from scopekit.infrastructure.storage import FileBlobStorage, WorkspaceRepository
from scopekit.interfaces.cli import app
from scopekit.interfaces.cli.commands import ai

runner = CliRunner()


@pytest.fixture(autouse=True)
def scopekit_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SCOPEKIT_HOME", str(tmp_path))
    monkeypatch.delenv("SCOPEKIT_PROJECT", raising=False)
    return tmp_path


def saved_forest(home):
    return WorkspaceRepository(FileBlobStorage(home / "data")).load().projects


def task_by_text(home, text):
    tasks = [task for project in saved_forest(home) for task in iter_tasks(project.tasks)]
    return next(task for task in tasks if task.text == text)


def invoke(*args, input=None):
    return runner.invoke(app, list(args), input=input)


@pytest.fixture
def garden(scopekit_home):
    result = invoke("project", "create", "Garden")
    assert result.exit_code == 0, result.output
    return scopekit_home


def test_version():
    result = invoke("--version")
    assert result.exit_code == 0
    assert f"scopekit version {__version__}" in result.output


def test_project_list_shows_unassigned_last(garden):
    result = invoke("project", "list")
    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if "scopes (" in line]
    assert "Garden" in lines[0]
    assert "Unassigned" in lines[-1]


def test_build_and_show_tree(garden):
    assert invoke("task", "add", "Plan beds", "-p", "Garden").exit_code == 0
    plan = task_by_text(garden, "Plan beds")
    assert invoke("task", "sub", plan.id[:8], "Measure").exit_code == 0
    assert invoke("task", "sub", plan.id, "Sketch").exit_code == 0
    measure = task_by_text(garden, "Measure")

    result = invoke("task", "status", measure.id, "done")
    assert result.exit_code == 0, result.output
    assert "'Measure' is now done" in result.output
    assert task_by_text(garden, "Plan beds").status == TaskStatus.IN_PROGRESS

    result = invoke("task", "show", "-p", "garden")
    assert result.exit_code == 0
    assert "Garden (50% done)" in result.output
    assert "[~] Plan beds (50%)" in result.output
    assert "  - [x] Measure" in result.output


def test_status_of_branch_is_not_set(garden):
    invoke("task", "add", "Plan beds", "-p", "Garden")
    plan = task_by_text(garden, "Plan beds")
    invoke("task", "sub", plan.id, "Measure")
    result = invoke("task", "status", plan.id, "done")
    assert result.exit_code == 0
    assert "its status follows them" in result.output
    assert task_by_text(garden, "Plan beds").status == TaskStatus.TODO


def test_project_from_env(garden, monkeypatch):
    monkeypatch.setenv("SCOPEKIT_PROJECT", "Garden")
    result = invoke("task", "add", "Water")
    assert "to 'Garden'" in result.output


def test_ingest_from_stdin(garden):
    result = invoke("ingest", "-", "-p", "Garden", input="- Dig\n  - Loosen soil\n- Plant\n")
    assert result.exit_code == 0, result.output
    assert "Ingested 2 scope(s) into 'Garden' (text outline)" in result.output
    dig = task_by_text(garden, "Dig")
    assert [t.text for t in dig.subtasks] == ["Loosen soil"]


def test_ingest_json_under_scope(garden):
    invoke("task", "add", "Plan beds", "-p", "Garden")
    plan = task_by_text(garden, "Plan beds")
    result = invoke("ingest", "-", "--under", plan.id, input='{"Steps": ["Measure", "Sketch"]}')
    assert result.exit_code == 0, result.output
    assert "(json outline)" in result.output
    assert [t.text for t in task_by_text(garden, "Plan beds").subtasks] == ["Steps"]


def test_ingest_empty_outline_fails(garden):
    result = invoke("ingest", "-", input="\n\n")
    assert result.exit_code == 1
    assert "did not contain any outline items" in result.output


def test_undo_redo_and_history(garden):
    invoke("task", "add", "Water", "-p", "Garden")

    result = invoke("undo")
    assert result.exit_code == 0
    assert "Undid: Create scope 'Water'" in result.output
    assert saved_forest(garden)[1].tasks == []

    result = invoke("redo")
    assert "Redid: Create scope 'Water'" in result.output
    assert [t.text for t in saved_forest(garden)[1].tasks] == ["Water"]

    result = invoke("history")
    assert "HISTORY" in result.output
    assert "undo" in result.output and "Create scope 'Water'" in result.output


def test_nothing_to_undo():
    result = invoke("undo")
    assert result.exit_code == 1
    assert "Nothing to undo" in result.output


def test_unknown_scope():
    result = invoke("task", "rm", "nope")
    assert result.exit_code == 1
    assert "Scope not found: nope" in result.output


def test_delete_several(garden):
    invoke("task", "add", "A", "-p", "Garden")
    invoke("task", "add", "B", "-p", "Garden")
    a, b = (task_by_text(garden, text) for text in ("A", "B"))
    result = invoke("task", "rm", a.id, b.id)
    assert "Deleted 2 scope(s)" in result.output
    assert saved_forest(garden)[1].tasks == []


def test_unassigned_cannot_be_renamed_or_deleted():
    assert invoke("project", "rename", "unassigned", "Inbox").exit_code == 1
    result = invoke("project", "delete", "Unassigned")
    assert result.exit_code == 1
    assert "cannot be deleted" in result.output


def test_unknown_folder():
    result = invoke("task", "add", "Water", "-p", "nowhere")
    assert result.exit_code == 1
    assert "Folder not found: nowhere" in result.output


def test_generate_uses_configured_generator(garden, monkeypatch):
    class ScriptedGenerator:
        def generate(self, prompt, system_instructions=None, max_output_tokens=4000):
            return Ok('{"Grow food": {"Dig": null, "Plant": null}}')

    monkeypatch.setattr(ai, "create_generator", lambda settings: ScriptedGenerator())
    result = invoke("generate", "Grow food", "-p", "Garden")
    assert result.exit_code == 0, result.output
    assert "Created 'Grow food' in 'Garden'" in result.output
    root = task_by_text(garden, "Grow food")
    assert [t.text for t in root.subtasks] == ["Dig", "Plant"]


class RecordingGenerator:
    def __init__(self, reply):
        self.reply = reply
        self.token_limits = []

    def generate(self, prompt, system_instructions=None, max_output_tokens=4000):
        self.token_limits.append(max_output_tokens)
        return Ok(self.reply)

    def generate_structured(self, prompt, system_instructions=None, max_output_tokens=4000):
        self.token_limits.append(max_output_tokens)
        return Ok(self.reply)


def test_execute_keeps_result_on_scope(garden, monkeypatch):
    save_settings(Settings(max_output_tokens=700))
    generator = RecordingGenerator("Beds measured at 2m")
    monkeypatch.setattr(ai, "create_generator", lambda settings: generator)
    invoke("task", "add", "Plan beds", "-p", "Garden")
    plan = task_by_text(garden, "Plan beds")

    result = invoke("execute", plan.id[:8], "-i", "Be brief")
    assert result.exit_code == 0, result.output
    assert "Beds measured at 2m" in result.output
    assert generator.token_limits == [700]
    records = task_by_text(garden, "Plan beds").execution_results
    assert [r.result_text for r in records] == ["Beds measured at 2m"]

    result = invoke("task", "info", plan.id)
    assert "## Results" in result.output


def test_summarize_folder_and_scope(garden, monkeypatch):
    generator = RecordingGenerator("- All on track")
    monkeypatch.setattr(ai, "create_generator", lambda settings: generator)
    invoke("task", "add", "Plan beds", "-p", "Garden")
    plan = task_by_text(garden, "Plan beds")

    result = invoke("summarize", "-p", "Garden")
    assert result.exit_code == 0, result.output
    assert "Saved the summary on 'Garden'" in result.output
    garden_folder = next(p for p in saved_forest(garden) if p.name == "Garden")
    assert [s.text for s in garden_folder.summaries] == ["- All on track"]

    result = invoke("summarize", "--task", plan.id)
    assert result.exit_code == 0, result.output
    assert [s.text for s in task_by_text(garden, "Plan beds").summaries] == ["- All on track"]
    assert generator.token_limits == [2000, 2000]


def test_alternative_passes_token_limit(garden, monkeypatch):
    save_settings(Settings(max_output_tokens=650))
    generator = RecordingGenerator("not json")
    monkeypatch.setattr(ai, "create_generator", lambda settings: generator)
    invoke("task", "add", "Plan beds", "-p", "Garden")
    plan = task_by_text(garden, "Plan beds")

    result = invoke("alternative", plan.id)
    assert result.exit_code == 1
    assert generator.token_limits == [650]
