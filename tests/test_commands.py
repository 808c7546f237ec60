"""Tests for the built-in commands and their registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from duq.commands.base import CommandResult, TargetKind
from duq.commands.registry import CommandRegistry
from duq.context import AppContext
from duq.core.assistant import FALLBACK_RESPONSE
from duq.exceptions import CommandError, SourceReadError
from tests.fakes import FakeAssistant

DOCUMENTED = 'def add(a, b):\n    """Return a + b."""\n    return a + b'


@pytest.fixture
def registry() -> CommandRegistry:
    registry = CommandRegistry()
    registry.discover_commands()
    return registry


class TestRegistry:
    def test_discovers_builtin_commands(self, registry: CommandRegistry) -> None:
        assert sorted(registry.names) == [
            "docstrings", "document", "explain", "refactor", "security", "test",
        ]

    @pytest.mark.parametrize(
        ("name", "target_kind", "mutates"),
        [
            ("document", TargetKind.DIRECTORY, True),
            ("explain", TargetKind.FILE, False),
            ("refactor", TargetKind.FILE, False),
            ("test", TargetKind.FILE, True),
            ("docstrings", TargetKind.FILE, True),
            ("security", TargetKind.ANY, True),
        ],
    )
    def test_descriptors(self, registry: CommandRegistry, name: str, target_kind: TargetKind, mutates: bool) -> None:
        command = registry.get(name)
        assert command.target_kind is target_kind
        assert command.mutates is mutates

    def test_unknown_name(self, registry: CommandRegistry) -> None:
        assert registry.get("badcmd") is None
        assert "badcmd" not in registry

    def test_security_alias(self, registry: CommandRegistry) -> None:
        assert registry.get("security").aliases == ("sec",)


class TestDocstrings:
    def test_overwrites_file_and_backs_up_original(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        original = source_file.read_bytes()
        assistant.response = f"Here you go:\n```python\n{DOCUMENTED}\n```\nDone."

        result = ctx.registry.get("docstrings").run(ctx, source_file.resolve())

        assert source_file.read_text(encoding="utf-8") == DOCUMENTED + "\n"
        entries = ctx.backup_manager.list_backups(source_file)
        assert len(entries) == 1
        assert entries[0].operation == "docstrings"
        assert result.backup_ids == [entries[0].id]
        assert ctx.backup_manager.blob_path(entries[0].id).read_bytes() == original

    def test_revert_undoes_docstrings(self, ctx: AppContext, assistant: FakeAssistant, source_file: Path) -> None:
        original = source_file.read_bytes()
        assistant.response = f"```python\n{DOCUMENTED}\n```"
        ctx.registry.get("docstrings").run(ctx, source_file.resolve())

        assert ctx.restore_manager.restore_backup(source_file).success
        assert source_file.read_bytes() == original

    def test_prompt_embeds_language_and_source(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        assistant.response = f"```python\n{DOCUMENTED}\n```"
        ctx.registry.get("docstrings").run(ctx, source_file.resolve())
        assert "Language: Python" in assistant.prompts[0]
        assert "return a + b" in assistant.prompts[0]

    def test_no_code_block_leaves_file_untouched(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        original = source_file.read_bytes()
        assistant.response = "I could not do that."

        with pytest.raises(CommandError):
            ctx.registry.get("docstrings").run(ctx, source_file.resolve())

        assert source_file.read_bytes() == original
        assert ctx.backup_manager.list_backups() == []

    def test_no_backup_when_command_not_configured(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        ctx.config.set("backup_commands", [])
        assistant.response = f"```python\n{DOCUMENTED}\n```"

        ctx.registry.get("docstrings").run(ctx, source_file.resolve())

        assert ctx.backup_manager.list_backups() == []
        assert source_file.read_text(encoding="utf-8") == DOCUMENTED + "\n"

    def test_failed_backup_does_not_block_write(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(ctx.backup_manager, "create_backup", lambda *args: None)
        assistant.response = f"```python\n{DOCUMENTED}\n```"

        result = ctx.registry.get("docstrings").run(ctx, source_file.resolve())

        assert result.backup_ids == []
        assert source_file.read_text(encoding="utf-8") == DOCUMENTED + "\n"

    def test_unreadable_source(self, ctx: AppContext, tmp_path: Path) -> None:
        binary = tmp_path / "blob.bin"
        binary.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(SourceReadError):
            ctx.registry.get("docstrings").run(ctx, binary)


class TestTestCommand:
    def test_writes_default_test_path(self, ctx: AppContext, assistant: FakeAssistant, source_file: Path) -> None:
        assistant.response = "```python\ndef test_add():\n    assert add(1, 2) == 3\n```"

        result = ctx.registry.get("test").run(ctx, source_file.resolve())

        test_file = source_file.with_name("app.test.py")
        assert test_file.read_text(encoding="utf-8").startswith("def test_add():")
        assert result.written_files == [str(test_file.resolve())]
        assert result.backup_ids == []

    def test_existing_output_is_backed_up(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "test_app.py"
        output.write_text("old tests\n", encoding="utf-8")
        assistant.response = "```python\ndef test_new():\n    pass\n```"

        ctx.registry.get("test").run(ctx, source_file.resolve(), output)

        entries = ctx.backup_manager.list_backups(output)
        assert [e.operation for e in entries] == ["test"]
        assert ctx.backup_manager.blob_path(entries[0].id).read_text(encoding="utf-8") == "old tests\n"

    def test_no_code_block(self, ctx: AppContext, assistant: FakeAssistant, source_file: Path) -> None:
        assistant.response = FALLBACK_RESPONSE
        with pytest.raises(CommandError):
            ctx.registry.get("test").run(ctx, source_file.resolve())
        assert not source_file.with_name("app.test.py").exists()


class TestDocument:
    def test_writes_readme_from_markdown_block(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        project = source_file.parent
        assistant.response = "```markdown\n# Project\n\n```bash\npip install .\n```\n```"

        ctx.registry.get("document").run(ctx, project.resolve())

        readme = (project / "README.md").read_text(encoding="utf-8")
        assert readme.startswith("# Project")
        assert "pip install ." in readme
        assert "Directory contents" in assistant.prompts[0]
        assert "return a + b" in assistant.prompts[0]

    def test_fallback_response_writes_nothing(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path
    ) -> None:
        assistant.response = FALLBACK_RESPONSE
        with pytest.raises(CommandError):
            ctx.registry.get("document").run(ctx, source_file.parent.resolve())
        assert not (source_file.parent / "README.md").exists()


class TestReadOnlyCommands:
    @pytest.mark.parametrize("name", ["explain", "refactor"])
    def test_prints_response_and_writes_nothing(
        self,
        ctx: AppContext,
        assistant: FakeAssistant,
        source_file: Path,
        name: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assistant.response = "This module adds numbers."

        result = ctx.registry.get(name).run(ctx, source_file.resolve())

        assert isinstance(result, CommandResult)
        assert result.written_files == []
        assert "This module adds numbers." in capsys.readouterr().out
        assert "File content:\ndef add(a, b):" in assistant.prompts[0]
        assert sorted(p.name for p in source_file.parent.iterdir()) == ["app.py"]


class TestSecurity:
    def test_without_output_only_prints(self, ctx: AppContext, assistant: FakeAssistant, source_file: Path) -> None:
        assistant.response = "No findings."
        result = ctx.registry.get("security").run(ctx, source_file.resolve())
        assert result.written_files == []

    def test_report_written_to_output(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path, tmp_path: Path
    ) -> None:
        assistant.response = "Summary below.\n```markdown\n# Security Report\n\nAll good.\n```"
        output = tmp_path / "report.md"

        ctx.registry.get("security").run(ctx, source_file.parent.resolve(), output)

        assert output.read_text(encoding="utf-8") == "# Security Report\n\nAll good.\n"
        assert "the codebase in directory" in assistant.prompts[0]

    def test_plain_response_saved_verbatim(
        self, ctx: AppContext, assistant: FakeAssistant, source_file: Path, tmp_path: Path
    ) -> None:
        assistant.response = "## Findings\n\n```python\neval(x)\n```\n"
        output = tmp_path / "report.md"

        ctx.registry.get("security").run(ctx, source_file.resolve(), output)

        assert output.read_text(encoding="utf-8") == "## Findings\n\n```python\neval(x)\n```\n"
