"""
Tests for the local runner: file discovery, codemods, replacements, writes.
"""

from pathlib import Path

import pytest

from gocodemod import ApplyError, Codemod, Project, apply_locally
from gocodemod.exceptions import ConfigError
from gocodemod.runner import apply_to_source, find_files
from gocodemod.user_config import UserConfig


def drop_legacy(source_file):
    for calls in source_file.function_calls("legacyInit").values():
        for call in calls:
            call.remove()


DROP_LEGACY = Codemod("Remove legacyInit calls", transform=drop_legacy)


class TestFindFiles:
    """Test the ignore-aware directory walk."""

    def test_skips_vendor(self, temp_project):
        found = [p.relative_to(temp_project).as_posix() for p in find_files(temp_project)]
        assert found == ["README.md", "go.mod", "legacy.go", "main.go", "store/store.go"]

    def test_respects_gitignore(self, temp_project):
        (temp_project / ".gitignore").write_text("generated/\n*.md\n")
        (temp_project / "generated").mkdir()
        (temp_project / "generated" / "gen.go").write_text("package generated\n")
        found = [p.relative_to(temp_project).as_posix() for p in find_files(temp_project)]
        assert "generated/gen.go" not in found
        assert "README.md" not in found
        assert "main.go" in found

    def test_nested_gitignore_applies_below_its_directory(self, temp_project):
        (temp_project / "store" / ".gitignore").write_text("*_mock.go\n")
        (temp_project / "store" / "store_mock.go").write_text("package store\n")
        (temp_project / "main_mock.go").write_text("package main\n")
        found = [p.relative_to(temp_project).as_posix() for p in find_files(temp_project)]
        assert "store/store_mock.go" not in found
        assert "main_mock.go" in found
        assert "store/.gitignore" in found

    def test_gitignore_can_be_disabled(self, temp_project):
        (temp_project / ".gitignore").write_text("*.md\n")
        found = find_files(temp_project, respect_gitignore=False)
        assert temp_project / "README.md" in found

    def test_extra_patterns(self, temp_project):
        found = find_files(temp_project, extra_patterns=["store/"])
        assert temp_project / "store" / "store.go" not in found


class TestApplyLocally:
    """Test apply_locally end to end."""

    def test_rewrites_go_files(self, temp_project):
        result = apply_locally([DROP_LEGACY], temp_project)

        assert result.ok
        assert result.files_scanned == 5
        assert [f.path for f in result.changed_files] == ["legacy.go", "main.go"]
        assert (temp_project / "main.go").read_text() == (
            "package main\n"
            "\n"
            "import \"example.com/demo/store\"\n"
            "\n"
            "func main() {\n"
            "\tstore.Open(\"primary\")\n"
            "}\n"
        )
        assert (temp_project / "legacy.go").read_text() == "package main\n\nfunc legacyInit() {\n}\n"
        main = next(f for f in result.files if f.path == "main.go")
        assert main.written
        assert main.codemods_applied == ["Remove legacyInit calls"]
        assert "-\tlegacyInit()" in main.diff

    def test_vendor_untouched(self, temp_project):
        vendored = temp_project / "vendor" / "example.com" / "dep" / "dep.go"
        before = vendored.read_text()
        apply_locally([DROP_LEGACY], temp_project)
        assert vendored.read_text() == before

    def test_dry_run_writes_nothing(self, temp_project):
        before = (temp_project / "main.go").read_text()
        result = apply_locally([DROP_LEGACY], temp_project, dry_run=True)

        assert result.dry_run
        assert [f.path for f in result.changed_files] == ["legacy.go", "main.go"]
        assert not any(f.written for f in result.files)
        assert (temp_project / "main.go").read_text() == before

    def test_unchanged_files_are_not_reported(self, temp_project):
        result = apply_locally([DROP_LEGACY], temp_project)
        store = next(f for f in result.files if f.path == "store/store.go")
        assert not store.changed
        assert store.diff == ""

    def test_replacements_apply_to_all_files(self, temp_project):
        result = apply_locally([], temp_project, replacements={r"legacyInit\b": "bootstrap"})

        counts = {f.path: f.replacements_applied for f in result.files}
        assert counts["README.md"] == 1
        assert counts["legacy.go"] == 2
        assert counts["main.go"] == 1
        assert (temp_project / "README.md").read_text() == "Uses bootstrap for setup.\n"

    def test_replacement_groups(self, temp_project):
        apply_locally([], temp_project, replacements={r"store\.Open\((\"\w+\")\)": r"store.OpenNamed(\1)"})
        assert "\tstore.OpenNamed(\"primary\")\n" in (temp_project / "main.go").read_text()

    def test_invalid_pattern(self, temp_project):
        with pytest.raises(ConfigError):
            apply_locally([], temp_project, replacements={"(": "x"})

    def test_non_utf8_file_skipped(self, temp_project):
        (temp_project / "blob.bin").write_bytes(b"\xff\xfe\x00legacyInit")
        result = apply_locally([], temp_project, replacements={"legacyInit": "bootstrap"})
        blob = next(f for f in result.files if f.path == "blob.bin")
        assert blob.skipped
        assert not blob.changed

    def test_backups(self, temp_project):
        result = apply_locally([DROP_LEGACY], temp_project, backup=True)
        main = next(f for f in result.files if f.path == "main.go")
        backup = Path(main.backup_path)
        assert backup.parent == temp_project.resolve() / ".gocodemod" / "backups"
        assert "legacyInit()" in backup.read_text()

    def test_strict_failure_raises(self, temp_project):
        (temp_project / "broken.go").write_text("package main\n\nfunc broken( {\n")
        with pytest.raises(ApplyError) as exc_info:
            apply_locally([DROP_LEGACY], temp_project)
        assert [f.path for f in exc_info.value.failures] == ["broken.go"]
        # Other files are still processed
        assert "legacyInit()" not in (temp_project / "main.go").read_text()

    def test_non_strict_reports_failures(self, temp_project):
        (temp_project / "broken.go").write_text("package main\n\nfunc broken( {\n")
        result = apply_locally([DROP_LEGACY], temp_project, strict=False)
        assert not result.ok
        (failed,) = result.failed_files
        assert failed.path == "broken.go"
        assert "broken.go" in failed.error

    def test_codemod_exception_is_reported(self, temp_project):
        def explode(source_file):
            raise ValueError("boom")

        result = apply_locally([Codemod("explode", transform=explode)], temp_project, strict=False)
        assert {f.path for f in result.failed_files} == {"legacy.go", "main.go", "store/store.go"}
        assert all(f.error == "boom" for f in result.failed_files)

    def test_project_transform(self, temp_project):
        seen = []

        def write_version(project: Project):
            seen.append(project.project_root)
            project.path("VERSION").write_text("2\n")

        result = apply_locally([Codemod("Write VERSION", project_transform=write_version)], temp_project)

        assert seen == [temp_project.resolve()]
        assert (temp_project / "VERSION").read_text() == "2\n"
        assert result.project_codemods == ["Write VERSION"]
        assert result.files_scanned == 0

    def test_not_a_directory(self, temp_project):
        with pytest.raises(ApplyError):
            apply_locally([DROP_LEGACY], temp_project / "main.go")

    def test_reads_project_config(self, temp_project):
        UserConfig(temp_project).set_local("runner.ignore_patterns", ["store/"])
        result = apply_locally([DROP_LEGACY], temp_project)
        assert [f.path for f in result.files] == ["README.md", "go.mod", "legacy.go", "main.go"]

    def test_single_worker(self, temp_project):
        result = apply_locally([DROP_LEGACY], temp_project, max_workers=1)
        assert [f.path for f in result.changed_files] == ["legacy.go", "main.go"]

    def test_structural_matching_from_project_config(self, temp_project):
        UserConfig(temp_project).set_local("mutation.structural_matching", True)
        (temp_project / "twice.go").write_text("package main\n\nfunc twice() {\n\tg()\n\tg()\n}\n")

        def drop_first(source_file):
            calls = [call for found in source_file.function_calls("g").values() for call in found]
            if calls:
                return calls[0].remove()

        apply_locally([Codemod("Drop g", transform=drop_first)], temp_project)
        assert (temp_project / "twice.go").read_text() == "package main\n\nfunc twice() {\n}\n"

    def test_files_without_edits_keep_their_layout(self, temp_project):
        """A file the codemod does not touch is not reformatted."""
        odd = "package main\n\nfunc odd()   {\n  legacy := 1\n    _ = legacy\n}\n"
        (temp_project / "odd.go").write_text(odd)
        result = apply_locally([DROP_LEGACY], temp_project)
        assert (temp_project / "odd.go").read_text() == odd
        assert "odd.go" not in [f.path for f in result.changed_files]


class TestApplyToSource:
    """Test chaining codemods over one source text."""

    def test_codemods_run_in_order(self):
        def rename(source_file):
            for calls in source_file.function_calls("old").values():
                for call in calls:
                    call.set_function("mid")

        def rename_again(source_file):
            for calls in source_file.function_calls("mid").values():
                for call in calls:
                    call.set_function("new")

        source, applied = apply_to_source(
            "package main\n\nfunc main() {\n\told()\n}\n",
            [Codemod("first", transform=rename), Codemod("second", transform=rename_again)],
        )
        assert source == "package main\n\nfunc main() {\n\tnew()\n}\n"
        assert applied == ["first", "second"]

    def test_project_only_codemods_are_skipped(self):
        source = "package main\n"
        assert apply_to_source(source, [Codemod("noop", project_transform=lambda p: None)]) == (source, [])

    def test_untouched_source_is_returned_verbatim(self):
        source = "package main\n\nfunc main()   {\n  run( )\n}\n"
        assert apply_to_source(source, [Codemod("noop", transform=lambda f: None)]) == (source, ["noop"])

    def test_edited_source_is_reprinted(self):
        def drop(source_file):
            for calls in source_file.function_calls("run").values():
                for call in calls:
                    call.remove()

        source, _ = apply_to_source("package main\n\nfunc main()   {\n  run( )\n  stop()\n}\n", [Codemod("drop", transform=drop)])
        assert source == "package main\n\nfunc main() {\n\tstop()\n}\n"
