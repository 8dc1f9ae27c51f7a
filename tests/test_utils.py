"""Tests for filesystem, platform and fix helpers."""

from devhelper.fixes import create_venv, explain_issue, tool_install_fix
from devhelper.utils.fs import (
    directory_exists,
    file_exists,
    find_files,
    list_files,
    read_json,
    read_text,
)
from devhelper.utils.platform import (
    IS_WINDOWS,
    copy_command,
    get_platform_info,
    venv_activate_command,
)


class TestFilesystem:
    def test_missing_and_unreadable_are_neutral(self, tmp_path):
        assert read_text("nope.txt", tmp_path) is None
        assert read_json("nope.json", tmp_path) is None
        (tmp_path / "bad.json").write_text("{", encoding="utf-8")
        assert read_json("bad.json", tmp_path) is None
        assert list_files(tmp_path / "missing") == []

    def test_file_vs_directory(self, tmp_path):
        (tmp_path / "build").mkdir()
        (tmp_path / "go.mod").write_text("module x\n", encoding="utf-8")

        assert file_exists("go.mod", tmp_path)
        assert not file_exists("build", tmp_path)
        assert directory_exists("build", tmp_path)
        assert not directory_exists("go.mod", tmp_path)

    def test_list_and_find(self, tmp_path):
        for name in ("App.csproj", "App.sln", "README.md"):
            (tmp_path / name).write_text("", encoding="utf-8")

        assert list_files(tmp_path, r"\.csproj$") == ["App.csproj"]
        assert list_files(tmp_path) == ["App.csproj", "App.sln", "README.md"]
        assert find_files(["README.md", "Makefile"], tmp_path) == {"README.md": True, "Makefile": False}


class TestPlatform:
    def test_commands_match_platform(self):
        if IS_WINDOWS:
            assert venv_activate_command(".venv") == ".venv\\Scripts\\activate"
            assert copy_command(".env.example", ".env") == "copy .env.example .env"
        else:
            assert venv_activate_command(".venv") == "source .venv/bin/activate"
            assert copy_command(".env.example", ".env") == "cp .env.example .env"

    def test_platform_info(self):
        info = get_platform_info()
        assert {"platform", "arch", "shell", "elevated"} <= set(info)
        assert isinstance(info["elevated"], bool)


class TestFixes:
    def test_explanations(self):
        assert explain_issue("git-user-email") == "Git needs your email for commit attribution."
        assert explain_issue("cargo-installed") == "This tool is needed to build or run the project."
        assert explain_issue("something-else") is None

    def test_templates(self):
        assert create_venv("python3") == "python3 -m venv venv"
        assert tool_install_fix("Docker") == "Download from https://docker.com/get-started"
        assert tool_install_fix("Zig") == "Install Zig"
