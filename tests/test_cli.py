"""End-to-end tests for command dispatch (cli/app.py).

Fake ``eksp-*.sh`` scripts record their invocations in
``$EKSPHEMERAL_HOME/calls.log`` so tests can assert what was (or was
not) launched.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import ScriptWriter, read_calls, recording_body
from eksphemeral.cli import exit_codes
from eksphemeral.cli.app import cli, main, resolve_command
from eksphemeral.config import Scripts
from eksphemeral.core.report import SENTINEL
from eksphemeral.exceptions import (
    EksphemeralError,
    MissingArgumentError,
    MissingEnvironmentError,
    ProcessLaunchError,
    SpecFileNotFoundError,
)
from eksphemeral.version import __version__

_ALPHA = (
    '{"name":"alpha","numworkers":1,"kubeversion":"1.12","timeout":20,'
    '"ttl":30,"owner":"a@example.com"}'
)
_BETA = (
    '{"name":"beta","numworkers":3,"kubeversion":"1.13","timeout":25,'
    '"ttl":55,"owner":"b@example.com"}'
)


def _list_script(script: ScriptWriter, cases: dict[str, str]) -> None:
    """Write an ``eksp-list.sh`` answering per first argument ("" = no args)."""
    body = 'case "$1" in\n'
    for arg, output in cases.items():
        pattern = '""' if arg == "" else arg
        body += f"  {pattern}) echo '{output}' ;;\n"
    body += "  *) exit 1 ;;\nesac\n"
    script(Scripts.LIST, body)


def _exit_code(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as exc_info:
        cli(argv)
    return exc_info.value.code


# ---------------------------------------------------------------------------
# Bootstrap paths
# ---------------------------------------------------------------------------

class TestBootstrap:
    def test_no_args_prints_banner_and_usage(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main([]) == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert "This is EKSphemeral in version" in captured.out
        assert "Please specify one of the following commands" in captured.err

    def test_version_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"eksp {__version__}"

    def test_help_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    @pytest.mark.parametrize("argv", [["install"], ["list"], ["prolong", "a", "5"], ["bogus"]])
    def test_missing_home_exits_one(
        self, argv: list[str], capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _exit_code(argv) == exit_codes.GENERAL_ERROR
        assert "Please set the EKSPHEMERAL_HOME environment variable" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [["install"], ["list"], ["create"]])
    def test_missing_home_launches_nothing(self, argv: list[str]) -> None:
        with (
            patch("eksphemeral.cli.scripts.run_streaming") as streaming,
            patch("eksphemeral.cli.scripts.run_capturing") as capturing,
        ):
            assert _exit_code(argv) == exit_codes.GENERAL_ERROR
        streaming.assert_not_called()
        capturing.assert_not_called()

    def test_unknown_command_prints_usage(
        self, eksp_home: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["frobnicate"]) == exit_codes.SUCCESS
        assert "Please specify one of the following commands" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("verb", "expected"),
        [
            ("install", "install"),
            ("i", "install"),
            ("u", "uninstall"),
            ("c", "create"),
            ("ls", "list"),
            ("l", "list"),
            ("p", "prolong"),
            ("doctor", "doctor"),
            ("LIST", None),
            ("x", None),
        ],
    )
    def test_resolve_command(self, verb: str, expected: str | None) -> None:
        assert resolve_command(verb) == expected


# ---------------------------------------------------------------------------
# install / uninstall
# ---------------------------------------------------------------------------

class TestInstall:
    @pytest.mark.parametrize("verb", ["install", "i"])
    def test_install_streams_script(
        self, verb: str, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        script(Scripts.INSTALL, recording_body("stack created"))
        assert main([verb]) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "Trying to install EKSphemeral ..." in out
        assert "stack created" in out
        assert read_calls(eksp_home) == ["eksp-up.sh"]

    @pytest.mark.parametrize("verb", ["uninstall", "u"])
    def test_uninstall_streams_script(
        self, verb: str, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        script(Scripts.UNINSTALL, recording_body())
        assert main([verb]) == exit_codes.SUCCESS
        assert "Trying to uninstall EKSphemeral ..." in capsys.readouterr().out
        assert read_calls(eksp_home) == ["eksp-down.sh"]

    def test_missing_script_is_diagnostic_only(
        self, eksp_home: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["install"]) == exit_codes.SUCCESS
        assert "Can't shell out due to issues with starting command" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------

class TestCreate:
    def test_with_spec_file(
        self, eksp_home: Path, script: ScriptWriter, tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        spec = tmp_path / "cluster.json"
        spec.write_text('{"numworkers": 2}', encoding="utf-8")
        script(Scripts.CREATE, recording_body())

        assert main(["create", str(spec)]) == exit_codes.SUCCESS
        assert f"... using cluster spec {spec}" in capsys.readouterr().out
        assert read_calls(eksp_home) == [f"eksp-create.sh {spec}"]

    def test_without_spec_file_uses_defaults(
        self, eksp_home: Path, script: ScriptWriter,
    ) -> None:
        script(Scripts.CREATE, recording_body())
        assert main(["c"]) == exit_codes.SUCCESS
        assert read_calls(eksp_home) == ["eksp-create.sh"]

    def test_missing_spec_file_exits_two(
        self, eksp_home: Path, script: ScriptWriter, tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        script(Scripts.CREATE, recording_body())

        assert _exit_code(["create", str(tmp_path / "nope.json")]) == exit_codes.INVALID_SPEC
        assert "Can't create a cluster due to invalid spec" in capsys.readouterr().err
        assert read_calls(eksp_home) == []

    def test_dash_prefixed_spec_file_is_passed_through(
        self, eksp_home: Path, script: ScriptWriter, tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "--spec.json").write_text("{}", encoding="utf-8")
        script(Scripts.CREATE, recording_body())

        assert main(["create", "--spec.json"]) == exit_codes.SUCCESS
        assert read_calls(eksp_home) == ["eksp-create.sh --spec.json"]

    def test_dash_prefixed_missing_spec_file_exits_two(
        self, eksp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert _exit_code(["create", "--spec.json"]) == exit_codes.INVALID_SPEC


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------

class TestList:
    def test_single_cluster_detail(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"abc123": _ALPHA})

        assert main(["list", "abc123"]) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "ID:\t\tabc123\n" in out
        assert "Name:\t\talpha\n" in out
        assert "Kubernetes:\tv1.12\n" in out

    def test_single_cluster_not_found_is_sentinel(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"abc123": '{"name":"","details":{}}'})

        assert main(["list", "abc123"]) == exit_codes.SUCCESS
        captured = capsys.readouterr()
        assert captured.out == SENTINEL + "\n"
        assert captured.err == ""

    def test_single_cluster_decode_failure(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"abc123": "oops"})

        assert main(["l", "abc123"]) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "Cluster could be gone or control plane is down" in err

    def test_option_after_verb_is_a_verb_argument(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        script(Scripts.LIST, recording_body("{}"))

        assert main(["list", "-v", "abc"]) == exit_codes.SUCCESS
        assert capsys.readouterr().out.endswith(SENTINEL + "\n")
        assert read_calls(eksp_home) == ["eksp-list.sh -v"]

    def test_all_clusters_table(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"": '["a","b"]', "a": _ALPHA, "b": _BETA})

        assert main(["ls"]) == exit_codes.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert lines[0].split() == [
            "NAME", "ID", "KUBERNETES", "NUM", "WORKERS", "TIMEOUT", "TTL", "OWNER",
        ]
        assert lines[1].split() == ["alpha", "a", "v1.12", "1", "20", "min", "30", "min", "a@example.com"]
        assert lines[2].split() == ["beta", "b", "v1.13", "3", "25", "min", "55", "min", "b@example.com"]

    def test_failed_lookup_is_omitted(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"": '["a","gone","b"]', "a": _ALPHA, "b": _BETA})

        assert main(["list"]) == exit_codes.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert lines[1].startswith("alpha")
        assert lines[2].startswith("beta")

    def test_no_clusters(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"": "[]"})

        assert main(["list"]) == exit_codes.SUCCESS
        captured = capsys.readouterr()
        assert "No clusters found" in captured.out
        assert "NAME" not in captured.out
        assert captured.err == ""

    def test_malformed_id_list_is_an_error_not_empty(
        self, eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _list_script(script, {"": "not json"})

        assert main(["list"]) == exit_codes.SUCCESS
        captured = capsys.readouterr()
        assert "Can't render cluster spec due to" in captured.err
        assert "No clusters found" not in captured.out


# ---------------------------------------------------------------------------
# prolong
# ---------------------------------------------------------------------------

class TestProlong:
    def test_streams_with_both_args(self, eksp_home: Path, script: ScriptWriter) -> None:
        script(Scripts.PROLONG, recording_body())
        assert main(["prolong", "abc123", "30"]) == exit_codes.SUCCESS
        assert read_calls(eksp_home) == ["eksp-prolong.sh abc123 30"]

    def test_negative_minutes_are_passed_through(
        self, eksp_home: Path, script: ScriptWriter,
    ) -> None:
        script(Scripts.PROLONG, recording_body())
        assert main(["p", "abc123", "-5"]) == exit_codes.SUCCESS
        assert read_calls(eksp_home) == ["eksp-prolong.sh abc123 -5"]

    @pytest.mark.parametrize("argv", [["prolong"], ["p", "abc123"]])
    def test_missing_args_exit_three(
        self, argv: list[str], eksp_home: Path, script: ScriptWriter,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        script(Scripts.PROLONG, recording_body())

        assert _exit_code(argv) == exit_codes.MISSING_ARGUMENTS
        assert "Can't prolong cluster lifetime" in capsys.readouterr().err
        assert read_calls(eksp_home) == []


# ---------------------------------------------------------------------------
# Exit-code propagation
# ---------------------------------------------------------------------------

class TestScriptFailure:
    def test_failed_script_exits_zero_by_default(
        self, eksp_home: Path, script: ScriptWriter,
    ) -> None:
        script(Scripts.PROLONG, "exit 9\n")
        assert main(["prolong", "abc123", "30"]) == exit_codes.SUCCESS

    def test_propagate_flag(self, eksp_home: Path, script: ScriptWriter) -> None:
        script(Scripts.PROLONG, "exit 9\n")
        assert main(["--propagate-exit", "prolong", "abc123", "30"]) == exit_codes.SCRIPT_FAILED

    def test_propagate_env(
        self, eksp_home: Path, script: ScriptWriter, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("EKSPHEMERAL_PROPAGATE_EXIT", "1")
        script(Scripts.INSTALL, "exit 2\n")
        assert main(["install"]) == exit_codes.SCRIPT_FAILED

    def test_propagate_with_success(self, eksp_home: Path, script: ScriptWriter) -> None:
        script(Scripts.INSTALL, "exit 0\n")
        assert main(["--propagate-exit", "install"]) == exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_unexpected_error(
        self, eksp_home: Path, monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from eksphemeral.cli import app as app_module

        def _boom(*_args: object) -> int:
            raise RuntimeError("kaput")

        monkeypatch.setitem(app_module._HANDLERS, "install", _boom)
        assert _exit_code(["install"]) == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaput" in capsys.readouterr().err

    def test_keyboard_interrupt(
        self, eksp_home: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from eksphemeral.cli import app as app_module

        def _interrupt(*_args: object) -> int:
            raise KeyboardInterrupt

        monkeypatch.setitem(app_module._HANDLERS, "install", _interrupt)
        assert _exit_code(["install"]) == exit_codes.KEYBOARD_INTERRUPT

    def test_success_exit(self, eksp_home: Path, script: ScriptWriter) -> None:
        script(Scripts.INSTALL, "exit 0\n")
        assert _exit_code(["install"]) == exit_codes.SUCCESS

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (EksphemeralError("boom"), exit_codes.GENERAL_ERROR),
            (MissingEnvironmentError("unset"), exit_codes.GENERAL_ERROR),
            (ProcessLaunchError("no exec"), exit_codes.GENERAL_ERROR),
            (SpecFileNotFoundError("no spec"), exit_codes.INVALID_SPEC),
            (MissingArgumentError("no args"), exit_codes.MISSING_ARGUMENTS),
        ],
    )
    def test_domain_errors_map_to_exit_codes(
        self, exc: EksphemeralError, expected: int, eksp_home: Path,
        monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from eksphemeral.cli import app as app_module

        def _raise(*_args: object) -> int:
            raise exc

        monkeypatch.setitem(app_module._HANDLERS, "install", _raise)
        assert _exit_code(["install"]) == expected
        assert str(exc) in capsys.readouterr().err

    def test_hint_follows_error(
        self, eksp_home: Path, monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from eksphemeral.cli import app as app_module

        def _raise(*_args: object) -> int:
            raise EksphemeralError("boom", hint="try this")

        monkeypatch.setitem(app_module._HANDLERS, "install", _raise)
        _exit_code(["install"])
        assert capsys.readouterr().err.splitlines() == ["boom", "Hint: try this"]

    def test_exit_codes_are_distinct(self) -> None:
        codes = [
            exit_codes.SUCCESS,
            exit_codes.GENERAL_ERROR,
            exit_codes.INVALID_SPEC,
            exit_codes.MISSING_ARGUMENTS,
            exit_codes.SCRIPT_FAILED,
            exit_codes.UNEXPECTED_ERROR,
            exit_codes.KEYBOARD_INTERRUPT,
        ]
        assert len(set(codes)) == len(codes)
