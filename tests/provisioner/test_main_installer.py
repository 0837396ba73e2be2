import dataclasses
import logging
import subprocess
from unittest.mock import MagicMock

import pytest
import requests

from provisioner import main_installer
from provisioner.exceptions import VerificationError
from provisioner.main_installer import main, run_sequence
from provisioner.steps import Step, build_steps
from tests.helpers import completed


def _mocked_steps(settings, keep=()):
    """Real step list with every action and verification mocked except ``keep``."""
    steps = []
    for step in build_steps(settings):
        if step.tag in keep:
            steps.append(step)
            continue
        steps.append(
            dataclasses.replace(
                step,
                action=MagicMock(name=f"{step.tag}.action"),
                verification=MagicMock(name=f"{step.tag}.verify") if step.verification else None,
            )
        )
    return steps


@pytest.fixture
def run_main(mocker, tmp_path):
    """Run main() against a transcript in tmp_path with the given step factory."""
    log_file = tmp_path / "setup.log"

    def _run(step_factory, extra_args=()):
        captured = {}

        def fake_build_steps(settings):
            captured["steps"] = step_factory(settings)
            return captured["steps"]

        mocker.patch("provisioner.main_installer.build_steps", side_effect=fake_build_steps)
        exit_code = main(
            ["--config", str(tmp_path / "missing.yaml"), "--log-file", str(log_file), *extra_args]
        )
        for handler in logging.getLogger().handlers:
            handler.flush()
        transcript = log_file.read_text(encoding="utf-8") if log_file.exists() else ""
        return exit_code, captured.get("steps", []), transcript

    return _run


def test_run_sequence_stops_at_first_failure(app_settings, mock_logger):
    ran = []
    steps = [
        Step("A", "first", lambda s, l: ran.append("A")),
        Step("B", "second", MagicMock(side_effect=subprocess.CalledProcessError(2, ["false"]))),
        Step("C", "third", lambda s, l: ran.append("C")),
    ]

    result = run_sequence(steps, app_settings, mock_logger)

    assert ran == ["A"]
    assert result.completed == ["A"]
    assert result.failed.tag == "B"
    assert result.exit_code == 2
    assert result.success is False


def test_main_success_runs_every_step(run_main):
    exit_code, steps, transcript = run_main(_mocked_steps)

    assert exit_code == 0
    for step in steps:
        step.action.assert_called_once()
    assert "Installation completed successfully!" in transcript


def test_main_command_failure_propagates_exit_status(run_main):
    def factory(settings):
        steps = _mocked_steps(settings)
        steps[3].action.side_effect = subprocess.CalledProcessError(
            100, ["apt-get", "install", "-yq", "jenkins"]
        )
        return steps

    exit_code, steps, transcript = run_main(factory)

    assert exit_code == 100
    for step in steps[4:]:
        step.action.assert_not_called()
    assert "FAILED: Install Jenkins (JENKINS_INSTALL)" in transcript
    assert "[ERROR] Provisioning aborted at step JENKINS_INSTALL" in transcript


def test_main_verification_failure_exits_one(run_main):
    def factory(settings):
        steps = _mocked_steps(settings)
        steps[1].verification.side_effect = VerificationError("Java installation failed")
        return steps

    exit_code, steps, _ = run_main(factory)

    assert exit_code == 1
    steps[2].action.assert_not_called()


def test_main_transcript_is_chronological_and_appended(run_main, tmp_path):
    (tmp_path / "setup.log").write_text("earlier run\n", encoding="utf-8")

    def factory(settings):
        steps = _mocked_steps(settings)
        steps[2].action.side_effect = subprocess.CalledProcessError(1, ["gpg"])
        return steps

    _, _, transcript = run_main(factory)

    assert transcript.startswith("earlier run\n")
    positions = [
        transcript.index("Executing: Update and upgrade system packages (SYSTEM_UPDATE)"),
        transcript.index("Executing: Install Java (openjdk-17-jdk) (JAVA_INSTALL)"),
        transcript.index("Executing: Register Jenkins apt repository (JENKINS_REPO)"),
        transcript.index("FAILED: Register Jenkins apt repository (JENKINS_REPO)"),
        transcript.index("[ERROR] Provisioning aborted"),
    ]
    assert positions == sorted(positions)
    assert "Executing: Install Jenkins (JENKINS_INSTALL)" not in transcript


def test_main_missing_maven_version_stops_before_sonarqube(run_main, mocker, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(
        "404 Client Error: Not Found"
    )
    mocker.patch("common.file_utils.requests.get", return_value=response)
    mock_elevated = mocker.patch("installer.maven_installer.run_elevated_command")

    exit_code, steps, transcript = run_main(
        lambda settings: _mocked_steps(settings, keep=("MAVEN_INSTALL",)),
        extra_args=("--maven-version", "0.0.0"),
    )

    assert exit_code == 1
    mock_elevated.assert_not_called()
    tags = [step.tag for step in steps]
    sonar = steps[tags.index("SONARQUBE_INSTALL")]
    sonar.action.assert_not_called()
    assert "apache-maven-0.0.0-bin.tar.gz" in transcript
    assert "404 Client Error" in transcript
    assert not (tmp_path / "apache-maven-0.0.0-bin.tar.gz").exists()


def test_main_success_discloses_admin_password(run_main, mocker):
    mocker.patch(
        "installer.jenkins_installer.run_elevated_command",
        return_value=completed(stdout="a1b2c3d4e5\n"),
    )

    exit_code, _, transcript = run_main(
        lambda settings: _mocked_steps(settings, keep=("JENKINS_ADMIN_PASSWORD",))
    )

    assert exit_code == 0
    assert "Jenkins initial admin password: a1b2c3d4e5" in transcript


def test_main_list_steps_runs_nothing(run_main):
    exit_code, steps, transcript = run_main(_mocked_steps, extra_args=("--list-steps",))

    assert exit_code == 0
    for step in steps:
        step.action.assert_not_called()
    assert "SONARQUBE_INSTALL" in transcript


def test_main_view_config_runs_nothing(mocker, tmp_path):
    mock_build = mocker.patch.object(main_installer, "build_steps")

    exit_code = main(
        [
            "--config", str(tmp_path / "missing.yaml"),
            "--log-file", str(tmp_path / "setup.log"),
            "--view-config",
        ]
    )

    assert exit_code == 0
    mock_build.assert_not_called()


def _flush_root_handlers():
    for handler in logging.getLogger().handlers:
        handler.flush()


def test_main_configuration_error_reaches_transcript(mocker, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("maven: [unclosed\n", encoding="utf-8")
    log_file = tmp_path / "setup.log"
    mock_build = mocker.patch.object(main_installer, "build_steps")

    with pytest.raises(SystemExit, match="Configuration error"):
        main(["--config", str(config_file), "--log-file", str(log_file)])

    _flush_root_handlers()
    assert "Configuration error" in log_file.read_text(encoding="utf-8")
    mock_build.assert_not_called()


def test_main_ignored_config_warning_reaches_transcript(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")
    log_file = tmp_path / "setup.log"

    exit_code = main(
        ["--config", str(config_file), "--log-file", str(log_file), "--list-steps"]
    )

    _flush_root_handlers()
    assert exit_code == 0
    assert "does not contain a mapping" in log_file.read_text(encoding="utf-8")
