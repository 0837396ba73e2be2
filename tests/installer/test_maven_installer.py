import os
from pathlib import Path

import pytest

from installer.maven_installer import (
    install_maven,
    maven_install_dir,
    render_profile_script,
    verify_maven,
)
from provisioner.config_models import AppSettings
from provisioner.exceptions import CommandFailedError


@pytest.fixture
def fake_host(mocker, tmp_path, monkeypatch):
    """Carry out tar, ln and profile writes inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", "/usr/bin")
    install_root = tmp_path / "opt"
    install_root.mkdir()
    profile = tmp_path / "profile.d" / "maven.sh"
    settings = AppSettings(install_root=install_root, maven={"profile_script": profile})
    executed = []

    def fake_download(url, destination, *args, **kwargs):
        Path(destination).write_bytes(b"tarball")
        return Path(destination)

    def fake_elevated(command, *args, **kwargs):
        executed.append(command)
        if command[0] == "tar":
            (install_root / settings.maven.extracted_dir_name / "bin").mkdir(parents=True, exist_ok=True)
        elif command[0] == "ln":
            target, link = command[2], command[3]
            if os.path.islink(link):
                os.unlink(link)
            os.symlink(target, link)

    def fake_write(content, destination, _settings, mode="644", current_logger=None):
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        Path(destination).write_text(content)
        os.chmod(destination, int(mode, 8))

    mock_download = mocker.patch("installer.maven_installer.download_file", side_effect=fake_download)
    mocker.patch("installer.maven_installer.run_elevated_command", side_effect=fake_elevated)
    mocker.patch("installer.maven_installer.write_file_elevated", side_effect=fake_write)
    return settings, executed, mock_download


def test_render_profile_script():
    assert render_profile_script(AppSettings()) == "export PATH=$PATH:/opt/maven/bin\n"


def test_install_maven_links_configured_version(fake_host, tmp_path):
    settings, executed, mock_download = fake_host

    install_maven(settings)

    mock_download.assert_called_once()
    assert mock_download.call_args.args[0] == (
        "https://downloads.apache.org/maven/maven-3/3.9.9/binaries/apache-maven-3.9.9-bin.tar.gz"
    )
    link = settings.install_root / "maven"
    assert link.resolve() == maven_install_dir(settings).resolve()
    assert executed[0] == [
        "tar",
        "-xzf",
        str(tmp_path / "apache-maven-3.9.9-bin.tar.gz"),
        "-C",
        str(settings.install_root),
    ]
    assert executed[1][:2] == ["ln", "-sfn"]
    assert not (tmp_path / "apache-maven-3.9.9-bin.tar.gz").exists()


def test_install_maven_profile_has_single_path_entry(fake_host):
    settings, _, _ = fake_host

    install_maven(settings)
    install_maven(settings)

    profile = settings.maven.profile_script
    content = profile.read_text()
    assert content.count("PATH=") == 1
    assert f"{settings.install_root / 'maven' / 'bin'}" in content
    assert os.access(profile, os.X_OK)
    assert os.environ["PATH"].split(os.pathsep).count(
        str(settings.install_root / "maven" / "bin")
    ) == 1


def test_install_maven_relinks_on_version_change(fake_host):
    settings, _, _ = fake_host
    install_maven(settings)

    newer = settings.model_copy(
        update={"maven": settings.maven.model_copy(update={"version": "3.9.10"})}
    )
    install_maven(newer)

    assert (settings.install_root / "maven").resolve().name == "apache-maven-3.9.10"


def test_install_maven_download_failure_stops(mocker, app_settings, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    mocker.patch(
        "installer.maven_installer.download_file",
        side_effect=CommandFailedError("HTTP error downloading ...: 404 Client Error"),
    )
    mock_elevated = mocker.patch("installer.maven_installer.run_elevated_command")

    with pytest.raises(CommandFailedError):
        install_maven(app_settings)

    mock_elevated.assert_not_called()


def test_verify_maven(mocker, app_settings):
    mock_verify = mocker.patch("installer.maven_installer.verify_command")

    verify_maven(app_settings)

    assert mock_verify.call_args.args[:2] == (["mvn", "-version"], "Maven installation failed")
