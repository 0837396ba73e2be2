import subprocess

import pytest

from common.debian.apt_manager import (
    APT_ENV_PREFIX,
    DPKG_CONFFILE_OPTIONS,
    AptManager,
)
from tests.helpers import completed


@pytest.fixture
def apt_manager(mocker, mock_logger):
    mocker.patch("common.debian.apt_manager.command_exists", return_value=True)
    return AptManager(logger=mock_logger)


@pytest.fixture
def mock_elevated(mocker):
    return mocker.patch("common.debian.apt_manager.run_elevated_command")


def test_init_without_apt_get(mocker):
    mocker.patch("common.debian.apt_manager.command_exists", return_value=False)

    with pytest.raises(FileNotFoundError):
        AptManager()


def test_update_and_upgrade(apt_manager, mock_elevated, app_settings):
    apt_manager.update(app_settings)
    apt_manager.upgrade(app_settings)

    assert [c.args[0] for c in mock_elevated.call_args_list] == [
        ["apt-get", "update", "-yq"],
        [
            "env",
            "DEBIAN_FRONTEND=noninteractive",
            "NEEDRESTART_MODE=a",
            "apt-get",
            "upgrade",
            "-yq",
            "-o",
            "Dpkg::Options::=--force-confdef",
            "-o",
            "Dpkg::Options::=--force-confold",
        ],
    ]


def test_update_failure_propagates(apt_manager, mock_elevated, app_settings):
    mock_elevated.side_effect = subprocess.CalledProcessError(100, ["apt-get", "update"])

    with pytest.raises(subprocess.CalledProcessError):
        apt_manager.update(app_settings)


def test_is_installed(mocker, apt_manager, app_settings):
    mocker.patch(
        "common.debian.apt_manager.run_command",
        side_effect=[
            completed(stdout="installed"),
            completed(stdout="not-installed"),
            completed(stdout="half-installed"),
            subprocess.CalledProcessError(1, ["dpkg-query"]),
        ],
    )

    assert apt_manager.is_installed("git", app_settings) is True
    assert apt_manager.is_installed("terraform", app_settings) is False
    assert apt_manager.is_installed("jenkins", app_settings) is False
    assert apt_manager.is_installed("unknown", app_settings) is False


def test_install_skips_installed_packages(mocker, apt_manager, mock_elevated, app_settings):
    mocker.patch.object(
        apt_manager, "is_installed", side_effect=lambda pkg, _settings: pkg == "gnupg"
    )

    apt_manager.install(["gnupg", "software-properties-common"], app_settings)

    mock_elevated.assert_called_once_with(
        APT_ENV_PREFIX
        + ["apt-get", "install", "-yq"]
        + DPKG_CONFFILE_OPTIONS
        + ["software-properties-common"],
        app_settings,
        current_logger=apt_manager.logger,
    )


def test_install_nothing_to_do(mocker, apt_manager, mock_elevated, app_settings):
    mocker.patch.object(apt_manager, "is_installed", return_value=True)

    apt_manager.install("git", app_settings)

    mock_elevated.assert_not_called()


def test_install_failure_propagates(mocker, apt_manager, mock_elevated, app_settings):
    mocker.patch.object(apt_manager, "is_installed", return_value=False)
    mock_elevated.side_effect = subprocess.CalledProcessError(100, ["apt-get"])

    with pytest.raises(subprocess.CalledProcessError):
        apt_manager.install("jenkins", app_settings)


def test_add_gpg_key_plain(mocker, apt_manager, mock_elevated, app_settings):
    mock_download = mocker.patch("common.debian.apt_manager.download_file")

    apt_manager.add_gpg_key_from_url(
        "https://pkg.jenkins.io/debian-stable/jenkins.io-2023.key",
        "/usr/share/keyrings/jenkins-keyring.asc",
        app_settings,
    )

    temp_path = mock_download.call_args.args[1]
    mock_elevated.assert_called_once_with(
        ["install", "-D", "-m", "644", temp_path, "/usr/share/keyrings/jenkins-keyring.asc"],
        app_settings,
        current_logger=apt_manager.logger,
    )


def test_add_gpg_key_dearmored(mocker, apt_manager, mock_elevated, app_settings):
    mock_download = mocker.patch("common.debian.apt_manager.download_file")
    keyring = "/usr/share/keyrings/hashicorp-archive-keyring.gpg"

    apt_manager.add_gpg_key_from_url(
        "https://apt.releases.hashicorp.com/gpg", keyring, app_settings, dearmor=True
    )

    temp_path = mock_download.call_args.args[1]
    assert [c.args[0] for c in mock_elevated.call_args_list] == [
        ["install", "-m", "0755", "-d", "/usr/share/keyrings"],
        ["gpg", "--batch", "--yes", "--dearmor", "-o", keyring, temp_path],
        ["chmod", "a+r", keyring],
    ]


def test_add_gpg_key_download_failure_skips_install(mocker, apt_manager, mock_elevated, app_settings):
    mocker.patch(
        "common.debian.apt_manager.download_file", side_effect=RuntimeError("offline")
    )

    with pytest.raises(RuntimeError):
        apt_manager.add_gpg_key_from_url("https://x.invalid/key", "/k.asc", app_settings)

    mock_elevated.assert_not_called()


def test_build_source_line():
    assert (
        AptManager.build_source_line(
            "/usr/share/keyrings/jenkins-keyring.asc",
            "https://pkg.jenkins.io/debian-stable",
            "binary/",
        )
        == "deb [signed-by=/usr/share/keyrings/jenkins-keyring.asc] "
        "https://pkg.jenkins.io/debian-stable binary/"
    )


def test_add_repository_writes_list_and_updates(mocker, apt_manager, app_settings):
    mock_write = mocker.patch("common.debian.apt_manager.write_file_elevated")
    mock_update = mocker.patch.object(apt_manager, "update")

    apt_manager.add_repository("deb x y z", "/etc/apt/sources.list.d/x.list", app_settings)

    mock_write.assert_called_once_with(
        "deb x y z\n",
        "/etc/apt/sources.list.d/x.list",
        app_settings,
        mode="644",
        current_logger=apt_manager.logger,
    )
    mock_update.assert_called_once_with(app_settings)
