# provisioner/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the provisioner,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from provisioner.config import SYMBOLS_DEFAULT

# --- Default Static Values (can be overridden by config file/env/cli) ---
MAVEN_VERSION_DEFAULT: str = "3.9.9"
SONARQUBE_VERSION_DEFAULT: str = "9.9.1.69595"
INSTALL_ROOT_DEFAULT: str = "/opt"
LOG_FILE_DEFAULT: str = "setup.log"
LOG_PREFIX_DEFAULT: str = "[CI-HOST]"

MAVEN_URL_TEMPLATE_DEFAULT: str = (
    "https://downloads.apache.org/maven/maven-3/{version}/binaries/"
    "apache-maven-{version}-bin.tar.gz"
)
SONARQUBE_URL_TEMPLATE_DEFAULT: str = (
    "https://binaries.sonarsource.com/Distribution/sonarqube/"
    "sonarqube-{version}.zip"
)


class JavaSettings(BaseSettings):
    """Java runtime package."""
    model_config = SettingsConfigDict(env_prefix="JAVA_", extra="ignore")

    package: str = Field(default="openjdk-17-jdk", description="Apt package providing the JDK.")


class AptRepositorySettings(BaseSettings):
    """Common fields of a vendor apt repository signed by its own key."""
    model_config = SettingsConfigDict(extra="ignore")

    key_url: str = Field(default="", description="URL of the vendor signing key.")
    keyring_path: Path = Field(default=Path("/usr/share/keyrings/vendor.gpg"),
                               description="Where the signing key is stored.")
    dearmor_key: bool = Field(default=False,
                              description="Convert an ASCII-armored key to a binary keyring with gpg --dearmor.")
    repo_uri: str = Field(default="", description="Base URI of the repository.")
    suite: Optional[str] = Field(default=None,
                                 description="Repository suite. None means the host's OS codename.")
    components: str = Field(default="", description="Space separated repository components.")
    sources_list_path: Path = Field(default=Path("/etc/apt/sources.list.d/vendor.list"),
                                    description="Package-source-list file written for the repository.")


class JenkinsSettings(AptRepositorySettings):
    """Jenkins CI server repository, package and service."""
    model_config = SettingsConfigDict(env_prefix="JENKINS_", extra="ignore")

    key_url: str = "https://pkg.jenkins.io/debian-stable/jenkins.io-2023.key"
    keyring_path: Path = Path("/usr/share/keyrings/jenkins-keyring.asc")
    repo_uri: str = "https://pkg.jenkins.io/debian-stable"
    suite: Optional[str] = "binary/"
    sources_list_path: Path = Path("/etc/apt/sources.list.d/jenkins.list")

    package: str = Field(default="jenkins", description="Apt package name.")
    service_name: str = Field(default="jenkins", description="systemd unit name.")
    initial_admin_password_path: Path = Field(
        default=Path("/var/lib/jenkins/secrets/initialAdminPassword"),
        description="Initial administrator credential generated by Jenkins on first start.",
    )


class TerraformSettings(AptRepositorySettings):
    """Terraform from the HashiCorp apt repository."""
    model_config = SettingsConfigDict(env_prefix="TERRAFORM_", extra="ignore")

    key_url: str = "https://apt.releases.hashicorp.com/gpg"
    keyring_path: Path = Path("/usr/share/keyrings/hashicorp-archive-keyring.gpg")
    dearmor_key: bool = True
    repo_uri: str = "https://apt.releases.hashicorp.com"
    components: str = "main"
    sources_list_path: Path = Path("/etc/apt/sources.list.d/hashicorp.list")

    prerequisite_packages: List[str] = Field(
        default_factory=lambda: ["gnupg", "software-properties-common"],
        description="Packages needed to register the repository.",
    )
    package: str = Field(default="terraform", description="Apt package name.")


class AnsibleSettings(BaseSettings):
    """Ansible, installed with pip."""
    model_config = SettingsConfigDict(env_prefix="ANSIBLE_SETUP_", extra="ignore")

    prerequisite_packages: List[str] = Field(default_factory=lambda: ["python3-pip"])
    pip_command: str = Field(default="pip3", description="pip executable used for the install.")
    pip_package: str = Field(default="ansible", description="Distribution installed with pip.")


class GitSettings(BaseSettings):
    """Version-control client."""
    model_config = SettingsConfigDict(env_prefix="GIT_SETUP_", extra="ignore")

    package: str = Field(default="git", description="Apt package name.")


class MavenSettings(BaseSettings):
    """Maven build tool, installed from the Apache release tarball."""
    model_config = SettingsConfigDict(env_prefix="MAVEN_", extra="ignore")

    version: str = Field(default=MAVEN_VERSION_DEFAULT, description="Maven release to install.")
    download_url_template: str = Field(
        default=MAVEN_URL_TEMPLATE_DEFAULT,
        description="Release archive URL. Supports the placeholder {version}.",
    )
    link_name: str = Field(default="maven",
                           description="Version-agnostic link created under the installation root.")
    profile_script: Path = Field(default=Path("/etc/profile.d/maven.sh"),
                                 description="Login profile fragment adding Maven to PATH.")

    @property
    def download_url(self) -> str:
        return self.download_url_template.format(version=self.version)

    @property
    def archive_name(self) -> str:
        return f"apache-maven-{self.version}-bin.tar.gz"

    @property
    def extracted_dir_name(self) -> str:
        return f"apache-maven-{self.version}"


class SonarQubeSettings(BaseSettings):
    """SonarQube analysis server, installed from the release zip."""
    model_config = SettingsConfigDict(env_prefix="SONARQUBE_", extra="ignore")

    version: str = Field(default=SONARQUBE_VERSION_DEFAULT, description="SonarQube release to install.")
    download_url_template: str = Field(
        default=SONARQUBE_URL_TEMPLATE_DEFAULT,
        description="Release archive URL. Supports the placeholder {version}.",
    )
    prerequisite_packages: List[str] = Field(default_factory=lambda: ["unzip"])
    system_user: str = Field(default="sonar", description="Service account that owns and runs SonarQube.")
    home_dir: Path = Field(default=Path("/opt/sonarqube"), description="Home directory of the service account.")
    platform_dir: str = Field(default="linux-x86-64", description="Platform directory holding sonar.sh.")

    @property
    def download_url(self) -> str:
        return self.download_url_template.format(version=self.version)

    @property
    def archive_name(self) -> str:
        return f"sonarqube-{self.version}.zip"

    @property
    def distribution_name(self) -> str:
        return f"sonarqube-{self.version}"

    @property
    def distribution_dir(self) -> Path:
        return self.home_dir / self.distribution_name

    @property
    def control_script(self) -> Path:
        return self.distribution_dir / "bin" / self.platform_dir / "sonar.sh"


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(extra="ignore")

    install_root: Path = Field(default=Path(INSTALL_ROOT_DEFAULT),
                               description="Root directory for archive-based installs.")
    log_file: Path = Field(default=Path(LOG_FILE_DEFAULT),
                           description="Installation transcript, appended to on every run.")
    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT, description="Prefix for transcript lines.")
    download_timeout: int = Field(default=120, description="Timeout in seconds for HTTP downloads.")

    java: JavaSettings = Field(default_factory=JavaSettings)
    jenkins: JenkinsSettings = Field(default_factory=JenkinsSettings)
    terraform: TerraformSettings = Field(default_factory=TerraformSettings)
    ansible: AnsibleSettings = Field(default_factory=AnsibleSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    maven: MavenSettings = Field(default_factory=MavenSettings)
    sonarqube: SonarQubeSettings = Field(default_factory=SonarQubeSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
