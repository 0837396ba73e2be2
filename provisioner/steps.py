# provisioner/steps.py
# -*- coding: utf-8 -*-
"""
The ordered list of provisioning steps.

The order is significant: Java precedes every JVM-based tool, a repository
is registered before its package is installed, SonarQube follows Maven and
the Jenkins credential is disclosed last.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from installer.ansible_installer import install_ansible, verify_ansible
from installer.git_installer import install_git, verify_git
from installer.java_installer import install_java, verify_java
from installer.jenkins_installer import (
    install_jenkins_package,
    register_jenkins_repository,
    show_initial_admin_password,
    start_jenkins_service,
    verify_jenkins_service,
)
from installer.maven_installer import install_maven, verify_maven
from installer.sonarqube_installer import install_sonarqube, verify_sonarqube
from installer.system_packages import update_system_packages
from installer.terraform_installer import install_terraform, verify_terraform
from provisioner.config_models import AppSettings

StepCallable = Callable[[AppSettings, Optional[logging.Logger]], Any]


@dataclass(frozen=True)
class Step:
    """One named unit of provisioning work and its optional post-check."""

    tag: str
    description: str
    action: StepCallable
    verification: Optional[StepCallable] = None


def build_steps(app_settings: AppSettings) -> List[Step]:
    """Return the provisioning sequence for ``app_settings``."""
    return [
        Step(
            "SYSTEM_UPDATE",
            "Update and upgrade system packages",
            update_system_packages,
        ),
        Step(
            "JAVA_INSTALL",
            f"Install Java ({app_settings.java.package})",
            install_java,
            verify_java,
        ),
        Step(
            "JENKINS_REPO",
            "Register Jenkins apt repository",
            register_jenkins_repository,
        ),
        Step(
            "JENKINS_INSTALL",
            "Install Jenkins",
            install_jenkins_package,
        ),
        Step(
            "JENKINS_SERVICE",
            "Enable and start Jenkins service",
            start_jenkins_service,
            verify_jenkins_service,
        ),
        Step(
            "TERRAFORM_INSTALL",
            "Install Terraform",
            install_terraform,
            verify_terraform,
        ),
        Step(
            "ANSIBLE_INSTALL",
            "Install Ansible",
            install_ansible,
            verify_ansible,
        ),
        Step(
            "GIT_INSTALL",
            "Install Git",
            install_git,
            verify_git,
        ),
        Step(
            "MAVEN_INSTALL",
            f"Install Maven {app_settings.maven.version}",
            install_maven,
            verify_maven,
        ),
        Step(
            "SONARQUBE_INSTALL",
            f"Install SonarQube {app_settings.sonarqube.version}",
            install_sonarqube,
            verify_sonarqube,
        ),
        Step(
            "JENKINS_ADMIN_PASSWORD",
            "Show Jenkins initial admin password",
            show_initial_admin_password,
        ),
    ]
