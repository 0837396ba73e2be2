"""
Provisioning sequencer for a Debian/Ubuntu development and CI host.

Installs Java, Jenkins, Terraform, Ansible, Git, Maven and SonarQube in a
fixed order, aborting on the first failed step.
"""
