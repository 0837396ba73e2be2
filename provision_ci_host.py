#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Provision a Debian/Ubuntu CI host.

Equivalent to the ``provision-ci-host`` console script.
"""

import sys

from provisioner.main_installer import main

if __name__ == "__main__":
    sys.exit(main())
