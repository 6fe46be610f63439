#!/usr/bin/env python3
"""
This script lists the PDE systems that are registered in the collections of the
process-wide registry when the package is imported
"""

import sys
from pathlib import Path

PACKAGE_PATH = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PACKAGE_PATH))

from pdesys import default_registry

registry = default_registry()
for name in registry:
    systems = registry.collection(name)
    print(f"\n{name} ({len(systems)} systems):")
    for system in systems:
        print(f"    {system!r}")
        for key, value in system.summary().items():
            print(f"        {key}: {value}")
