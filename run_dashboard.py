#!/usr/bin/env python3
"""Direct launcher for the weekly budget planner.

Runs Streamlit on ``family_budget/dashboard.py`` with the project root on
the import path.
"""

import sys
import subprocess
import os
from pathlib import Path

project_root = Path(__file__).parent.resolve()
dashboard_path = project_root / "family_budget" / "dashboard.py"

if __name__ == "__main__":
    os.chdir(project_root)
    sys.path.insert(0, str(project_root))
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path)
    ])
