#!/usr/bin/env python3
"""Direct launcher for the Monthly Budget Planner.

This script launches Streamlit on budget_planner/Home.py.
"""

import sys
import subprocess
from pathlib import Path

project_root = Path(__file__).parent.resolve()
home_page = project_root / "budget_planner" / "Home.py"

if __name__ == "__main__":
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(home_page),
    ])
