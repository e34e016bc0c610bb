"""Entry point for ``streamlit run``.

Streamlit executes this file as a script, so the project root is put on the
import path before the package is imported.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from budget_planner.app import main

main()
