from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "time_leave_system"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from time_leave_system.common.http import ACTOR_HEADER
from time_leave_system.core.rules import EngineRules
from time_leave_system.database.bootstrap import ensure_demo_employees


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    rules = EngineRules.from_mapping(getattr(settings, "ENGINE_RULES", {}))

    seeded = ensure_demo_employees(dict(settings.DB_CONFIG), annual_leave_balance=rules.annual_leave_default_balance)

    print(f"Demo employees ({rules.annual_leave_default_balance} leave days each):")
    for email, employee_id in seeded.items():
        print(f"  {ACTOR_HEADER}: {employee_id:<4} {email}")


if __name__ == "__main__":
    main()
