import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./loyalty.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Master switch for every points job
    LOYALTY_SYSTEM_ENABLED = bool(data.get("LOYALTY_SYSTEM_ENABLED", True))

    # Attendance awards
    ATTENDANCE_POINTS = data.get("ATTENDANCE_POINTS", 5)  # Regular points per attendance record

    # Slab Evaluation
    SLAB_EVALUATION_ENABLED = bool(data.get("SLAB_EVALUATION_ENABLED", True))

    # Credit Overdue Sweep
    CREDIT_SWEEP_ENABLED = bool(data.get("CREDIT_SWEEP_ENABLED", True))
    CREDIT_OVERDUE_DAYS = int(data.get("CREDIT_OVERDUE_DAYS", 30))  # Days before auto-debit

    # Ledger Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
