"""Service module exports."""

from . import (
    auth,
    bills,
    budgeting,
    dashboard,
    demo_seed,
    export_csv,
    goals,
    import_csv,
    jobs,
    ledger_service,
    notifications,
    portfolio,
    presentation,
    reports,
    serializers,
)

__all__ = [
    "auth",
    "bills",
    "budgeting",
    "dashboard",
    "demo_seed",
    "export_csv",
    "goals",
    "import_csv",
    "jobs",
    "ledger_service",
    "notifications",
    "portfolio",
    "presentation",
    "reports",
    "serializers",
]
