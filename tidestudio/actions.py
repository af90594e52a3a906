"""actions.py — Fixed migration and database commands exposed as buttons.

Risky entries are routed through the confirmation modal before they run. The
modal is the only consent step, so commands that would otherwise prompt on a
terminal carry --force.
"""

from collections import namedtuple

QuickAction = namedtuple("QuickAction", "command display_name risky title message")

_WIPES_DATA = "This will permanently delete data. Are you sure you want to proceed?"

QUICK_ACTIONS = {
    # ── Migrations ──
    "migrate-run": QuickAction(
        "migrate run", "Migration run", False, "", ""),
    "migrate-status": QuickAction(
        "migrate status", "Migration status", False, "", ""),
    "migrate-history": QuickAction(
        "migrate history", "Migration history", False, "", ""),
    "migrate-rollback": QuickAction(
        "migrate down", "Rollback", True, "Rollback Migration",
        "This will roll back the last migration batch. Are you sure you want to proceed?"),
    "migrate-fresh": QuickAction(
        "migrate fresh", "Fresh migration", True, "Fresh Migration",
        "This will drop all tables and re-run every migration. " + _WIPES_DATA),
    "migrate-reset": QuickAction(
        "migrate reset", "Migration reset", True, "Reset Migrations",
        "This will roll back all migrations. " + _WIPES_DATA),
    "migrate-refresh": QuickAction(
        "migrate refresh", "Migration refresh", True, "Refresh Migrations",
        "This will roll back and re-run all migrations. " + _WIPES_DATA),

    # ── Database ──
    "db-seed": QuickAction(
        "db seed", "Seeding", False, "", ""),
    "db-status": QuickAction(
        "db status", "Database status", False, "", ""),
    "db-tables": QuickAction(
        "db tables", "Table listing", False, "", ""),
    "db-create": QuickAction(
        "db create", "Database creation", False, "", ""),
    "db-fresh": QuickAction(
        "db fresh", "Fresh database", True, "Fresh Database",
        "This will drop all tables and re-seed the database. " + _WIPES_DATA),
    "db-wipe": QuickAction(
        "db wipe --force", "Database wipe", True, "Wipe Database",
        "This will truncate every table. " + _WIPES_DATA),
    "db-drop": QuickAction(
        "db drop --force", "Database drop", True, "Drop Database",
        "This will drop the entire database. " + _WIPES_DATA),
}
