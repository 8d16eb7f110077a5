"""Example: drive the session state directly (no Flask).

Controllers are a thin layer; intents and reports live in the state and
service modules.
"""

from src.choir_console.choir_console.reports.service import site_attendance_ratio, site_ranking
from src.choir_console.choir_console.state.app_state import AppState
from src.choir_console.choir_console.storage.gateway import PersistenceGateway
from src.choir_console.choir_console.storage.memory_store import InMemoryKeyValueStore


def main():
    state = AppState.load(PersistenceGateway(InMemoryKeyValueStore()))
    state.login("MezcalesDr")
    state.submit_roster("auto-2026-01-31", {"1": True, "4": False})

    print(site_attendance_ratio("6", state.records, state.members))
    for rank in site_ranking(state.sites, state.records, state.members)[:3]:
        print(rank.site.name, rank.ratio, rank.has_reports)


if __name__ == "__main__":
    main()
