from __future__ import annotations

import pytest

from src.choir_console.choir_console.core.enums import Gender, SiteStatus, VoicePart
from src.choir_console.choir_console.events.model import Event
from src.choir_console.choir_console.members.model import Member
from src.choir_console.choir_console.sites.model import Site
from src.choir_console.choir_console.state.app_state import AppState
from src.choir_console.choir_console.storage.gateway import PersistenceGateway
from src.choir_console.choir_console.storage.memory_store import InMemoryKeyValueStore


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store)


@pytest.fixture
def state(gateway):
    return AppState.load(gateway)


@pytest.fixture
def riverside_state(state):
    """Site "Riverside" with two members and a Saturday rehearsal."""
    state.sites = [
        Site("riverside", "Riverside", "RI", 0.0, 0, SiteStatus.ACTIVE),
        Site("hillcrest", "Hillcrest", "HI", 0.0, 0, SiteStatus.ACTIVE),
    ]
    state.members = [
        Member("m1", "Ana", "Ruiz", "ana@example.com", "riverside", VoicePart.SOPRANO, Gender.FEMALE),
        Member("m2", "Luis", "Mora", "luis@example.com", "riverside", VoicePart.TENOR, Gender.MALE),
        Member("m3", "Eva", "Soto", "eva@example.com", "hillcrest", VoicePart.CONTRALTO, Gender.FEMALE),
    ]
    state.events = [
        # 2026-03-07 is a Saturday, 2026-03-04 a Wednesday
        Event("spring-rehearsal", "Spring Rehearsal", "2026-03-07", "10:00", "Main Hall"),
        Event("midweek", "Midweek Rehearsal", "2026-03-04", "19:00", "Main Hall"),
    ]
    state.users = [u for u in state.users if u.site_id is None]
    state.records = []
    return state
