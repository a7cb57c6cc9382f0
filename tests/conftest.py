import pytest

from sdamatch.config import get_settings
from sdamatch.errors import NotFoundError, UpstreamWriteError
from sdamatch.matching import MatchingEngine
from sdamatch.models import Participant, Property
from sdamatch.notifications import MatchNotifier


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-anon-key")
    for name in (
        "SUPABASE_SERVICE_KEY",
        "PRESERVE_MATCH_STATUS",
        "NOTIFICATION_WEBHOOK_URL",
        "NOTIFICATION_TIMEOUT",
        "TRIGGER_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_participant(**overrides) -> Participant:
    data = {
        "id": "participant-1",
        "full_name": "Alex Taylor",
        "email": "alex@example.com",
        "status": "searching",
        "preferred_locations": ["Ringwood"],
        "max_weekly_budget": 500,
        "min_bedrooms": 1,
        "min_bathrooms": 1,
        "sda_category": "Fully Accessible",
        "mobility_requirements": {"wheelchair": True},
    }
    data.update(overrides)
    return Participant.model_validate(data)


def make_property(**overrides) -> Property:
    data = {
        "id": "property-1",
        "address": "12 Oak St, Ringwood VIC",
        "weekly_rent": 380,
        "bedrooms": 2,
        "bathrooms": 1,
        "sda_category": "Fully Accessible",
        "features": ["Wheelchair Accessible"],
        "status": "available",
        "visible_on_participant_site": True,
    }
    data.update(overrides)
    return Property.model_validate(data)


class FakeParticipantRepository:
    def __init__(self, participants):
        self.participants = {p.id: p for p in participants}
        self.calls = []

    def get_by_id(self, participant_id):
        self.calls.append(("get_by_id", participant_id))
        if participant_id not in self.participants:
            raise NotFoundError(f"Participant not found: {participant_id}")
        return self.participants[participant_id]

    def get_eligible(self):
        self.calls.append(("get_eligible",))
        return [p for p in self.participants.values() if p.is_eligible]


class FakePropertyRepository:
    def __init__(self, properties):
        self.properties = {p.id: p for p in properties}
        self.calls = []

    def get_by_id(self, property_id):
        self.calls.append(("get_by_id", property_id))
        if property_id not in self.properties:
            raise NotFoundError(f"Property not found: {property_id}")
        return self.properties[property_id]

    def get_available(self):
        self.calls.append(("get_available",))
        return [p for p in self.properties.values() if p.is_eligible]


class FakeMatchRepository:
    """Emula el upsert de property_matches con clave (property_id, participant_id)."""

    def __init__(self, fail=False):
        self.rows = {}
        self.upsert_calls = 0
        self.fail = fail

    def upsert_many(self, matches, preserve_status=False):
        self.upsert_calls += 1
        if self.fail:
            raise UpstreamWriteError("Failed to save matches: connection reset")
        for match in matches:
            row = match.to_db_dict(preserve_status=preserve_status)
            key = (row["property_id"], row["participant_id"])
            if key in self.rows:
                self.rows[key].update(row)
            else:
                row.setdefault("status", "suggested")
                self.rows[key] = row
        return len(matches)


class FakeActivityRepository:
    def __init__(self, fail=False):
        self.entries = []
        self.fail = fail

    def log_match_notification(self, participant_id, match_count, top_score):
        if self.fail:
            raise RuntimeError("lead_activities insert failed")
        entry = {
            "participant_id": participant_id,
            "match_count": match_count,
            "top_score": top_score,
        }
        self.entries.append(entry)
        return entry


@pytest.fixture
def activity_repo():
    return FakeActivityRepository()


@pytest.fixture
def match_repo():
    return FakeMatchRepository()


@pytest.fixture
def build_engine(match_repo, activity_repo):
    def _build(participants, properties, preserve_status=False, notifier=None):
        return MatchingEngine(
            participant_repo=FakeParticipantRepository(participants),
            property_repo=FakePropertyRepository(properties),
            match_repo=match_repo,
            notifier=notifier or MatchNotifier(activity_repo=activity_repo),
            preserve_status=preserve_status,
        )

    return _build
