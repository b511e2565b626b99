import voluptuous as vol

from custom_components.light_energy.config_flow import _user_schema, usable_locations
from custom_components.light_energy.const import CONF_ACCOUNT_UUID, CONF_API_SECRET, CONF_API_URL
from custom_components.light_energy.models import AccountLocation


def _location(uuid: str, has_history: bool) -> AccountLocation:
    return AccountLocation(
        uuid=uuid,
        address_1=f"{uuid} Main St",
        city="Austin",
        state="TX",
        postal_code="78701",
        has_usage_history=has_history,
    )


def test_usable_locations_prefers_history():
    locations = (_location("a", False), _location("b", True))
    assert [location.uuid for location in usable_locations(locations)] == ["b"]


def test_usable_locations_falls_back_to_all():
    locations = (_location("a", False), _location("b", False))
    assert [location.uuid for location in usable_locations(locations)] == ["a", "b"]
    assert usable_locations(()) == []


def test_user_schema_never_prefills_secret():
    schema = _user_schema({CONF_API_SECRET: "stored-secret", CONF_ACCOUNT_UUID: "acct", CONF_API_URL: "https://example.test"})
    defaults = {str(key): key.default for key in schema.schema}

    assert defaults[CONF_API_SECRET] is vol.UNDEFINED
    assert defaults[CONF_ACCOUNT_UUID]() == "acct"
    assert defaults[CONF_API_URL]() == "https://example.test"
