from core.models import Place
from infrastructure import place_lookup
from infrastructure.place_lookup import ReverseGeocodeLookup


def test_resolves_city_and_country(monkeypatch):
    calls = []

    def fake_search(coords):
        calls.append(list(coords))
        return [{"city": "Lyon", "country": "France", "country_code": "FR"}]

    monkeypatch.setattr(place_lookup.reverse_geocode, "search", fake_search)

    assert ReverseGeocodeLookup().lookup(45.76, 4.84) == Place("Lyon", "France")
    assert calls == [[(45.76, 4.84)]]


def test_missing_city_is_not_found(monkeypatch):
    monkeypatch.setattr(
        place_lookup.reverse_geocode, "search", lambda coords: [{"city": "", "country": ""}]
    )
    assert ReverseGeocodeLookup().lookup(0.0, -160.0) is None


def test_real_dataset_resolves_a_capital():
    place = ReverseGeocodeLookup().lookup(48.8566, 2.3522)
    assert place is not None
    assert place.country == "France"
