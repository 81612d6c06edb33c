from carpark_tracker.facets import FACET_STYLES, Facet, facet_style


def test_known_locations_map_to_facets():
    assert Facet.from_location("คอนโด") is Facet.PRIMARY_RESIDENCE
    assert Facet.from_location("ที่ทำงาน") is Facet.WORKPLACE
    assert Facet.from_location(" โรงแรม ") is Facet.HOTEL


def test_unknown_location_falls_back():
    assert Facet.from_location("สนามบิน") is Facet.UNKNOWN
    assert facet_style("สนามบิน").icon == "📍"


def test_every_facet_has_a_style():
    assert set(FACET_STYLES) == set(Facet)
    assert facet_style("คอนโด").icon == "🏠"
