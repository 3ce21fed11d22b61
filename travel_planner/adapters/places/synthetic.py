"""Deterministic placeholder POIs for cities the places provider cannot cover.

The output depends only on the city name and coordinates, so repeated calls
yield identical lists.
"""

from __future__ import annotations

from travel_planner.domain.models import ExternalPoi

# kind, name template, categories, (lat delta, lon delta), address template, description
_TEMPLATES: tuple[tuple[str, str, tuple[str, ...], tuple[float, float], str, str], ...] = (
    (
        "museum",
        "Museo Civico di {city}",
        ("entertainment.museum",),
        (0.001, 0.001),
        "Centro Storico, {city}",
        "Museo civico con collezioni di storia locale e arte",
    ),
    (
        "park",
        "Parco Centrale di {city}",
        ("leisure.park",),
        (0.002, -0.001),
        "{city}",
        "Parco pubblico con aree verdi e zone ricreative",
    ),
    (
        "cathedral",
        "Cattedrale di {city}",
        ("building.historic", "tourism.sights"),
        (-0.001, 0.002),
        "Piazza del Duomo, {city}",
        "Edificio storico religioso di grande importanza architettonica",
    ),
    (
        "theater",
        "Teatro Comunale di {city}",
        ("entertainment.culture",),
        (0.0015, 0.0015),
        "Via Teatro, {city}",
        "Teatro storico con programmazione di prosa, musica e danza",
    ),
    (
        "piazza",
        "Piazza Principale di {city}",
        ("tourism.attraction",),
        (0.0, 0.0),
        "{city}",
        "Piazza principale con caffè, negozi e monumenti storici",
    ),
    (
        "market",
        "Mercato Storico di {city}",
        ("commercial.shopping_mall",),
        (-0.0012, -0.0008),
        "Via del Mercato, {city}",
        "Mercato tradizionale con prodotti locali e artigianato",
    ),
)

SYNTHETIC_KINDS = tuple(template[0] for template in _TEMPLATES)


def _slug(city_name: str) -> str:
    return city_name.lower().replace(" ", "_")


def synthetic_pois(city_name: str, latitude: float, longitude: float) -> list[ExternalPoi]:
    slug = _slug(city_name)
    return [
        ExternalPoi(
            place_id=f"synthetic_{kind}_{slug}",
            name=name.format(city=city_name),
            categories=list(categories),
            lat=latitude + d_lat,
            lon=longitude + d_lon,
            address=address.format(city=city_name),
            description=description,
            is_synthetic=True,
        )
        for kind, name, categories, (d_lat, d_lon), address, description in _TEMPLATES
    ]


__all__ = ["SYNTHETIC_KINDS", "synthetic_pois"]
