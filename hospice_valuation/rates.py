"""FY2026 Texas hospice routine home care rates by CBSA.

Rates are the wage-adjusted RHC per-diems for October 1, 2025 through
September 30, 2026 with quality data reported. ``rhc_high`` is the days 1-60
rate and ``rhc_low`` the days 61+ rate.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CityRate:
    city: str
    counties: tuple[str, ...]
    rhc_high: float
    rhc_low: float
    wage_index: float
    cbsa_code: str


TEXAS_RATES: tuple[CityRate, ...] = (
    CityRate("Abilene", ("Callahan", "Jones", "Taylor"), 219.97, 173.38, 0.93, "10180"),
    CityRate("Amarillo", ("Armstrong", "Carson", "Oldham", "Potter", "Randall"), 206.97, 163.14, 0.84, "11100"),
    CityRate(
        "Austin-Round Rock-San Marcos",
        ("Bastrop", "Caldwell", "Hays", "Travis", "Williamson"),
        225.65,
        177.86,
        0.97,
        "12420",
    ),
    CityRate("Beaumont-Port Arthur", ("Hardin", "Jefferson", "Orange"), 212.44, 167.45, 0.88, "13140"),
    CityRate("Brownsville-Harlingen", ("Cameron",), 200.36, 157.92, 0.80, "15180"),
    CityRate("College Station-Bryan", ("Brazos", "Burleson", "Robertson"), 211.42, 166.64, 0.87, "17780"),
    CityRate("Corpus Christi", ("Aransas", "Nueces", "San Patricio"), 219.97, 173.38, 0.93, "18580"),
    CityRate(
        "Dallas-Plano-Irving",
        ("Collin", "Dallas", "Denton", "Ellis", "Hunt", "Kaufman", "Rockwall"),
        225.33,
        177.61,
        0.96,
        "19124",
    ),
    CityRate("Eagle Pass", ("Maverick",), 201.55, 158.86, 0.81, "20580"),
    CityRate("El Paso", ("El Paso", "Hudspeth"), 205.08, 161.65, 0.83, "21340"),
    CityRate(
        "Fort Worth-Arlington-Grapevine",
        ("Johnson", "Parker", "Tarrant", "Wise"),
        226.12,
        178.23,
        0.97,
        "23104",
    ),
    CityRate(
        "Houston-Pasadena-The Woodlands",
        (
            "Austin",
            "Brazoria",
            "Chambers",
            "Fort Bend",
            "Galveston",
            "Harris",
            "Liberty",
            "Montgomery",
            "San Jacinto",
            "Waller",
        ),
        226.70,
        178.69,
        0.97,
        "26420",
    ),
    CityRate("Killeen-Temple", ("Bell", "Coryell", "Lampasas"), 222.65, 175.49, 0.95, "28660"),
    CityRate("Laredo", ("Webb",), 202.05, 159.26, 0.81, "29700"),
    CityRate("Longview", ("Gregg", "Harrison", "Rusk", "Upshur"), 216.69, 170.80, 0.91, "30980"),
    CityRate(
        "Lubbock",
        ("Cochran", "Crosby", "Garza", "Hockley", "Lubbock", "Lynn"),
        209.39,
        165.04,
        0.86,
        "31180",
    ),
    CityRate("McAllen-Edinburg-Mission", ("Hidalgo",), 200.36, 157.92, 0.80, "32580"),
    CityRate("Midland", ("Martin", "Midland"), 215.87, 170.15, 0.90, "33260"),
    CityRate("Odessa", ("Ector",), 211.06, 166.35, 0.87, "36220"),
    CityRate("San Angelo", ("Irion", "Tom Green"), 212.15, 167.22, 0.88, "41660"),
    CityRate(
        "San Antonio-New Braunfels",
        ("Atascosa", "Bandera", "Bexar", "Comal", "Guadalupe", "Kendall", "Medina", "Wilson"),
        208.37,
        164.24,
        0.85,
        "41700",
    ),
    CityRate("Sherman-Denison", ("Grayson",), 204.29, 161.02, 0.83, "43300"),
    CityRate("Texarkana", ("Bowie",), 222.82, 175.62, 0.95, "45500"),
    CityRate("Tyler", ("Smith",), 217.10, 171.12, 0.91, "46340"),
    CityRate("Victoria", ("Goliad", "Victoria"), 208.05, 163.99, 0.85, "47020"),
    CityRate("Waco", ("Bosque", "Falls", "McLennan"), 222.42, 175.31, 0.94, "47380"),
    CityRate("Wichita Falls", ("Archer", "Clay", "Wichita"), 216.81, 170.89, 0.91, "48660"),
    CityRate("Other Texas Counties", ("All Other Counties",), 206.45, 162.73, 0.84, "99945"),
)

_BY_CITY = {r.city: r for r in TEXAS_RATES}


def city_names() -> list[str]:
    return [r.city for r in TEXAS_RATES]


def city_rates(city: str) -> CityRate | None:
    return _BY_CITY.get(city)


def counties_for_city(city: str) -> list[str]:
    entry = city_rates(city)
    return list(entry.counties) if entry else []


def default_county(city: str) -> str:
    counties = counties_for_city(city)
    return counties[0] if counties else ""
