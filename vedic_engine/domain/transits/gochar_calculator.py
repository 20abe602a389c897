from typing import Dict

from vedic_engine.domain.kundali.schemas import BirthChart
from vedic_engine.domain.kundali.sign_house_mapper import SignHouseMapper
from vedic_engine.domain.transits.schemas import Gochar, GocharPlanet, TransitChart


class GocharCalculator:
    """
    Calculates gochar (relative transit positions)
    from Lagna and Moon.
    """

    calculation_version = "v1"

    def __init__(self, mapper: SignHouseMapper | None = None):
        self.mapper = mapper or SignHouseMapper()

    def calculate(
        self,
        chart: BirthChart,
        transit: TransitChart
    ) -> Gochar:
        """
        Calculate gochar for all transit planets.
        """
        lagna_sign = chart.ascendant_sign
        moon_sign = chart.moon.sign

        gochar_planets: Dict[str, GocharPlanet] = {}

        for planet_name, transit_planet in transit.planets.items():
            gochar_planets[planet_name] = GocharPlanet(
                planet=planet_name,
                from_lagna_house=self.mapper.house_from_reference(
                    transit_planet.sign, lagna_sign
                ),
                from_moon_house=self.mapper.house_from_reference(
                    transit_planet.sign, moon_sign
                ),
                retrograde=transit_planet.retrograde,
            )

        return Gochar(
            planets=gochar_planets,
            approximate=transit.approximate,
            calculation_version=self.calculation_version
        )
