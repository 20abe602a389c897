import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from vedic_engine.domain.kundali.schemas import BirthChart
from vedic_engine.domain.transits.gochar_calculator import GocharCalculator
from vedic_engine.domain.transits.sade_sati import SadeSatiCycleResolver
from vedic_engine.domain.transits.schemas import Gochar, TransitChart
from vedic_engine.domain.transits.transit_approximator import TransitApproximator


logger = logging.getLogger(__name__)


class TransitService:
    """
    Service wrapper around domain transit logic.

    Transits come from the mean-motion approximator, so every result
    is flagged ``approximate``.
    """

    def __init__(
        self,
        approximator: TransitApproximator | None = None,
        gochar_calculator: GocharCalculator | None = None,
        sade_sati: SadeSatiCycleResolver | None = None,
    ):
        self.approximator = approximator or TransitApproximator()
        self.gochar_calculator = gochar_calculator or GocharCalculator()
        self.sade_sati = sade_sati or SadeSatiCycleResolver()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    def build(
        self,
        chart: BirthChart,
        timestamp: Optional[datetime] = None,
    ) -> Tuple[TransitChart, Gochar]:
        """
        Build transit chart and gochar data.

        If timestamp is None, current UTC time is used.
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        transit_chart = self.approximator.calculate(
            timestamp, reference_sign=chart.ascendant_sign
        )
        gochar = self.gochar_calculator.calculate(chart, transit_chart)
        return transit_chart, gochar

    def get_current(
        self,
        chart: BirthChart,
        timestamp: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Get current transit + gochar + Sade Sati data for a chart.
        """
        transit_chart, gochar = self.build(chart, timestamp)
        sade_sati = self.sade_sati.status(
            chart.moon.sign, timestamp or datetime.now(timezone.utc)
        )

        logger.info(
            f"Transits at {transit_chart.timestamp}: Saturn in "
            f"{transit_chart.planets['Saturn'].sign_name} (approximate), "
            f"table Saturn in {sade_sati.saturn.sign_name}"
        )

        return {
            "transit": transit_chart.model_dump(),
            "gochar": gochar.model_dump(),
            "sade_sati": sade_sati.model_dump(mode="json"),
        }
