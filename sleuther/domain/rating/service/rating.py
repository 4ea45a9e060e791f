"""RatingEngine - open-data star ratings from license and format text."""

import logging

from sleuther.domain.rating.model.aspect import QualityRatingAspect, RatingEvidence
from sleuther.domain.rating.model.tables import DEFAULT_TABLES, RatingTables
from sleuther.domain.rating.model.value import DistributionRating
from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.model.aspect import Distribution

logger = logging.getLogger(__name__)


class RatingEngine:
    """Scores distributions on license openness and format structure.

    A distribution earns nothing without an open license. With one, it earns
    1 star for any format, or the star level of the most structured format
    bucket its format text matches. A record is rated by its best
    distribution; signals are never combined across distributions.
    """

    def __init__(self, tables: RatingTables = DEFAULT_TABLES) -> None:
        self._tables = tables

    @property
    def tables(self) -> RatingTables:
        return self._tables

    def rate_distribution(self, distribution: Distribution) -> DistributionRating:
        strings = distribution.strings
        matched_license = self._tables.match_license(strings.license)
        matched_format = self._tables.match_format(strings.format)

        if matched_license is None:
            stars = 0
        elif matched_format is None:
            stars = 1
        else:
            stars = matched_format[0]

        return DistributionRating(
            distribution_id=distribution.id,
            distribution_name=distribution.name or strings.title,
            stars=stars,
            license=strings.license,
            format=strings.format,
            matched_license=matched_license,
            matched_format=matched_format[1] if matched_format and matched_license else None,
        )

    def rate_distributions(self, distributions: list[Distribution]) -> list[DistributionRating]:
        return [self.rate_distribution(d) for d in distributions]

    def rate_record(self, record: Record) -> QualityRatingAspect:
        """Record-level rating: the best distribution's stars, with evidence.

        Raises:
            MalformedAspectError: If the distribution payloads are malformed.
        """
        ratings = self.rate_distributions(record.distributions())
        stars = max((r.stars for r in ratings), default=0)
        if stars == 0:
            return QualityRatingAspect(stars=0)

        evidence = [
            RatingEvidence(
                distribution_id=r.distribution_id,
                distribution_name=r.distribution_name,
                stars=r.stars,
                license=r.license,
                format=r.format,
                matched_license=r.matched_license,
                matched_format=r.matched_format,
            )
            for r in ratings
            if r.stars == stars
        ]
        logger.debug(f"Record {record.id} rated {stars} star(s) from {len(evidence)} distribution(s)")
        return QualityRatingAspect(
            stars=stars,
            distribution_id=evidence[0].distribution_id,
            evidence=evidence,
        )
