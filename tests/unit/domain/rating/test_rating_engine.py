"""Unit tests for RatingEngine."""

import pytest

from sleuther.domain.rating.model import DEFAULT_TABLES, QualityRatingAspect
from sleuther.domain.rating.service import RatingEngine
from sleuther.domain.record.model import Distribution
from sleuther.domain.record.model.aspect import DISTRIBUTION_STRINGS_ASPECT
from sleuther.domain.shared.error import MalformedAspectError
from tests.generators import RecordFactory


def distribution(license: str | None = None, format: str | None = None, id: str = "d1"):
    strings = {k: v for k, v in {"license": license, "format": format}.items() if v is not None}
    return Distribution.model_validate(
        {"id": id, "aspects": {DISTRIBUTION_STRINGS_ASPECT: strings}}
    )


@pytest.fixture
def engine() -> RatingEngine:
    return RatingEngine()


class TestDistributionRating:
    def test_open_license_with_csv_earns_two_stars(self, engine, factory):
        record = factory.record(
            [factory.distribution(license="Creative Commons Attribution", format="CSV")]
        )

        rating = engine.rate_record(record)

        assert rating.stars == 2
        assert rating.evidence[0].matched_license == "Creative Commons"
        assert rating.evidence[0].matched_format == "CSV"

    def test_format_without_license_earns_nothing(self, engine):
        rating = engine.rate_distribution(distribution(format="JSON-LD"))

        assert rating.stars == 0
        assert rating.matched_license is None
        assert rating.matched_format is None

    def test_open_license_with_unknown_format_earns_one_star(self, engine):
        assert engine.rate_distribution(distribution("CC0 1.0", "Proprietary")).stars == 1
        assert engine.rate_distribution(distribution("CC0 1.0", None)).stars == 1

    @pytest.mark.parametrize(
        "format, stars",
        [
            ("CSV", 2),
            ("xlsx", 2),
            ("JSON", 3),
            ("GeoJSON", 3),
            ("esri rest", 3),
            ("RDF/XML", 4),
            ("application/ld+json; JSON-LD", 4),
            ("text/turtle (Turtle)", 4),
        ],
    )
    def test_format_buckets(self, engine, format, stars):
        assert engine.rate_distribution(distribution("ODbL", format)).stars == stars

    def test_highest_bucket_mentioned_wins(self, engine):
        rating = engine.rate_distribution(distribution("CC BY 4.0", "CSV, JSON and RDF"))
        assert rating.stars == 4
        assert rating.matched_format == "RDF"

    @pytest.mark.parametrize(
        "license",
        ["All rights reserved", "Commercial", "CCBYNC-ish", "PDDLX"],
    )
    def test_closed_or_glued_licenses_do_not_match(self, engine, license):
        assert engine.rate_distribution(distribution(license, "CSV")).stars == 0

    def test_keywords_must_stand_alone(self, engine):
        # "csv" inside a longer word is not a CSV format
        assert engine.rate_distribution(distribution("CC BY", "csvlike")).stars == 1

    def test_matching_ignores_case(self, engine):
        assert engine.rate_distribution(distribution("creative commons", "json")).stars == 3


class TestRecordRating:
    def test_record_takes_best_distribution(self, engine, factory):
        record = factory.record(
            [
                factory.distribution(license="CC BY", format="CSV"),
                factory.distribution(license="CC BY", format="JSON"),
                factory.distribution(format="RDF"),
            ]
        )

        rating = engine.rate_record(record)

        assert rating.stars == 3
        assert [e.format for e in rating.evidence] == ["JSON"]
        assert rating.distribution_id == rating.evidence[0].distribution_id

    def test_signals_are_not_combined_across_distributions(self, engine, factory):
        # A license on one distribution and RDF on another do not make 4 stars
        record = factory.record(
            [
                factory.distribution(license="CC BY", format="Proprietary"),
                factory.distribution(format="RDF"),
            ]
        )

        assert engine.rate_record(record).stars == 1

    def test_ties_list_every_distribution(self, engine, factory):
        record = factory.record(
            [
                factory.distribution(license="CC BY", format="CSV"),
                factory.distribution(license="ODbL", format="XLS"),
            ]
        )

        rating = engine.rate_record(record)

        assert rating.stars == 2
        assert len(rating.evidence) == 2

    def test_no_distributions_is_zero_stars(self, engine, factory):
        rating = engine.rate_record(factory.record([]))

        assert rating == QualityRatingAspect(stars=0)
        assert rating.to_payload() == {"stars": 0, "evidence": []}

    def test_malformed_distributions_raise(self, engine, factory):
        record = factory.record([]).model_copy(
            update={"aspects": {"dataset-distributions": {"distributions": 3}}}
        )
        with pytest.raises(MalformedAspectError):
            engine.rate_record(record)

    @pytest.mark.parametrize("stars", [0, 1, 2, 3, 4])
    def test_generated_records_hit_target(self, engine, stars):
        factory = RecordFactory(seed=stars)
        for _ in range(25):
            record = factory.record_for_stars(stars)
            assert engine.rate_record(record).stars == stars

    def test_adding_a_distribution_never_lowers_the_rating(self, engine):
        factory = RecordFactory(seed=99)
        for _ in range(50):
            distributions = [
                factory.rated_distribution(factory.rng.randint(0, 4))
                for _ in range(factory.rng.randint(1, 4))
            ]
            before = engine.rate_record(factory.record(distributions)).stars
            distributions.append(factory.rated_distribution(factory.rng.randint(0, 4)))
            after = engine.rate_record(factory.record(distributions)).stars
            assert after >= before

    def test_payload_uses_registry_field_names(self, engine, factory):
        record = factory.record([factory.distribution(license="CC BY", format="CSV")])

        payload = engine.rate_record(record).to_payload()

        assert set(payload) == {"stars", "distributionId", "evidence"}
        assert payload["evidence"][0]["matchedLicense"] == "CC BY"


class TestTables:
    def test_extended_tables_leave_defaults_untouched(self):
        tables = DEFAULT_TABLES.extended(licenses=["Etalab Open Licence"], formats={4: ["HDT"]})

        assert tables.match_license("Licence Ouverte / Etalab Open Licence") is not None
        assert tables.match_format("hdt") == (4, "HDT")
        assert DEFAULT_TABLES.match_license("Etalab Open Licence") is None
        assert DEFAULT_TABLES.match_format("HDT") is None

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_TABLES.formats[5] = ("MAGIC",)  # type: ignore[index]

    def test_unknown_levels_are_rejected(self):
        with pytest.raises(ValueError):
            DEFAULT_TABLES.extended(formats={5: ["MAGIC"]})

    def test_engine_uses_configured_tables(self):
        engine = RatingEngine(DEFAULT_TABLES.extended(formats={3: ["Avro"]}))
        assert engine.rate_distribution(distribution("CC BY", "avro")).stars == 3
