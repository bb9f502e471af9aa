"""
tests/test_business_record_mapper.py

Pytest unit tests for BusinessRecordMapper and the SEO text builders.
"""

from __future__ import annotations

import pytest

from app.mappers.business_record_mapper import (
    BusinessRecordMapper,
    RecordTransformationError,
    build_seo_description,
    build_seo_title,
)
from db.models.business import BusinessStatus
from tests.support import make_row


@pytest.fixture()
def mapper() -> BusinessRecordMapper:
    return BusinessRecordMapper()


class TestRequiredFields:
    def test_missing_place_id_raises(self, mapper: BusinessRecordMapper) -> None:
        with pytest.raises(RecordTransformationError):
            mapper.to_business_values(make_row("", title="Cafe"))

    def test_missing_title_raises(self, mapper: BusinessRecordMapper) -> None:
        with pytest.raises(RecordTransformationError):
            mapper.to_business_values(make_row("p1", title=None))

    def test_title_falls_back_to_name(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", title=None, name="Named Cafe"))

        assert values["title"] == "Named Cafe"

    def test_non_dict_row_raises(self, mapper: BusinessRecordMapper) -> None:
        with pytest.raises(RecordTransformationError):
            mapper.to_business_values(["p1", "Cafe"])  # type: ignore[arg-type]


class TestFieldCoercion:
    def test_category_falls_back_to_category_column(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", categoryname=None, category="Bakery"))

        assert values["category_name"] == "Bakery"

    def test_country_code_default(self, mapper: BusinessRecordMapper) -> None:
        assert mapper.to_business_values(make_row("p1"))["country_code"] == "AU"

    def test_country_code_default_is_configurable(self) -> None:
        values = BusinessRecordMapper(default_country_code="NZ").to_business_values(make_row("p1"))

        assert values["country_code"] == "NZ"

    def test_booleans_accept_only_literal_true(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(
            make_row("p1", featured="true", permanentlyclosed="TRUE", temporarilyclosed="yes")
        )

        assert values["featured"] is True
        assert values["permanently_closed"] is False
        assert values["temporarily_closed"] is False

    def test_numbers(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(
            make_row("p1", lat="-33.8688", lng="151.2093", totalscore="4.6", reviewscount="87.9")
        )

        assert values["lat"] == pytest.approx(-33.8688)
        assert values["lng"] == pytest.approx(151.2093)
        assert values["total_score"] == pytest.approx(4.6)
        assert values["reviews_count"] == 87

    def test_unparseable_numbers_become_none(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", lat="north", reviewscount="many"))

        assert values["lat"] is None
        assert values["reviews_count"] is None

    def test_non_finite_numbers_become_none(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", lng="inf", totalscore="NaN", reviewscount="1_000"))

        assert (values["lng"], values["total_score"], values["reviews_count"]) == (None, None, None)

    def test_status_and_submitter(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1"))

        assert values["status"] == BusinessStatus.APPROVED
        assert values["submitted_by"] == "csv-import"

    def test_blank_strings_become_none(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", subtitle="   ", email=""))

        assert values["subtitle"] is None
        assert values["email"] is None


class TestJsonColumns:
    def test_valid_json_is_parsed(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(
            make_row("p1", categories='["Cafe", "Bakery"]', openinghours='[{"day": "Monday"}]')
        )

        assert values["categories"] == ["Cafe", "Bakery"]
        assert values["opening_hours"] == [{"day": "Monday"}]

    @pytest.mark.parametrize("literal", ["undefined", "null", ""])
    def test_null_literals_are_omitted(self, mapper: BusinessRecordMapper, literal: str) -> None:
        values = mapper.to_business_values(make_row("p1", amenities=literal))

        assert "amenities" not in values

    def test_invalid_json_is_dropped_with_warning(self, mapper: BusinessRecordMapper) -> None:
        warnings: list[str] = []

        values = mapper.to_business_values(
            make_row("p1", reviews="{broken"),
            row_number=4,
            warnings=warnings,
        )

        assert "reviews" not in values
        assert warnings == ["Row 4: invalid JSON in 'reviews' was dropped"]

    def test_deeply_nested_json_is_dropped_with_warning(self, mapper: BusinessRecordMapper) -> None:
        warnings: list[str] = []

        values = mapper.to_business_values(
            make_row("p1", categories="[" * 5000 + "]" * 5000),
            row_number=2,
            warnings=warnings,
        )

        assert "categories" not in values
        assert warnings == ["Row 2: invalid JSON in 'categories' was dropped"]

    def test_nan_inside_json_is_dropped(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", reviewsdistribution='{"oneStar": NaN}'))

        assert "reviews_distribution" not in values

    def test_invalid_json_without_warning_list_does_not_raise(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", imageurls="[oops"))

        assert "image_urls" not in values


class TestSeoFields:
    def test_explicit_seo_columns_win(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(
            make_row("p1", seotitle="Custom Title", seodescription="Custom description")
        )

        assert values["seo_title"] == "Custom Title"
        assert values["seo_description"] == "Custom description"

    def test_generated_seo_title(self, mapper: BusinessRecordMapper) -> None:
        values = mapper.to_business_values(make_row("p1", title="Joe's"))

        assert values["seo_title"] == "Joe's - Sydney | Cafe"

    def test_seo_title_parts_are_optional(self) -> None:
        assert build_seo_title(title="Joe's", city=None, category_name=None) == "Joe's"
        assert build_seo_title(title="Joe's", city=None, category_name="Cafe") == "Joe's | Cafe"

    def test_long_description_is_truncated(self) -> None:
        description = "x" * 200

        result = build_seo_description(
            title="Joe's", description=description, address=None, city=None, phone=None
        )

        assert result == "x" * 157 + "..."
        assert len(result) == 160

    def test_short_description_is_used_verbatim(self) -> None:
        result = build_seo_description(
            title="Joe's", description="Great coffee.", address=None, city=None, phone=None
        )

        assert result == "Great coffee."

    def test_templated_description(self) -> None:
        result = build_seo_description(
            title="Joe's",
            description=None,
            address="1 George St",
            city="Sydney",
            phone="02 9999 1234",
        )

        assert result == (
            "Visit Joe's located at 1 George St in Sydney Call 02 9999 1234 for more information"
        )

    def test_templated_description_is_truncated(self) -> None:
        result = build_seo_description(
            title="T" * 140,
            description=None,
            address="1 George St",
            city="Sydney",
            phone=None,
        )

        assert len(result) == 150
        assert result.endswith("...")
