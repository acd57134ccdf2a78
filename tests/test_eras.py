"""Tests for era resolution.

These tests verify:
- Right-exclusive partition of the timeline by era start dates
- Errors for dates before the earliest era and malformed input
- Per-resolver memoization and its optional size cap
- The packaged era table and the public era API
- Era table validation

Run with: pytest tests/test_eras.py -v
"""

from datetime import date, datetime, timedelta

import pandas as pd
import pytest

from eraprofile.errors import EraNotFoundError, InvalidDateError, ProfileError
from eraprofile.eras.eraapi import (
    ERAS_ENV_VAR,
    clear_cache,
    era_identifier,
    era_stats,
    get_era_by_year,
    list_eras,
    load_eras,
)
from eraprofile.eras.eraidentity import ERA_COLUMNS, Era, EraResolver
from eraprofile.eras.eravalidate import validate_eras
from eraprofile.patterns.patternapi import load_patterns


# ============================================================================
# Resolver Tests
# ============================================================================

class TestEraResolver:
    """Test date -> era resolution over a synthetic table"""

    def test_era_start_belongs_to_era(self, sample_resolver):
        """The first day of an era resolves to that era"""
        assert sample_resolver.resolve("2024-02-10").year == 2024
        assert sample_resolver.resolve("2024-03-01").year == 2024

    def test_day_before_start_belongs_to_previous_era(self, sample_resolver):
        """The day before an era starts resolves to the prior era"""
        assert sample_resolver.resolve("2024-02-09").year == 2023

    def test_every_day_in_range_resolves_to_era(self, sample_resolver, sample_eras):
        """Every date in [start_i, start_{i+1}) resolves to era i"""
        for era, following in zip(sample_eras, sample_eras[1:]):
            day = era.start_date
            while day < following.start_date:
                assert sample_resolver.resolve(day) == era
                day += timedelta(days=1)
            assert sample_resolver.resolve(following.start_date) == following

    def test_last_era_is_open_ended(self, sample_resolver):
        """Dates far after the last start resolve to the last era"""
        assert sample_resolver.resolve("2030-06-01").year == 2025
        assert sample_resolver.resolve("2099-12-31").year == 2025

    def test_before_earliest_era_raises(self, sample_resolver):
        """Dates before the first era raise EraNotFoundError"""
        with pytest.raises(EraNotFoundError) as exc_info:
            sample_resolver.resolve("2022-01-31")
        err = exc_info.value
        assert err.date == date(2022, 1, 31)
        assert err.earliest == date(2022, 2, 1)
        assert err.kind == "NotFound"
        assert isinstance(err, LookupError)
        assert isinstance(err, ProfileError)

    @pytest.mark.parametrize("value", [
        "2024-13-01",
        "2024-02-30",
        "2023-02-29",
        "2024/01/05",
        "05.01.2024",
        "not a date",
        "",
        None,
        20240105,
    ])
    def test_invalid_dates_raise(self, sample_resolver, value):
        """Malformed input raises InvalidDateError (a ValueError)"""
        with pytest.raises(InvalidDateError) as exc_info:
            sample_resolver.resolve(value)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.kind == "InvalidDate"

    def test_accepts_date_and_datetime(self, sample_resolver):
        """date and datetime inputs resolve like ISO strings"""
        assert sample_resolver.resolve(date(2024, 2, 10)).year == 2024
        assert sample_resolver.resolve(datetime(2024, 2, 9, 23, 59)).year == 2023

    def test_unsorted_input_is_sorted(self, sample_eras):
        """Resolver sorts eras by start date"""
        resolver = EraResolver(list(reversed(sample_eras)))
        assert [e.year for e in resolver.eras] == [2022, 2023, 2024, 2025]
        assert resolver.resolve("2024-02-10").year == 2024

    def test_dataframe_input(self, sample_eras_df):
        """Resolver accepts an eras DataFrame"""
        resolver = EraResolver(sample_eras_df)
        assert len(resolver) == 4
        assert resolver.resolve("2023-06-01").animal_index == 3

    def test_empty_table_raises(self):
        """An empty era table has no era for any date"""
        resolver = EraResolver([])
        with pytest.raises(EraNotFoundError):
            resolver.resolve("2024-01-01")

    def test_era_by_year(self, sample_resolver):
        """Lookup by nominal year"""
        era = sample_resolver.era_by_year(2023)
        assert era.start_date == date(2023, 1, 22)
        assert sample_resolver.era_by_year(1999) is None


class TestEraResolverCache:
    """Test per-resolver memoization"""

    def test_repeated_queries_share_entry(self, sample_resolver):
        """String and date forms of one day share one cache entry"""
        first = sample_resolver.resolve("2024-03-01")
        second = sample_resolver.resolve(date(2024, 3, 1))
        assert first is second
        assert sample_resolver.cache_info() == {"size": 1, "max_size": None}

    def test_cache_is_per_instance(self, sample_eras):
        """Each resolver owns its memo map"""
        a = EraResolver(sample_eras)
        b = EraResolver(sample_eras)
        a.resolve("2024-03-01")
        assert a.cache_info()["size"] == 1
        assert b.cache_info()["size"] == 0

    def test_max_cache_size_evicts_oldest(self, sample_eras):
        """Capped cache keeps only the most recent entries"""
        resolver = EraResolver(sample_eras, max_cache_size=2)
        for day in ["2023-01-01", "2023-06-01", "2024-06-01"]:
            resolver.resolve(day)
        assert resolver.cache_info() == {"size": 2, "max_size": 2}
        assert "2023-01-01" not in resolver._cache

    def test_invalid_max_cache_size(self, sample_eras):
        """Cache cap must be positive"""
        with pytest.raises(ValueError):
            EraResolver(sample_eras, max_cache_size=0)

    def test_errors_are_not_cached(self, sample_resolver):
        """Failed lookups leave the cache untouched"""
        with pytest.raises(EraNotFoundError):
            sample_resolver.resolve("1900-01-01")
        assert sample_resolver.cache_info()["size"] == 0

    def test_clear_cache(self, sample_resolver):
        """clear_cache empties the memo map"""
        sample_resolver.resolve("2024-03-01")
        sample_resolver.clear_cache()
        assert sample_resolver.cache_info()["size"] == 0


class TestEraFromRow:
    """Test Era construction from table rows"""

    def test_from_string_row(self):
        """CSV-style string cells are coerced"""
        era = Era.from_row({
            "year": "2024", "start_date": "2024-02-10",
            "animal_index": "4", "character_index": "0",
            "element_index": "0", "mengi_index": "2",
        })
        assert era == Era(2024, date(2024, 2, 10), 4, 0, 0, 2)

    def test_from_timestamp_row(self):
        """Timestamps from parquet/pandas are accepted"""
        era = Era.from_row(pd.Series({
            "year": 2024, "start_date": pd.Timestamp("2024-02-10"),
            "animal_index": 4, "character_index": 0,
            "element_index": 0, "mengi_index": 2,
        }))
        assert era.start_date == date(2024, 2, 10)

    def test_missing_field_raises(self):
        """Missing index raises ValueError"""
        with pytest.raises(ValueError, match="mengi_index"):
            Era.from_row({
                "year": 2024, "start_date": "2024-02-10",
                "animal_index": 4, "character_index": 0, "element_index": 0,
            })

    def test_to_dict(self):
        """to_dict gives ISO and DD.MM.YYYY start dates"""
        result = Era(2024, date(2024, 2, 10), 4, 0, 0, 2).to_dict()
        assert result["start_date"] == "2024-02-10"
        assert result["start_date_formatted"] == "10.02.2024"
        assert result["mengi_index"] == 2


# ============================================================================
# Packaged Table / Public API Tests
# ============================================================================

class TestPackagedEras:
    """Test the packaged era table through the public API"""

    def test_load_eras(self):
        """Packaged table loads sorted with the expected columns"""
        df = load_eras()
        assert list(df.columns) == ERA_COLUMNS
        assert len(df) == 81
        assert df["start_date"].is_monotonic_increasing

    def test_era_identifier_2024(self):
        """Era starting 2024-02-10 with its attribute names"""
        result = era_identifier("2024-02-10")
        assert result["year"] == 2024
        assert result["start_date"] == "2024-02-10"
        assert result["start_date_formatted"] == "10.02.2024"
        assert result["animal"] == "Dragon"
        assert result["character"] == "Male"
        assert result["element"] == "Wood"
        assert result["mengi"] == "3 Blue"

    def test_era_identifier_day_before(self):
        """2024-02-09 still belongs to the 2023 era"""
        result = era_identifier("2024-02-09")
        assert result["year"] == 2023
        assert result["animal"] == "Hare"
        assert result["element"] == "Water"

    def test_before_earliest_packaged_era(self):
        """Dates before 1950-02-17 have no era"""
        assert era_identifier("1950-02-17")["year"] == 1950
        with pytest.raises(EraNotFoundError):
            era_identifier("1950-02-16")

    def test_era_identifier_with_resolver(self, sample_resolver):
        """A custom resolver replaces the packaged table"""
        assert era_identifier("2022-06-01", resolver=sample_resolver)["year"] == 2022

    def test_get_era_by_year(self):
        """Lookup by nominal year with names"""
        result = get_era_by_year(1984)
        assert result["animal"] == "Mouse"
        assert result["start_date"] == "1984-02-02"
        assert get_era_by_year(1066) is None

    def test_list_eras_by_names(self):
        """Filters combine and match names case-insensitively"""
        df = list_eras(animal="dragon", element="WOOD")
        assert df["year"].tolist() == [1964, 2024]

    def test_list_eras_by_index(self):
        """Filters also accept raw indices"""
        df = list_eras(animal=4, element=0)
        assert df["year"].tolist() == [1964, 2024]

    def test_list_eras_character(self):
        """Female eras are the odd years"""
        df = list_eras(character="Female")
        assert len(df) == 40
        assert all(year % 2 == 1 for year in df["year"])

    def test_list_eras_unknown_name(self):
        """Unknown names give an empty result"""
        assert list_eras(animal="Unicorn").empty

    def test_list_eras_unfiltered(self):
        """No filters lists every era"""
        assert len(list_eras()) == 81

    def test_era_stats(self):
        """Summary of the static tables"""
        stats = era_stats()
        assert stats["total_eras"] == 81
        assert stats["min_year"] == 1950
        assert stats["max_year"] == 2030
        assert stats["total_periods"] == 8
        assert stats["attribute_tables"]["mengi"] == 9


class TestLoadErasConfig:
    """Test era table location and overrides"""

    def test_explicit_path(self, eras_csv):
        """Explicit path wins over package data"""
        df = load_eras(eras_csv)
        assert df["year"].tolist() == [2022, 2023, 2024, 2025]

    def test_env_override(self, eras_csv, monkeypatch):
        """ERAPROFILE_ERAS_PATH points at an alternative table"""
        monkeypatch.setenv(ERAS_ENV_VAR, str(eras_csv))
        clear_cache()
        assert len(load_eras()) == 4

    def test_missing_explicit_path(self, tmp_path):
        """A missing explicit path raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            load_eras(tmp_path / "missing.csv")

    def test_missing_columns(self, tmp_path):
        """Tables without the era columns are rejected"""
        path = tmp_path / "bad.csv"
        path.write_text("year,start_date\n2024,2024-02-10\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Missing required columns"):
            load_eras(path)

    def test_loaded_table_is_sorted(self, tmp_path, sample_eras_df):
        """Rows are sorted by start date on load"""
        path = tmp_path / "shuffled.csv"
        sample_eras_df.iloc[::-1].to_csv(path, index=False)
        assert load_eras(path)["year"].tolist() == [2022, 2023, 2024, 2025]


# ============================================================================
# Validation Tests
# ============================================================================

class TestValidateEras:
    """Test era table validation"""

    def test_packaged_table_is_valid(self):
        """Packaged eras are consistent with packaged patterns"""
        assert validate_eras(load_eras(), load_patterns()) == []

    def test_sample_table_is_valid(self, sample_eras_df, sample_patterns):
        """Synthetic table passes"""
        assert validate_eras(sample_eras_df, sample_patterns) == []

    def test_empty_table(self):
        """Empty table is reported"""
        assert validate_eras(pd.DataFrame(columns=ERA_COLUMNS)) == ["Era table is empty"]

    def test_duplicate_year(self, sample_eras_df):
        """Duplicate years are reported"""
        df = sample_eras_df.copy()
        df.loc[3, "year"] = 2024
        issues = validate_eras(df)
        assert any("Duplicate years" in issue for issue in issues)

    def test_unsorted_starts(self, sample_eras_df):
        """Start dates out of order are reported"""
        df = sample_eras_df.iloc[[0, 2, 1, 3]].reset_index(drop=True)
        issues = validate_eras(df)
        assert any("not after era" in issue for issue in issues)

    def test_index_out_of_range(self, sample_eras_df, sample_patterns):
        """Indices beyond the pattern tables are reported"""
        df = sample_eras_df.copy()
        df.loc[1, "animal_index"] = 99
        issues = validate_eras(df, sample_patterns)
        assert issues == ["animal_index outside animals table (size 5) for eras: [2023]"]

    def test_bad_start_date(self, sample_eras_df):
        """Unparseable start dates are reported per row"""
        df = sample_eras_df.copy()
        df.loc[2, "start_date"] = "2024-02-30"
        issues = validate_eras(df)
        assert any(issue.startswith("Row 2:") for issue in issues)

    def test_missing_column(self, sample_eras_df):
        """Missing columns are reported"""
        issues = validate_eras(sample_eras_df.drop(columns=["mengi_index"]))
        assert issues == ["Missing column: mengi_index"]
