"""Shared test fixtures and utilities for eraprofile tests."""

from datetime import date

import pandas as pd
import pytest
import yaml

from eraprofile.eras import eraapi
from eraprofile.eras.eraidentity import Era, EraResolver
from eraprofile.patterns import patternapi


@pytest.fixture(autouse=True)
def clear_loader_caches():
    """Reset lru_cached table loaders so env overrides never leak between tests."""
    yield
    eraapi.clear_cache()
    patternapi.clear_cache()


@pytest.fixture
def sample_eras():
    """Four consecutive eras with uneven start dates.

    Returns a list of Era records in ascending start order.
    """
    return [
        Era(2022, date(2022, 2, 1), 2, 0, 0, 0),
        Era(2023, date(2023, 1, 22), 3, 1, 1, 1),
        Era(2024, date(2024, 2, 10), 4, 0, 0, 2),
        Era(2025, date(2025, 1, 29), 0, 1, 1, 0),
    ]


@pytest.fixture
def sample_resolver(sample_eras):
    """EraResolver over sample_eras."""
    return EraResolver(sample_eras)


@pytest.fixture
def sample_eras_df(sample_eras):
    """sample_eras as a DataFrame in eras.csv layout."""
    return pd.DataFrame(
        [
            {
                "year": e.year,
                "start_date": e.start_date.isoformat(),
                "animal_index": e.animal_index,
                "character_index": e.character_index,
                "element_index": e.element_index,
                "mengi_index": e.mengi_index,
            }
            for e in sample_eras
        ]
    )


@pytest.fixture
def sample_patterns():
    """Small pattern bundle: four-period cycle covering a common year.

    Winter crosses the year boundary; durations sum to 365.
    """
    return {
        "animals": ["Mouse", "Ox", "Tiger", "Hare", "Dragon"],
        "characters": ["Male", "Female"],
        "elements": ["Wood", "Fire"],
        "mengi": ["1 White", "2 Black", "3 Blue"],
        "periods": [
            {"name": "Winter", "start_month": 12, "start_day": 15,
             "end_month": 1, "end_day": 20, "duration": 37, "cross_year": True},
            {"name": "Spring", "start_month": 1, "start_day": 21,
             "end_month": 5, "end_day": 31, "duration": 131, "cross_year": False},
            {"name": "Summer", "start_month": 6, "start_day": 1,
             "end_month": 9, "end_day": 30, "duration": 122, "cross_year": False},
            {"name": "Autumn", "start_month": 10, "start_day": 1,
             "end_month": 12, "end_day": 14, "duration": 75, "cross_year": False},
        ],
        "rules": {"peak_days": [10, 20], "overlap_days": 3},
    }


@pytest.fixture
def sample_definitions(sample_patterns):
    """PeriodDefinitions built from sample_patterns."""
    from eraprofile.period.periodapi import get_period_definitions
    return get_period_definitions(sample_patterns)


@pytest.fixture
def patterns_file(tmp_path, sample_patterns):
    """sample_patterns written to a temporary patterns.yaml."""
    path = tmp_path / "patterns.yaml"
    path.write_text(yaml.safe_dump(sample_patterns), encoding="utf-8")
    return path


@pytest.fixture
def eras_csv(tmp_path, sample_eras_df):
    """sample_eras written to a temporary eras.csv."""
    path = tmp_path / "eras.csv"
    sample_eras_df.to_csv(path, index=False)
    return path
