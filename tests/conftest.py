"""Shared fixtures for notevoice tests."""
import pytest

from notevoice.analytics_store import WritingAnalyticsStore
from notevoice.config import Settings
from notevoice.engine import StyleEngine
from notevoice.extractor import VocabularyProfileExtractor
from notevoice.mapper import ClinicalToNaturalMapper

from tests.samples import DAY_SAMPLE


@pytest.fixture
def store():
    store = WritingAnalyticsStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def settings():
    return Settings(database_path=":memory:", log_level="WARNING", max_sample_chars=3000)


@pytest.fixture
def engine(store, settings):
    return StyleEngine(store, settings=settings)


@pytest.fixture
def extractor():
    return VocabularyProfileExtractor()


@pytest.fixture
def day_profile(extractor):
    return extractor.extract(DAY_SAMPLE)


@pytest.fixture
def day_mapping(day_profile):
    return ClinicalToNaturalMapper().build_mapping(day_profile)
