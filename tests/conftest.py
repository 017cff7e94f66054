"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and reusable test fixtures.
"""

import pytest
from pathlib import Path

from orgchart.config.settings import AppSettings
from orgchart.core.builder import build_forest
from orgchart.core.editor import OrgChartEditor
from orgchart.core.forest import Forest
from orgchart.core.models import FlatRecord


SAMPLE_CSV = """id,name,title,department,parentId,imageUrl
ceo,Ada Lovelace,Chief Executive Officer,Executive,,https://example.com/ada.png
cto,Alan Turing,Chief Technology Officer,Engineering,ceo,
cfo,Grace Hopper,Chief Financial Officer,Finance,ceo,
dev1,Linus Torvalds,Engineer,Engineering,cto,
dev2,Guido van Rossum,Engineer,Engineering,cto,
loner,Lone Ranger,Contractor,,,
"""


@pytest.fixture
def settings() -> AppSettings:
    """
    Create settings that never touch the user's data directory.

    Returns:
        AppSettings with file logging disabled.
    """
    return AppSettings(log_to_file=False, log_file_path=None)


@pytest.fixture
def sample_csv() -> str:
    """Raw CSV text for a small company plus one isolated record."""
    return SAMPLE_CSV


@pytest.fixture
def sample_records() -> list[FlatRecord]:
    """
    Create flat records for a small company.

    Returns:
        Records for ceo -> (cto -> (dev1, dev2), cfo) and an isolated 'loner'.
    """
    return [
        FlatRecord(id="ceo", name="Ada Lovelace", title="Chief Executive Officer",
                   department="Executive", image_url="https://example.com/ada.png"),
        FlatRecord(id="cto", name="Alan Turing", title="Chief Technology Officer",
                   department="Engineering", parent_id="ceo"),
        FlatRecord(id="cfo", name="Grace Hopper", title="Chief Financial Officer",
                   department="Finance", parent_id="ceo"),
        FlatRecord(id="dev1", name="Linus Torvalds", title="Engineer",
                   department="Engineering", parent_id="cto"),
        FlatRecord(id="dev2", name="Guido van Rossum", title="Engineer",
                   department="Engineering", parent_id="cto"),
        FlatRecord(id="loner", name="Lone Ranger", title="Contractor"),
    ]


@pytest.fixture
def sample_forest(sample_records) -> Forest:
    """Build an indexed forest from the sample records."""
    return Forest(build_forest(sample_records))


@pytest.fixture
def editor(settings, sample_records) -> OrgChartEditor:
    """Create an editor session with the sample records imported."""
    session = OrgChartEditor(settings=settings)
    session.import_records(sample_records)
    return session


@pytest.fixture
def sample_csv_file(tmp_path, sample_csv) -> Path:
    """Write the sample CSV to a temporary file."""
    file_path = tmp_path / "org.csv"
    file_path.write_text(sample_csv, encoding="utf-8")
    return file_path
