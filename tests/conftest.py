"""Test configuration for the tabular analytics engine."""

from pathlib import Path
import sys

import pytest


# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def simple_table():
    """The three-row ``a,b`` table used throughout the docs."""
    from tabular_tlbx.data import Table

    return Table.from_values(["a", "b"], [[1, 2], [3, 4], [5, 6]])


@pytest.fixture
def mixed_text() -> str:
    """Delimited text with a label column, missing cells and a stray text cell."""
    return "\n".join(
        [
            "name,height,weight,score",
            "ann,1.60,55,10",
            "bob,1.80,,12",
            "cid,,70,n/a",
            "dan,1.75,80,14",
            "eve,1.65,60,",
        ],
    )


@pytest.fixture
def mixed_table(mixed_text: str):
    from tabular_tlbx.data import parse_table

    return parse_table(mixed_text)
