import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import gradebook
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from gradebook.store import RecordStore, load_records


SAMPLE_TEXT = """4,3
Amy,Zephyr,hw1,90,hw2,80,exam,70
Bob,Adams,hw1,85.5,hw2,95,exam,100
Cara,Moss,hw1,60,hw2,70,exam,80
Dan,Adams,hw1,100,hw2,90,exam,95
"""


# Common test fixtures
@pytest.fixture
def sample_rows():
    """Rows in input order, deliberately unsorted."""
    return [
        ("Amy", "Zephyr", [("hw1", 90.0), ("hw2", 80.0), ("exam", 70.0)]),
        ("Bob", "Adams", [("hw1", 85.5), ("hw2", 95.0), ("exam", 100.0)]),
        ("Cara", "Moss", [("hw1", 60.0), ("hw2", 70.0), ("exam", 80.0)]),
        ("Dan", "Adams", [("hw1", 100.0), ("hw2", 90.0), ("exam", 95.0)]),
    ]


@pytest.fixture
def sample_store(sample_rows) -> RecordStore:
    """Sample rows loaded by family name, ascending."""
    return load_records(sample_rows)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Write the sample gradebook to a temporary file."""
    path = tmp_path / "input_list.txt"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_gradebook_logger():
    """Drop handlers the CLI attaches so they never outlive a captured stream."""
    import logging

    logger = logging.getLogger("gradebook")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
