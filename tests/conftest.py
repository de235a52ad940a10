# tests/conftest.py
import pytest
from repository.ticket_repository import TicketRepository


@pytest.fixture
def data_dir(tmp_path) -> str:
    return str(tmp_path / "data")


@pytest.fixture
def repo(data_dir) -> TicketRepository:
    return TicketRepository.open(data_dir)
