import pytest


@pytest.fixture(scope="session")
def _stockroom_domain():
    """Initialize the stockroom domain once per session."""
    from stockroom.domain import stockroom

    stockroom.init()
    return stockroom


@pytest.fixture(autouse=True)
def run_around_tests(_stockroom_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _stockroom_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def sequential_ids():
    """Deterministic movement id factory: mv-1, mv-2, ..."""
    counter = iter(range(1, 10_000))

    def _next_id():
        return f"mv-{next(counter)}"

    return _next_id
