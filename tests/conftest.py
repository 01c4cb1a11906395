import pytest

from credentials import SessionIdentity
from proxy.dispatcher import DispatchContext
from tests.helpers import RecordingTransport, make_config


@pytest.fixture
def session():
    return SessionIdentity()


@pytest.fixture
def make_context(session):
    def _make(handler, **config_overrides) -> DispatchContext:
        return DispatchContext(
            config=make_config(**config_overrides),
            session=session,
            transport=RecordingTransport(handler),
        )
    return _make
