import pytest

from tidestudio.controller import StudioController
from tidestudio.notify import NotificationQueue, VirtualScheduler
from tidestudio.viewport import MemoryViewPort

from fakes import FakeTransport, configured


@pytest.fixture
def view():
    return MemoryViewPort()


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def notifications(scheduler):
    return NotificationQueue(scheduler)


@pytest.fixture
def make_controller(view, scheduler):
    def _make(responses=None):
        transport = FakeTransport(responses if responses is not None else configured())
        controller = StudioController(transport, view, scheduler=scheduler)
        return controller, transport
    return _make
