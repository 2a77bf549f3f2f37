import sys
import types

import pytest


class FakePortAudioError(Exception):
    pass


class FakeInputStream:
    """Records its arguments; ``feed`` blocks are delivered when started."""

    instances = []
    feed = []
    fail_on_start = False

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.started = False
        self.closed = False
        FakeInputStream.instances.append(self)

    def start(self):
        if FakeInputStream.fail_on_start:
            raise FakePortAudioError("Error opening InputStream: Invalid device")
        self.started = True
        callback = self.kwargs["callback"]
        for block in FakeInputStream.feed:
            callback(block, len(block), None, None)

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True


@pytest.fixture
def fake_sounddevice(monkeypatch):
    # Stand-in device layer so no PortAudio device is needed
    FakeInputStream.instances = []
    FakeInputStream.feed = []
    FakeInputStream.fail_on_start = False
    module = types.SimpleNamespace(
        InputStream=FakeInputStream, PortAudioError=FakePortAudioError
    )
    monkeypatch.setitem(sys.modules, "sounddevice", module)
    return FakeInputStream
