from __future__ import annotations

import pytest

from netutil.logger import NetworkLogger

from stubs import RecordedLogs


@pytest.fixture
def recorded() -> RecordedLogs:
    return RecordedLogs()


@pytest.fixture
def network_logger(recorded: RecordedLogs) -> NetworkLogger:
    return (
        NetworkLogger()
        .add_request_hook(recorded.entries.append)
        .add_response_hook(recorded.entries.append)
        .add_error_hook(recorded.entries.append)
    )
