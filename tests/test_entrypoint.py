import socket

import pytest

from docextract import __main__ as entrypoint


def test_main_exits_non_zero_when_port_taken(monkeypatch):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]

        monkeypatch.setattr(entrypoint.settings, "host", "127.0.0.1")
        monkeypatch.setattr(entrypoint.settings, "port", port)

        with pytest.raises(SystemExit) as info:
            entrypoint.main()

    assert info.value.code not in (0, None)
