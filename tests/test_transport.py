from __future__ import annotations

import logging
import socket
from collections.abc import Iterator

import pytest

from nntpkit.errors import NNTPError, NNTPProtocolError, NNTPSyncError
from nntpkit.transport import SocketTransport, split_lines
from nntpkit.types import Response


@pytest.fixture
def pair() -> Iterator[tuple[SocketTransport, socket.socket]]:
    client, server = socket.socketpair()
    client.settimeout(5)
    server.settimeout(5)
    transport = SocketTransport(client)
    yield transport, server
    transport.close()
    server.close()


def recv_all(sock: socket.socket, size: int) -> bytes:
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def test_read_response(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b"200 news.example.com ready\r\n201 \r\n")
    assert transport.read_response() == Response(200, "news.example.com ready")
    assert transport.read_response() == Response(201, "")


@pytest.mark.parametrize("line", [b"hello there\r\n", b"99 too low\r\n", b"600 x\r\n"])
def test_read_response_invalid(
    pair: tuple[SocketTransport, socket.socket], line: bytes
) -> None:
    transport, server = pair
    server.sendall(line)
    with pytest.raises(NNTPProtocolError):
        transport.read_response()


def test_read_response_4xx_is_not_raised(
    pair: tuple[SocketTransport, socket.socket],
) -> None:
    transport, server = pair
    server.sendall(b"411 no such group\r\n")
    assert transport.read_response() == Response(411, "no such group")


def test_read_response_closed(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.close()
    with pytest.raises(NNTPError):
        transport.read_response()


def test_send_command(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b"211 3 1 3 alt.test\r\n")
    response = transport.send_command("GROUP", "alt.test")
    assert response == Response(211, "3 1 3 alt.test")
    assert recv_all(server, 16) == b"GROUP alt.test\r\n"


def test_send_command_drops_empty_args(
    pair: tuple[SocketTransport, socket.socket],
) -> None:
    transport, server = pair
    server.sendall(b"231 list follows\r\n")
    transport.send_command("NEWGROUPS", "220101 144001 GMT", "")
    expected = b"NEWGROUPS 220101 144001 GMT\r\n"
    assert recv_all(server, len(expected)) == expected


def test_read_block(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(
        b"220 1 <1@example.com>\r\n"
        b"Subject: test\r\n"
        b"\r\n"
        b"..leading dot\r\n"
        b". \r\n"
        b"last line\r\n"
        b".\r\n"
        b"223 trailing reply\r\n"
    )
    assert transport.read_response().code == 220
    assert transport.read_block() == [
        "Subject: test\n",
        "\n",
        ".leading dot\n",
        " \n",
        "last line\n",
    ]
    assert transport.read_response() == Response(223, "trailing reply")


def test_read_block_split_across_reads(
    pair: tuple[SocketTransport, socket.socket],
) -> None:
    transport, server = pair
    server.sendall(b"one\r\ntw")
    server.sendall(b"o\r\n.")
    server.sendall(b"\r\n")
    assert transport.read_block() == ["one\n", "two\n"]


def test_read_block_empty(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b".\r\n")
    assert transport.read_block() == []


def test_read_block_closed(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b"one\r\n")
    server.close()
    with pytest.raises(NNTPError):
        transport.read_block()
    with pytest.raises(NNTPSyncError):
        transport.send_command("QUIT")


def test_read_block_undecodable(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b"caf\xe9\r\n.\r\n")
    (line,) = transport.read_block()
    assert line.encode("utf-8", "surrogateescape") == b"caf\xe9\n"


def test_send_data(pair: tuple[SocketTransport, socket.socket]) -> None:
    transport, server = pair
    server.sendall(b"240 article posted\r\n")
    transport.send_data(["Subject: test", "", ".hidden", "body\n"])
    transport.send_data("more\nlines")
    assert transport.end_data() == Response(240, "article posted")
    expected = b"Subject: test\r\n\r\n..hidden\r\nbody\r\nmore\r\nlines\r\n.\r\n"
    assert recv_all(server, len(expected)) == expected


def test_debug_trace_masks_password(
    pair: tuple[SocketTransport, socket.socket],
    caplog: pytest.LogCaptureFixture,
) -> None:
    transport, server = pair
    transport.debug = True
    server.sendall(b"281 ok\r\n")
    with caplog.at_level(logging.DEBUG, logger="nntpkit.transport"):
        transport.send_command("AUTHINFO PASS", "secret")
    assert "AUTHINFO PASS ********" in caplog.text
    assert "secret" not in caplog.text
    assert "<<< 281 ok" in caplog.text


def test_no_trace_without_debug(
    pair: tuple[SocketTransport, socket.socket],
    caplog: pytest.LogCaptureFixture,
) -> None:
    transport, server = pair
    server.sendall(b"205 bye\r\n")
    with caplog.at_level(logging.DEBUG, logger="nntpkit.transport"):
        transport.send_command("QUIT")
    assert caplog.text == ""


def test_connect_refused() -> None:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(OSError):
        SocketTransport.connect("127.0.0.1", port, timeout=5)


@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        ("one\ntwo\n", ["one", "two"]),
        ("one\r\ntwo", ["one", "two"]),
        ("\n", [""]),
        ("", []),
        (
            "page1\x0cpage2\x0bvt\x1cfs\x85nel\u2028ls",
            ["page1\x0cpage2\x0bvt\x1cfs\x85nel\u2028ls"],
        ),
        ("cr\rinside\n", ["cr\rinside"]),
        (["a\n.\nb", "", "c\r\n"], ["a", ".", "b", "", "c"]),
        (["tail\n\n"], ["tail", ""]),
    ],
)
def test_split_lines(lines: str | list[str], expected: list[str]) -> None:
    assert list(split_lines(lines)) == expected


def test_send_data_embedded_newlines(
    pair: tuple[SocketTransport, socket.socket],
) -> None:
    transport, server = pair
    server.sendall(b"240 article posted\r\n")
    transport.send_data(["Subject: x", "", "a\n.\nQUIT", ".\n"])
    assert transport.end_data() == Response(240, "article posted")
    expected = b"Subject: x\r\n\r\na\r\n..\r\nQUIT\r\n..\r\n.\r\n"
    data = recv_all(server, len(expected))
    assert data == expected
    assert b"\n.\n" not in data
