# tcpchat

Small TCP servers and clients over plain sockets: an echo pair that bounces a
single message back to its sender, and a chat pair where every message a
client sends is relayed to every connected client.

The servers listen on port 8080 on every interface; the clients connect to
port 8080 on `127.0.0.1`. Neither is configurable from the command line.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Echo server and client

Start the server in one terminal:

```
tcpchat-echo-server
```

It prints `Server listening on port 8080` and then serves connections one at
a time: it reads one message of up to 1024 bytes, sends it back and closes the
connection. What it receives is logged at INFO level. Stop it with Ctrl-C.

In another terminal, send a message:

```
tcpchat-echo-client "hello there"
```

The client prints `Sent: ...` and `Received: ...`. Only the first argument is
sent. Run without a message, it prints a usage line and exits with status 1.
If the connection fails it prints the error and exits with status 1.

## Chat server and client

Start the chat server:

```
tcpchat-chat-server
```

It accepts up to 32 pending connections, logs each new connection and every
message, and forwards each message to all connected clients, the sender
included. Closed connections are dropped from the relay list.

Then start clients, each in its own terminal:

```
tcpchat-chat-client
```

Each client prompts with `input: `, sends the line you type (without its
newline, followed by a NUL byte), then waits for one read from the server and
shows it as `msg: ...`. It stops at end of input.

## Using the library

The clients and servers are context managers that close their sockets on exit.

```python
from tcpchat.echo_client import EchoClient

with EchoClient(8080, "127.0.0.1") as client:
    reply = client.send_and_receive_message("hello")
```

`send_and_receive_message` returns the reply text, or `"Server closed
connection.\n"` / `"Read error.\n"` when no reply could be read.

```python
from tcpchat.echo_server import EchoServer

with EchoServer(0) as server:   # 0 picks a free port
    print(server.port)
    data = server.serve_one()   # handle a single connection
```

`ChatServer` (in `tcpchat.chat_server`) offers `poll_once(timeout)`, which
handles pending events and returns the messages it relayed, and
`handle_connections()`, which polls forever. `ChatClient` (in
`tcpchat.chat_client`) has `send(message)`, `receive(timeout)` and
`handle_connections(lines, output)`.

`tcpchat.sockets` holds the shared helpers: `create_socket`,
`create_address`, `create_server_socket`, `set_non_blocking` and
`check_error`. Failures while setting up sockets (bad addresses, refused
connections, bind or listen errors) raise `tcpchat.sockets.ChatError`.

## What it does not do

There is no framing beyond single reads of 1024 bytes, no usernames, no
encryption and no persistence of messages. The echo server handles one client
at a time; the chat client only reads from the server right after it sends a
line, so messages from others arrive with your next send.