"""
The conduit package provides an abstraction of a bi-directional stream to a client.
Concrete implementations are an in-memory pair of streams and a TCP socket.
"""
