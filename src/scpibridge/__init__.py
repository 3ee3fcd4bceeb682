"""
SCPI bridge server

Serves an instrument over a line oriented SCPI text protocol.

- Conduit: abstraction of a bi-directional channel to a client. Combines 2 streams for reading and writing.
- InstrumentBridge: the capabilities an instrument provides - identity, sample rates and depths,
  acquisition control and channel/trigger configuration. One implementation per instrument family.
- tokenize: cracks a line such as `C2:OFFS 0.5` into subject, verb, query flag and arguments.
- BridgeCommandHandler: routes a tokenized command to the bridge. Commands in the device namespace
  (no subject), the trigger namespace (TRIG) or addressed to a channel (C1, D0, ...)
  are looked up in a table that also gates channel commands by channel type.
- SCPISession: reads lines from a conduit, dispatches each one and writes replies to queries,
  until the client disconnects or sends EXIT.
- SCPIServer: accepts TCP clients and serves their sessions one after another.


Notes:

Commands never produce a reply. An unknown command, a command for the wrong channel type or an
argument that doesn't parse is dropped - it is logged and posted as an event on the session, but the
client is told nothing. Only queries that are recognized produce a reply.

Sessions are single threaded, one line is fully handled before the next one is read. The server does
not lock the bridge; if several servers drive the same instrument, the bridge must serialize access.
"""
