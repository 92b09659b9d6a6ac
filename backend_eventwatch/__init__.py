"""
Backend EventWatch: contract event watcher for EVM nodes.

Keeps one WebSocket log subscription alive against a node, decodes each
NumberUpdatedEvent, re-reads the contract value at the event's block and
reports it. Modular layout with clear separation between the node client,
contract interface, event listener and reporter.
"""

__version__ = "0.1.0"
