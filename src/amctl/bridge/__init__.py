"""Bridge layer — transports, routing, and the foreground executor.

The bridge composes services into a running system. It may import from
every layer below it but never from commands or output.
"""
