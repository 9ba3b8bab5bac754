"""fanlog routing — level-gated fan-out of log records to sinks.

The ``Logger`` in ``fanlog.routing.dispatcher`` formats each admitted emit
once and writes it to every sink subscribed to that level.  Sinks are
pluggable targets: the console, an SMTP relay, a batching Telegram sink, or
any object implementing the ``BaseSink`` protocol.
"""
