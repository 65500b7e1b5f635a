"""SnagBot — converts dollar amounts in Slack messages into Bunnings snags.

WHY: Quoting a price in a channel is more fun when someone tells you how
many sausage sizzles it would buy. SnagBot watches messages for dollar
amounts and replies in-thread with the equivalent number of a per-channel
configurable unit ("That's nearly 15 Bunnings snags!").

HOW: Three layers — core (extract, sum, convert, format, command parsing),
store (per-channel configuration, in-memory or Redis) and platform glue
(slack-bolt listeners, FastAPI webhook server, Socket Mode). The core never
imports Slack; the glue never does arithmetic.

RULES:
- All money is decimal.Decimal, never float
- One configuration store per process, built by container.build_container()
- Slack-specific payload shapes stop at snagbot.slack
"""

__version__ = "0.1.0"
