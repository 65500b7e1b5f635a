"""Message-to-response pipeline and slash-command handling.

WHY: The core package holds everything SnagBot actually computes — the
dollar extraction, conversion and phrasing, plus the command grammar.
None of it knows about Slack, HTTP or Redis.

HOW: models.py defines the shared dataclasses, calculator.py the pure
extraction/conversion/formatting functions, pipeline.py the orchestrator
that ties them to a configuration store, and commands.py/messages.py the
`/snagbot` command grammar and reply wording.

RULES:
- No Slack SDK imports in this package
- Stores are injected, never looked up globally
"""
