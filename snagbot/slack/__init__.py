"""Slack integration for SnagBot.

WHY: Slack delivers channel messages and `/snagbot` invocations; SnagBot
answers with threaded replies and ephemeral command responses. This
package is the only place that knows Slack payload shapes.

HOW: bot.py builds a slack-bolt App whose listeners translate Slack
payloads into core types and hand them to the MessageProcessor and
CommandService. The same App serves HTTP webhooks (via the FastAPI
server) or Socket Mode (via bot.main()).

RULES:
- Listeners must return quickly; bolt acks and runs them on its worker pool
- Slash command replies are ephemeral (visible to the requester only)
- Socket Mode requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN
"""
