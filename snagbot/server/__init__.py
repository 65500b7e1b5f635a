"""HTTP surface for SnagBot.

WHY: In HTTP mode Slack posts events and slash commands to public
webhook URLs, and orchestrators need health and readiness probes.

HOW: app.py builds a FastAPI app around a ServiceHub and, when given one,
a slack-bolt App mounted on /api/events and /api/commands.
"""
