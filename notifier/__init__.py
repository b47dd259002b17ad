"""
Notifier package for delivering changelog messages.

This package contains:
- Delivery channels (bot token API, incoming webhook, console)
- The run orchestrator tying fetch, diff, format, deliver and save together
"""
