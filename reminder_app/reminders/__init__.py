"""Reminder lifecycle: status-transition rules, the expiry sweeper and push dispatch.

The sweeper runs inside the API process as an asyncio task started and
stopped by the application lifespan.
"""
