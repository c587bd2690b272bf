"""Headless client core for the reminder mobile app.

Mirrors what the app screens do: talk to the API, poll the list while it is
visible, schedule on-device notifications and react when they fire.
"""
