"""
Reminder App Backend Application Package

Personal reminders API, expiry sweeper, push dispatch and the headless
client core (polling, local notifications) used by the mobile app.
"""
