"""Core domain package for the channel relay.

Core contains filtering, comment correlation, and dispatch logic without any
Telegram-specific code, keeping the business logic portable.
"""
