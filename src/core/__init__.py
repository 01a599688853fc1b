"""Core domain package for memeguard.

Core contains the message validation rules and the moderation pipeline
without any Telegram or logging-setup specific code, keeping the decision
logic portable and easy to test.
"""
