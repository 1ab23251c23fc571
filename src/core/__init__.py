"""Core domain package for the catalog bot.

Core contains the guardrails, rate limiting, and request pipeline without any
Telegram, Anthropic, or Shopify-specific code, keeping the policy portable.
"""
